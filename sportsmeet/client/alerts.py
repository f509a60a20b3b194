import logging
from typing import Callable, List, NamedTuple, Optional

logger = logging.getLogger(__name__)


class Alert(NamedTuple):
    title: str
    message: str


class AlertSink:
    """Where view models send user-facing messages.

    Alerts are kept in ``alerts`` and forwarded to ``on_alert`` when one is given.
    """

    def __init__(self, on_alert: Optional[Callable[[Alert], None]] = None):
        self.alerts: List[Alert] = []
        self.on_alert = on_alert

    def show(self, title: str, message: str):
        alert = Alert(title, message)
        self.alerts.append(alert)
        logger.info("Alert: %s - %s", title, message)
        if self.on_alert:
            self.on_alert(alert)

    def success(self, message: str):
        self.show("Success", message)

    def error(self, message: str):
        self.show("Error", message)

    @property
    def last(self) -> Optional[Alert]:
        return self.alerts[-1] if self.alerts else None
