"""State holders for the participant management views.

Each view model keeps its own copy of server data and re-fetches to stay in
sync; nothing is shared between them.
"""
import logging
from typing import Any, Dict, List, Optional

from .alerts import AlertSink
from .errors import ApiError
from .participant_client import ParticipantClient
from .payloads import extract_items, post_id_of, display_name_of

logger = logging.getLogger(__name__)

PENDING_TAB = "pending"
ACCEPTED_TAB = "accepted"
ALL_TAB = "all"
TABS = (PENDING_TAB, ACCEPTED_TAB, ALL_TAB)

MANAGE_PAGE_SIZE = 50
INBOX_PAGE_SIZE = 20

WELCOME_MESSAGE = "Welcome aboard!"
DECLINE_MESSAGE = "Sorry, this request doesn't fit the event."


class ManageParticipants:
    """Creator view of one post: pending, accepted and all participants."""

    def __init__(self, post_id: int, client: ParticipantClient, alerts: Optional[AlertSink] = None):
        self.post_id = post_id
        self.client = client
        self.alerts = alerts or AlertSink()
        self.active_tab = PENDING_TAB
        self.lists: Dict[str, List[Dict[str, Any]]] = {tab: [] for tab in TABS}
        self.errors: Dict[str, str] = {}
        self.loading = False
        self.refreshing = False
        self.processing_id: Optional[int] = None

    @property
    def pending_requests(self) -> List[Dict[str, Any]]:
        return self.lists[PENDING_TAB]

    @property
    def accepted_participants(self) -> List[Dict[str, Any]]:
        return self.lists[ACCEPTED_TAB]

    @property
    def all_participants(self) -> List[Dict[str, Any]]:
        return self.lists[ALL_TAB]

    @property
    def items(self) -> List[Dict[str, Any]]:
        return self.lists[self.active_tab]

    def _fetch(self, tab: str) -> List[Dict[str, Any]]:
        if tab == PENDING_TAB:
            return extract_items(self.client.get_pending_requests(self.post_id, 0, MANAGE_PAGE_SIZE))
        if tab == ACCEPTED_TAB:
            return extract_items(self.client.get_accepted_participants(self.post_id))
        return extract_items(self.client.get_participants(self.post_id, 0, MANAGE_PAGE_SIZE))

    def _load_tab(self, tab: str) -> bool:
        try:
            self.lists[tab] = self._fetch(tab)
        except ApiError as exc:
            logger.error("Loading %s list for post %s failed: %s", tab, self.post_id, exc.message)
            self.lists[tab] = []
            self.errors[tab] = exc.message
            return False
        self.errors.pop(tab, None)
        return True

    def load(self) -> bool:
        """Fetch all three lists. One failing list raises a single alert; the others keep their data."""
        self.loading = True
        try:
            results = [self._load_tab(tab) for tab in TABS]
        finally:
            self.loading = False
        if not all(results):
            self.alerts.error("Could not load the participant lists")
        return all(results)

    def refresh(self) -> bool:
        self.refreshing = True
        try:
            return self.load()
        finally:
            self.refreshing = False

    def select_tab(self, tab: str, refresh: bool = False) -> List[Dict[str, Any]]:
        """Switch tabs. Lists are only re-fetched when asked, so they can be stale."""
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab
        if refresh:
            self._load_tab(tab)
        return self.items

    def respond(self, participant: Dict[str, Any], approve: bool, message: str = "") -> bool:
        self.processing_id = participant["id"]
        try:
            self.client.respond_to_join_request(self.post_id, participant["id"], approve, message)
        except ApiError as exc:
            self.alerts.error(exc.message)
            return False
        finally:
            self.processing_id = None

        verb = "accepted" if approve else "declined"
        self.alerts.success(f"Request from {display_name_of(participant)} {verb}")
        self.load()
        return True


class PendingRequestsInbox:
    """Every pending request across the posts the current user created."""

    def __init__(self, client: ParticipantClient, alerts: Optional[AlertSink] = None, page_size: int = INBOX_PAGE_SIZE):
        self.client = client
        self.alerts = alerts or AlertSink()
        self.page_size = page_size
        self.requests: List[Dict[str, Any]] = []
        self.page = 0
        self.has_more = True
        self.loading = False
        self.refreshing = False
        self.processing_id: Optional[int] = None

    def load(self, page: int = 0, refresh: bool = False) -> bool:
        self.loading = True
        try:
            response = self.client.get_all_pending_requests_for_current_user(page, self.page_size)
        except ApiError as exc:
            self.alerts.error(exc.message or "Could not load the pending requests")
            return False
        finally:
            self.loading = False

        new_requests = extract_items(response)
        if refresh or page == 0:
            self.requests = new_requests
        else:
            self.requests = self.requests + new_requests
        self.has_more = len(new_requests) == self.page_size
        self.page = page
        return True

    def refresh(self) -> bool:
        self.refreshing = True
        try:
            return self.load(0, refresh=True)
        finally:
            self.refreshing = False

    def load_more(self) -> bool:
        if self.loading or not self.has_more:
            return False
        return self.load(self.page + 1)

    def respond(self, request: Dict[str, Any], approve: bool) -> bool:
        self.processing_id = request["id"]
        message = WELCOME_MESSAGE if approve else DECLINE_MESSAGE
        try:
            self.client.respond_to_join_request(post_id_of(request), request["id"], approve, message)
        except ApiError as exc:
            self.alerts.error(exc.message)
            return False
        finally:
            self.processing_id = None

        verb = "accepted" if approve else "declined"
        self.alerts.success(f"Request from {display_name_of(request)} {verb}")
        self.requests = [r for r in self.requests if r["id"] != request["id"]]
        return True
