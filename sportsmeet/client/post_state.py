"""Client-side mirror of the current user's participation in one sports post.

The server owns the real state. This object flips its flags optimistically
when the user acts, reconciles with the server's answer, and puts the previous
state back when the call fails.

    NONE --join--> PENDING --(creator)--> ACCEPTED | REJECTED
    NONE --join, auto-approve--> ACCEPTED
    PENDING | ACCEPTED | REJECTED --leave--> NONE
"""
import logging
import threading
import uuid
from enum import Enum
from typing import Any, Dict, Optional

from sportsmeet.schemas.participant_schemas import ParticipantStatus
from .alerts import AlertSink
from .errors import ApiError
from .participant_client import ParticipantClient
from .payloads import parse_status

logger = logging.getLogger(__name__)


class ParticipationState(str, Enum):
    NONE = "NONE"
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    @classmethod
    def from_status(cls, status: Optional[ParticipantStatus]) -> "ParticipationState":
        return cls.NONE if status is None else cls(status.value)


def _first(post: Dict[str, Any], *keys, default=None):
    for key in keys:
        if post.get(key) is not None:
            return post[key]
    return default


def initial_state(post: Dict[str, Any]) -> ParticipationState:
    """Derive the starting state from flags embedded in the post payload."""
    status = parse_status({"status": _first(post, "participation_status", "participationStatus")})
    if status is not None:
        return ParticipationState.from_status(status)
    if _first(post, "is_participant", "isParticipant", "is_joined", default=False):
        return ParticipationState.ACCEPTED
    if _first(post, "has_pending_request", "hasPendingRequest", default=False):
        return ParticipationState.PENDING
    return ParticipationState.NONE


def _server_count(response: Any) -> Optional[int]:
    """Accepted count of the post embedded in a participant payload, if any."""
    post = response.get("sports_post") if isinstance(response, dict) else None
    if isinstance(post, dict) and post.get("current_participants") is not None:
        return int(post["current_participants"])
    return None


class PostParticipation:

    def __init__(self, post: Dict[str, Any], client: ParticipantClient, alerts: Optional[AlertSink] = None):
        self.post_id = post["id"]
        self.title = post.get("title", "")
        self.auto_approve = bool(_first(post, "auto_approve", "autoApprove", default=False))
        self.max_participants = _first(post, "max_participants", "maxParticipants")
        self.state = initial_state(post)
        self.participant_count = int(_first(post, "current_participants", "participant_count", "participantCount", default=0))
        self.client = client
        self.alerts = alerts or AlertSink()
        self._in_flight = threading.Lock()

    @property
    def loading(self) -> bool:
        return self._in_flight.locked()

    @property
    def is_joined(self) -> bool:
        return self.state == ParticipationState.ACCEPTED

    @property
    def has_pending_request(self) -> bool:
        return self.state == ParticipationState.PENDING

    def _snapshot(self):
        return self.state, self.participant_count

    def _restore(self, snapshot):
        self.state, self.participant_count = snapshot

    def _expected_join_state(self) -> ParticipationState:
        return ParticipationState.ACCEPTED if self.auto_approve else ParticipationState.PENDING

    def join(self, message: str = "") -> Optional[Dict[str, Any]]:
        """Ask to join. Returns the server response, or None when nothing was sent or the call failed."""
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Join on post %s ignored: a request is already in flight", self.post_id)
            return None
        try:
            if self.state == ParticipationState.ACCEPTED:
                self.alerts.show("Already joined", "You have already joined this event")
                return None
            if self.state == ParticipationState.PENDING:
                self.alerts.show("Request pending", "Your join request is waiting for the creator's approval")
                return None

            snapshot = self._snapshot()
            self.state = self._expected_join_state()
            if self.state == ParticipationState.ACCEPTED:
                self.participant_count += 1

            try:
                response = self.client.join_sports_post(self.post_id, message, idempotency_key=str(uuid.uuid4()))
            except ApiError as exc:
                self._restore(snapshot)
                self.alerts.error(exc.message)
                return None

            self._reconcile_join(response, snapshot)
            if self.state == ParticipationState.ACCEPTED:
                self.alerts.success("You have joined this event")
            else:
                self.alerts.success("Your join request was sent and is waiting for approval")
            return response
        finally:
            self._in_flight.release()

    def _reconcile_join(self, response: Any, snapshot) -> None:
        status = parse_status(response)
        if status is None:
            # No status in the answer: trust the post's auto-approve flag
            resolved = self._expected_join_state()
            logger.warning("Join response for post %s has no status; assuming %s", self.post_id, resolved.value)
        else:
            resolved = ParticipationState.from_status(status)

        _, count_before = snapshot
        self.state = resolved
        server_count = _server_count(response)
        if server_count is not None:
            self.participant_count = server_count
        else:
            self.participant_count = count_before + (1 if resolved == ParticipationState.ACCEPTED else 0)

    def leave(self) -> Optional[Dict[str, Any]]:
        """Cancel the current participation. Only leaving an accepted seat changes the count."""
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Leave on post %s ignored: a request is already in flight", self.post_id)
            return None
        try:
            if self.state == ParticipationState.NONE:
                return None

            snapshot = self._snapshot()
            was_accepted = self.state == ParticipationState.ACCEPTED
            self.state = ParticipationState.NONE
            if was_accepted:
                self.participant_count = max(0, self.participant_count - 1)

            try:
                response = self.client.leave_sports_post(self.post_id)
            except ApiError as exc:
                self._restore(snapshot)
                self.alerts.error(exc.message)
                return None

            if was_accepted:
                self.alerts.success("You have left this event")
            else:
                self.alerts.success("Your join request was cancelled")
            return response
        finally:
            self._in_flight.release()

    def refresh(self) -> bool:
        """Replace local state with the server's. Returns False if the status could not be loaded."""
        try:
            response = self.client.get_user_participation_status(self.post_id)
        except ApiError as exc:
            self.alerts.error(exc.message)
            return False

        self.state = ParticipationState.from_status(parse_status(response))
        if isinstance(response, dict):
            if response.get("current_participants") is not None:
                self.participant_count = int(response["current_participants"])
            if response.get("auto_approve") is not None:
                self.auto_approve = bool(response["auto_approve"])
        return True
