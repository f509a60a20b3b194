import logging
import uuid
from typing import Any, Dict, List, Optional

from sportsmeet.core.config import settings
from .api_client import ApiClient

logger = logging.getLogger(__name__)


class ParticipantClient(ApiClient):
    """Stateless wrapper over the /api/sports-posts/participants endpoints.

    Methods return the decoded JSON body as-is; callers unwrap lists with
    ``payloads.extract_items``.
    """

    path_prefix = "/api/sports-posts/participants"

    def join_sports_post(self, post_id: int, join_message: str = "", idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        """Ask to join a post. The response ``status`` says whether it was accepted or is pending."""
        idempotency_key = idempotency_key or str(uuid.uuid4())
        logger.info("Joining sports post %s", post_id)
        return self._send_text(
            "POST", f"/{post_id}/join",
            join_message or settings.DEFAULT_JOIN_MESSAGE,
            "Could not send the join request",
            headers={"Idempotency-Key": idempotency_key},
        )

    def leave_sports_post(self, post_id: int) -> Dict[str, Any]:
        logger.info("Leaving sports post %s", post_id)
        return self._request("DELETE", f"/{post_id}/leave", "Could not leave the sports post")

    def get_user_participation_status(self, post_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/{post_id}/participation-status", "Could not load the participation status")

    def get_participants(self, post_id: int, page: int = 0, size: int = 10) -> Any:
        """All requests on the post, PENDING included (creator view)."""
        return self._request(
            "GET", f"/{post_id}", "Could not load the participants",
            params={"page": page, "size": size},
        )

    def get_accepted_participants(self, post_id: int) -> Any:
        return self._request("GET", f"/{post_id}/accepted", "Could not load the accepted participants")

    def get_pending_requests(self, post_id: int, page: int = 0, size: int = 10) -> Any:
        return self._request(
            "GET", f"/{post_id}/pending", "Could not load the pending requests",
            params={"page": page, "size": size},
        )

    def respond_to_join_request(self, post_id: int, participant_id: int, approve: bool, response_message: str = "") -> Dict[str, Any]:
        logger.info("Responding to request %s on post %s (approve=%s)", participant_id, post_id, approve)
        return self._send_text(
            "POST", f"/{post_id}/participants/{participant_id}/respond",
            response_message or "",
            "Could not process the join request",
            params={"approve": "true" if approve else "false"},
        )

    def get_participation_history(self, status: str = "ALL", page: int = 0, size: int = 10) -> Any:
        return self._request(
            "GET", "/participation-history", "Could not load the participation history",
            params={"status": status, "page": page, "size": size},
        )

    def get_all_pending_requests_for_current_user(self, page: int = 0, size: int = 20) -> Any:
        return self._request(
            "GET", "/my-pending-requests", "Could not load the pending requests",
            params={"page": page, "size": size},
        )

    def get_user_joined_posts(self, page: int = 0, size: int = 10) -> Any:
        return self._request(
            "GET", "/my-joined-posts", "Could not load the joined posts",
            params={"page": page, "size": size},
        )

    def get_user_created_posts(self, page: int = 0, size: int = 10) -> Any:
        return self._request(
            "GET", "/my-created-posts", "Could not load the created posts",
            params={"page": page, "size": size},
        )

    def has_user_joined(self, post_id: int) -> bool:
        return bool(self._request("GET", f"/{post_id}/has-joined", "Could not check the participation"))

    def has_pending_request(self, post_id: int) -> bool:
        return bool(self._request("GET", f"/{post_id}/has-pending-request", "Could not check the pending request"))

    def count_participants(self, post_id: int) -> int:
        return int(self._request("GET", f"/{post_id}/count", "Could not count the participants") or 0)

    def batch_approve_requests(self, post_id: int, participant_ids: List[int], response_message: str = "") -> Dict[str, Any]:
        return self._request(
            "POST", f"/{post_id}/batch-approve", "Could not approve the requests",
            json={"participant_ids": list(participant_ids), "response_message": response_message},
        )

    def batch_decline_requests(self, post_id: int, participant_ids: List[int], response_message: str = "") -> Dict[str, Any]:
        return self._request(
            "POST", f"/{post_id}/batch-decline", "Could not decline the requests",
            json={"participant_ids": list(participant_ids), "response_message": response_message},
        )
