"""Helpers for reading list and status payloads.

The server answers paged lists with ``{"content": [...], ...}``, but older
deployments sent a bare list or a ``{"data": ...}`` wrapper, so list reads go
through ``extract_items``.
"""
from typing import Any, List, Optional

from sportsmeet.schemas.participant_schemas import ParticipantStatus


def extract_items(payload: Any) -> List[Any]:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("content"), list):
            return payload["content"]
        if "data" in payload:
            return extract_items(payload["data"])
    return []


def parse_status(payload: Any) -> Optional[ParticipantStatus]:
    """The participation status carried by a response, or None if it has none we know."""
    if not isinstance(payload, dict):
        return None
    value = payload.get("status")
    if value is None and isinstance(payload.get("data"), dict):
        value = payload["data"].get("status")
    if not isinstance(value, str):
        return None
    value = value.upper()
    if value == "DECLINED":
        value = ParticipantStatus.REJECTED.value
    try:
        return ParticipantStatus(value)
    except ValueError:
        return None


def post_id_of(request: dict) -> Optional[int]:
    post = request.get("sports_post") or request.get("post") or {}
    return post.get("id") or request.get("post_id")


def display_name_of(request: dict) -> str:
    user = request.get("user") or request
    return user.get("name") or user.get("full_name") or "Unknown user"
