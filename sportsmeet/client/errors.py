from typing import Any, Optional

import httpx


class ApiError(Exception):
    """The one error a client call raises, carrying a user-facing message."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def extract_error_message(response: httpx.Response, default_message: str) -> str:
    """Pick the server's message out of an error body, falling back to the default."""
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or default_message

    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                # FastAPI validation errors: [{"loc": ..., "msg": ...}, ...]
                first = value[0]
                if isinstance(first, dict) and first.get("msg"):
                    return first["msg"]
    elif isinstance(data, str) and data:
        return data
    return default_message
