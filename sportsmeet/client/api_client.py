import logging
from typing import Any, Optional

import httpx

from sportsmeet.core.config import settings
from .errors import ApiError, extract_error_message
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class ApiClient:
    """Shared plumbing for the REST wrappers: bearer token, timeout, error mapping.

    Each call makes exactly one HTTP request. Failures become ``ApiError``;
    a 401 also wipes the stored credentials.
    """

    path_prefix = "/api"

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        base_url = settings.API_BASE_URL if base_url is None else base_url
        self.base_path = f"{base_url.rstrip('/')}{self.path_prefix}"
        self.token_store = token_store or TokenStore()
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self._http = http_client or httpx.Client(timeout=self.timeout)
        self._owns_http = http_client is None

    def close(self):
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = {"Accept": "application/json"}
        token = self.token_store.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, path: str, default_message: str, headers: Optional[dict] = None, **kwargs) -> Any:
        url = f"{self.base_path}{path}"
        try:
            response = self._http.request(method, url, headers=self._headers(headers), **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise ApiError(str(exc) or default_message) from exc

        if response.status_code == 401:
            self.token_store.clear()

        if response.is_error:
            message = extract_error_message(response, default_message)
            logger.error("%s %s -> %s: %s", method, url, response.status_code, message)
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise ApiError(message, status_code=response.status_code, payload=payload)

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if not response.content:
            return None
        return response.json()

    def _send_text(self, method: str, path: str, text: str, default_message: str, headers: Optional[dict] = None, **kwargs) -> Any:
        text_headers = {"Content-Type": "text/plain; charset=utf-8"}
        if headers:
            text_headers.update(headers)
        return self._request(method, path, default_message, headers=text_headers, content=text.encode("utf-8"), **kwargs)
