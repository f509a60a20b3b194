import json
import logging
import os
from typing import Any, Dict, Optional

from sportsmeet.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_DATA_KEY = "userData"


class TokenStore:
    """Credentials kept on local disk as a small JSON document."""

    def __init__(self, data_file_path: Optional[str] = None):
        self.data_file_path = data_file_path or settings.TOKEN_FILE

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.data_file_path):
            return {}
        try:
            with open(self.data_file_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("Credential file %s is corrupted; ignoring it", self.data_file_path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]):
        directory = os.path.dirname(self.data_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.data_file_path, "w") as f:
            json.dump(data, f, indent=4)

    def get_access_token(self) -> Optional[str]:
        return self._load().get(ACCESS_TOKEN_KEY)

    def get_user_data(self) -> Optional[Dict[str, Any]]:
        return self._load().get(USER_DATA_KEY)

    def save(self, access_token: str, refresh_token: Optional[str] = None, user_data: Optional[Dict[str, Any]] = None):
        data = self._load()
        data[ACCESS_TOKEN_KEY] = access_token
        if refresh_token is not None:
            data[REFRESH_TOKEN_KEY] = refresh_token
        if user_data is not None:
            data[USER_DATA_KEY] = user_data
        self._save(data)

    def clear(self):
        data = self._load()
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_DATA_KEY):
            data.pop(key, None)
        self._save(data)
        logger.info("Cleared stored credentials")
