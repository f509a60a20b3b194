from typing import Any, Dict

from .api_client import ApiClient


class AuthClient(ApiClient):

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/auth/register", "Could not create the account",
            json={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and keep the token and profile for later calls."""
        token = self._request(
            "POST", "/auth/login", "Could not log in",
            json={"email": email, "password": password},
        )
        self.token_store.save(token["access_token"])
        user = self._request("GET", "/users/me", "Could not load the profile")
        self.token_store.save(token["access_token"], user_data=user)
        return user

    def logout(self):
        self.token_store.clear()
