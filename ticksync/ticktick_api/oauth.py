"""OAuth helpers and the credential provider shared by every TickTick client.

The provider holds the tokens inside the shared :class:`Settings` object.
Clients read :attr:`CredentialProvider.access_token` on every request, so a
refresh performed through the provider is visible to clients created before it.
"""
from __future__ import annotations

import secrets
import time
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

import requests

from ..utils.config import Settings
from ..utils.logger import get_logger

log = get_logger(__name__)

AUTH_URL = "https://dida365.com/oauth/authorize"
TOKEN_URL = "https://dida365.com/oauth/token"
REDIRECT_URI = "http://localhost"
SCOPE = "tasks:read tasks:write"

# Refresh a little before the service would reject the token.
EXPIRY_MARGIN_SECONDS = 60


class OAuthError(RuntimeError):
    """Raised when the token endpoint rejects an exchange or refresh."""


class OAuthManager:
    def __init__(self, client_id: str, client_secret: str, timeout: int = 30):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    def authorization_url(self, state: Optional[str] = None) -> str:
        """URL the user opens in a browser to obtain an authorization code."""
        params = {
            "client_id": self.client_id,
            "scope": SCOPE,
            "state": state or secrets.token_hex(16),
            "redirect_uri": REDIRECT_URI,
            "response_type": "code",
        }
        return f"{AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> Dict:
        return self._token_request({
            "code": code.strip(),
            "grant_type": "authorization_code",
            "redirect_uri": REDIRECT_URI,
            "scope": SCOPE,
        }, "Token exchange")

    def refresh(self, refresh_token: str) -> Dict:
        return self._token_request({
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
            "scope": SCOPE,
        }, "Token refresh")

    def _token_request(self, form: Dict[str, str], action: str) -> Dict:
        if not self.client_id or not self.client_secret:
            raise OAuthError("Client ID and client secret must be configured first")

        resp = requests.post(
            TOKEN_URL,
            data=form,
            auth=(self.client_id, self.client_secret),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise OAuthError(f"{action} failed: {resp.status_code} - {resp.text}")

        data = resp.json()
        if not data.get("access_token"):
            raise OAuthError(f"{action} failed: response carried no access_token")
        return data


class CredentialProvider:
    """Supplies a valid bearer token, refreshing it in place when it has expired."""

    def __init__(
        self,
        settings: Settings,
        oauth: Optional[OAuthManager] = None,
        on_update: Optional[Callable[[Settings], None]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.oauth = oauth or OAuthManager(settings.client_id, settings.client_secret)
        self.on_update = on_update
        self.clock = clock

    @property
    def access_token(self) -> str:
        if self._expired() and self.settings.refresh_token:
            try:
                self.refresh()
            except (OAuthError, requests.RequestException) as e:
                # The stale token is still tried; the API call reports the 401.
                log.warning("Token refresh failed: %s", e)
        return self.settings.access_token

    def _expired(self) -> bool:
        expiry = self.settings.token_expiry
        return bool(expiry) and self.clock() >= expiry - EXPIRY_MARGIN_SECONDS

    def refresh(self) -> str:
        if not self.settings.refresh_token:
            raise OAuthError("No refresh token stored; reconnect with an authorization code")
        data = self.oauth.refresh(self.settings.refresh_token)
        self.update_token(data)
        log.info("Access token refreshed")
        return self.settings.access_token

    def connect(self, code: str) -> str:
        """Exchange a manually pasted authorization code for tokens."""
        data = self.oauth.exchange_code(code)
        self.settings.auth_code = ""
        self.update_token(data)
        return self.settings.access_token

    def update_token(self, data: Dict) -> None:
        self.settings.access_token = data["access_token"]
        if data.get("refresh_token"):
            self.settings.refresh_token = data["refresh_token"]
        expires_in = data.get("expires_in")
        self.settings.token_expiry = self.clock() + float(expires_in) if expires_in else 0
        if self.on_update:
            self.on_update(self.settings)

    def disconnect(self) -> None:
        self.settings.access_token = ""
        self.settings.refresh_token = ""
        self.settings.token_expiry = 0
        if self.on_update:
            self.on_update(self.settings)
