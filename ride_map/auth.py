"""Strava credential lifecycle: consent URL, code exchange and token refresh.

The manager owns no global state. The token record lives in an injected
:class:`~ride_map.token_store.TokenStore` and is always replaced wholesale.
Refreshes are attempted at most once per call and never retried, and any
failure while refreshing is reported as "no credential" so callers can fall
back quietly.
"""

from __future__ import annotations

import logging
import time
import urllib.parse
from typing import Any, Callable, Dict, Optional

import requests

from . import config
from .errors import AuthExchangeError
from .models import Credential
from .strava_client.response_handling import extract_error
from .strava_client.session import get_default_session
from .token_store import JsonFileTokenStore, TokenStore
from .utils import mask_token

LOGGER = logging.getLogger(__name__)


class CredentialManager:
    """Obtains, persists and refreshes the single Strava credential."""

    def __init__(
        self,
        store: TokenStore | None = None,
        *,
        session: requests.Session | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        scope: str | None = None,
        token_url: str = config.STRAVA_OAUTH_URL,
        authorize_url: str = config.STRAVA_AUTHORIZE_URL,
        timeout: float = config.REQUEST_TIMEOUT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store if store is not None else JsonFileTokenStore()
        self._session = session or get_default_session()
        self._client_id = config.CLIENT_ID if client_id is None else client_id
        self._client_secret = (
            config.CLIENT_SECRET if client_secret is None else client_secret
        )
        self._redirect_uri = (
            config.REDIRECT_URI if redirect_uri is None else redirect_uri
        )
        self._scope = config.SCOPE if scope is None else scope
        self._token_url = token_url
        self._authorize_url = authorize_url
        self._timeout = timeout
        self._clock = clock

    def build_authorization_url(self) -> str:
        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": self._scope,
            "approval_prompt": "auto",
        }
        return f"{self._authorize_url}?{urllib.parse.urlencode(params)}"

    def exchange_code(self, code: str) -> Credential:
        """Exchange an authorization code for a credential and persist it.

        Raises:
            AuthExchangeError: If the code is empty, the client is not
                configured, or the provider rejects or cannot be reached.
        """

        if not code:
            raise AuthExchangeError("Authorization code not received")
        LOGGER.info("Exchanging authorization code for tokens")
        credential = self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
            }
        )
        try:
            self._persist(credential)
        except OSError as exc:
            LOGGER.error("Token could not be saved: %s", exc)
            raise AuthExchangeError("Token received but could not be saved") from exc
        return credential

    def get_stored_credential(self) -> Optional[Credential]:
        record = self._store.load()
        if record is None:
            return None
        try:
            return Credential.from_payload(record)
        except ValueError as exc:
            LOGGER.error("Stored credential is unusable: %s", exc)
            return None

    def get_usable_credential(self) -> Optional[Credential]:
        """Return a credential that has not expired, refreshing once if needed."""

        credential = self.get_stored_credential()
        if credential is None:
            LOGGER.info("No token found, authentication required")
            return None
        if not credential.is_expired(self._clock()):
            LOGGER.debug("Using existing valid token")
            return credential

        LOGGER.info(
            "Token expired at %s, refreshing refresh_token=%s",
            credential.expires_at,
            mask_token(credential.refresh_token),
        )
        try:
            refreshed = self._request_token(
                {
                    "grant_type": "refresh_token",
                    "refresh_token": credential.refresh_token,
                }
            )
        except AuthExchangeError as exc:
            LOGGER.error("Error refreshing token: %s", exc)
            return None
        try:
            self._persist(refreshed)
        except OSError as exc:
            LOGGER.error("Refreshed token could not be saved: %s", exc)
        return refreshed

    def _persist(self, credential: Credential) -> None:
        self._store.save(credential.to_payload())

    def _request_token(self, grant: Dict[str, Any]) -> Credential:
        if not self._client_id or not self._client_secret:
            raise AuthExchangeError(
                "Client credentials not configured (STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET missing)"
            )
        grant_type = grant["grant_type"]
        payload = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            **grant,
        }
        LOGGER.debug("Token endpoint: %s grant_type=%s", self._token_url, grant_type)
        try:
            resp = self._session.post(
                self._token_url, data=payload, timeout=self._timeout
            )
        except requests.exceptions.RequestException as exc:
            LOGGER.error("Token request transport error: %s", exc)
            raise AuthExchangeError(
                f"Transport failure during {grant_type} exchange"
            ) from exc

        status = resp.status_code
        if status >= 400:
            detail = extract_error(resp)
            LOGGER.error(
                "Token %s failed status=%s%s",
                grant_type,
                status,
                f" detail={detail}" if detail else "",
            )
            raise AuthExchangeError(f"Token {grant_type} failed with status {status}")

        try:
            data = resp.json()
        except ValueError as exc:
            LOGGER.error("Invalid JSON in token response: %s", exc)
            raise AuthExchangeError("Invalid JSON in token response") from exc
        if not isinstance(data, dict):
            LOGGER.error("Unexpected token response shape: %s", type(data).__name__)
            raise AuthExchangeError("Unexpected token response shape")

        try:
            credential = Credential.from_payload(data)
        except ValueError as exc:
            LOGGER.error("Token response missing expected keys: %s", exc)
            raise AuthExchangeError(f"Incomplete token response: {exc}") from exc

        LOGGER.info(
            "Token %s succeeded: access_token=%s refresh_token=%s expires_at=%s",
            grant_type,
            mask_token(credential.access_token),
            mask_token(credential.refresh_token),
            credential.expires_at,
        )
        return credential
