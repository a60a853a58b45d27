"""Generic authenticated JSON resource fetcher."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..config import REQUEST_TIMEOUT
from ..errors import StravaAPIError
from .response_handling import classify_response_status
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


def auth_headers(access_token: str) -> Dict[str, str]:
    """Return bearer auth headers for ``access_token``."""

    return {"Authorization": f"Bearer {access_token}"}


class ResourceAPI:
    """Issues single authenticated GETs and maps failures to typed errors."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session or get_default_session()
        self._timeout = timeout

    def fetch_json(
        self,
        access_token: str,
        url: str,
        params: Optional[Dict[str, Any]],
        context: str,
    ) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises:
            StravaAPIError: On transport failure, timeout, an error status, or a
                non-JSON body. Status-specific subclasses are raised for
                401/403 and 404.
        """

        LOGGER.debug("GET %s params=%s (%s)", url, params, context)
        try:
            response = self._session.get(
                url,
                headers=auth_headers(access_token),
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            message = f"{context} network error: {exc.__class__.__name__}"
            LOGGER.error(message)
            raise StravaAPIError(message) from exc

        error = classify_response_status(response, context)
        if error is not None:
            raise error

        try:
            return response.json()
        except ValueError as exc:
            message = f"{context} returned non-JSON payload"
            LOGGER.error(message)
            raise StravaAPIError(message) from exc
