"""Activity listing, detail and stream fetchers."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

import requests

from ..config import MAX_PAGES, PAGE_SIZE, STRAVA_BASE_URL
from ..errors import StravaAPIError, StravaStreamEmptyError
from ..models import GeoPoint
from ..utils import to_epoch_seconds
from .pagination import JSONList, Pages, collect_pages
from .resources import ResourceAPI
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


class ActivitiesAPI:
    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        resources: ResourceAPI | None = None,
        base_url: str = STRAVA_BASE_URL,
    ) -> None:
        self._session = session or get_default_session()
        self._resources = resources or ResourceAPI(session=self._session)
        self._base_url = base_url.rstrip("/")

    def activity_pages(
        self,
        access_token: str,
        start_date: date | datetime,
        end_date: date | datetime,
        *,
        page_size: int = PAGE_SIZE,
        max_pages: Optional[int] = MAX_PAGES,
    ) -> Pages:
        """Return the lazily fetched pages of activities in ``[start_date, end_date]``."""

        url = f"{self._base_url}/athlete/activities"
        base_params = {
            "after": to_epoch_seconds(start_date),
            "before": to_epoch_seconds(end_date),
            "per_page": page_size,
        }

        def fetch_page(page: int) -> JSONList:
            params = dict(base_params)
            params["page"] = page
            data = self._resources.fetch_json(
                access_token, url, params, f"activities page {page}"
            )
            if not isinstance(data, list):
                message = (
                    f"activities page {page} returned {type(data).__name__}, expected list"
                )
                LOGGER.error(message)
                raise StravaAPIError(message)
            return data

        return Pages(
            fetch_page,
            page_size=page_size,
            max_pages=max_pages,
            context_label="activities",
        )

    def list_activities(
        self,
        access_token: str,
        start_date: date | datetime,
        end_date: date | datetime,
        *,
        page_size: int = PAGE_SIZE,
        max_pages: Optional[int] = MAX_PAGES,
    ) -> List[Dict[str, Any]]:
        """Fetch every activity in ``[start_date, end_date]`` across all pages."""

        LOGGER.info("Fetching activities between %s and %s", start_date, end_date)
        activities = collect_pages(
            self.activity_pages(
                access_token,
                start_date,
                end_date,
                page_size=page_size,
                max_pages=max_pages,
            )
        )
        LOGGER.info("Received %s activities in total", len(activities))
        return activities

    def get_activity(self, access_token: str, activity_id: int) -> Dict[str, Any]:
        context = f"activity_detail:{activity_id}"
        payload = self._resources.fetch_json(
            access_token,
            f"{self._base_url}/activities/{activity_id}",
            None,
            context,
        )
        if isinstance(payload, dict):
            return payload
        raise StravaAPIError(f"{context} returned non-object payload")

    def get_latlng_stream(self, access_token: str, activity_id: int) -> List[GeoPoint]:
        """Return the high-resolution lat/lng samples for an activity.

        Raises:
            StravaStreamEmptyError: If the stream is absent, empty or holds
                anything other than numeric (lat, lng) pairs.
            StravaAPIError: On transport or status failures.
        """

        context = f"activity_stream:{activity_id}"
        data = self._resources.fetch_json(
            access_token,
            f"{self._base_url}/activities/{activity_id}/streams",
            {"keys": "latlng", "key_by_type": "true"},
            context,
        )
        if not isinstance(data, dict):
            raise StravaStreamEmptyError(
                f"{context} payload had unexpected type {type(data).__name__}"
            )
        latlng_stream = data.get("latlng")
        if not isinstance(latlng_stream, dict):
            raise StravaStreamEmptyError(f"{context} has no latlng stream")
        samples = latlng_stream.get("data")
        if not isinstance(samples, list) or not samples:
            raise StravaStreamEmptyError(f"{context} has no latlng samples")
        return [_normalize_point(sample, context) for sample in samples]

    def get_athlete(self, access_token: str) -> Dict[str, Any]:
        payload = self._resources.fetch_json(
            access_token, f"{self._base_url}/athlete", None, "athlete"
        )
        if isinstance(payload, dict):
            return payload
        raise StravaAPIError("athlete returned non-object payload")


def _normalize_point(point: Any, context: str) -> GeoPoint:
    """Convert a raw lat/lng pair to a typed tuple."""

    if not isinstance(point, Sequence) or isinstance(point, str) or len(point) != 2:
        raise StravaStreamEmptyError(f"{context} sample is not a lat/lng pair: {point!r}")
    lat, lng = point
    if isinstance(lat, bool) or isinstance(lng, bool):
        raise StravaStreamEmptyError(f"{context} sample is not numeric: {point!r}")
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError) as exc:
        raise StravaStreamEmptyError(
            f"{context} sample is not numeric: {point!r}"
        ) from exc
