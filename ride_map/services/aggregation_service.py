"""Build map-ready ride records from Strava activities.

The pipeline lists every activity in a date window, keeps the configured
activity type, sorts by start time, enriches each ride with route geometry and
normalizes the result. Geometry comes from the high-resolution lat/lng stream
when available and from the decoded summary polyline otherwise. Rides with no
recoverable geometry are dropped.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
import logging
from typing import Any, Dict, List, Mapping, Optional

from ..activity_types import filter_by_type
from ..auth import CredentialManager
from ..config import ACTIVITY_TYPE, ENRICH_WORKERS, MAX_PAGES, PAGE_SIZE
from ..errors import (
    AggregationError,
    DecodeError,
    NoCredentialError,
    StravaAPIError,
    StravaResourceNotFoundError,
    StravaStreamEmptyError,
)
from ..models import GeoPoint, NormalizedActivity
from ..outcomes import MISSING, Failed, Missing, Ok, Outcome
from ..polyline_codec import decode
from ..strava_client import ActivitiesAPI
from ..utils import iso_date, to_utc_aware

RawActivity = Mapping[str, Any]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(slots=True)
class AggregatorConfig:
    activity_type: str = ACTIVITY_TYPE
    page_size: int = PAGE_SIZE
    max_pages: Optional[int] = MAX_PAGES
    max_workers: int = ENRICH_WORKERS
    logger: logging.Logger | None = None


@dataclass(slots=True)
class EnrichedRide:
    """A listed ride together with its detail record and recovered route."""

    activity_id: Any
    detail: Optional[Dict[str, Any]]
    route: List[GeoPoint] = field(default_factory=list)
    route_source: str = "none"


class ActivityAggregator:
    def __init__(
        self,
        credentials: CredentialManager,
        api: ActivitiesAPI | None = None,
        config: AggregatorConfig | None = None,
    ) -> None:
        self._credentials = credentials
        self._api = api or ActivitiesAPI()
        self.config = config or AggregatorConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def list_mapped_activities(
        self, start_date: date | datetime, end_date: date | datetime
    ) -> List[NormalizedActivity]:
        """Return normalized rides in ``[start_date, end_date]`` in start-time order.

        Raises:
            NoCredentialError: If no usable credential is available.
            AggregationError: If listing fails or anything else breaks outside
                the per-ride recovery boundary.
        """

        credential = self._credentials.get_usable_credential()
        if credential is None:
            raise NoCredentialError("No valid token available")
        try:
            return self._build(credential.access_token, start_date, end_date)
        except AggregationError:
            raise
        except Exception as exc:
            self._log.error("Error processing activities for map: %s", exc)
            raise AggregationError(f"Activity aggregation failed: {exc}") from exc

    def _build(
        self,
        access_token: str,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> List[NormalizedActivity]:
        activities = self._api.list_activities(
            access_token,
            start_date,
            end_date,
            page_size=self.config.page_size,
            max_pages=self.config.max_pages,
        )
        rides = sort_by_start(filter_by_type(activities, self.config.activity_type))
        self._log.info(
            "Found %d %s activities in date range (%d listed)",
            len(rides),
            self.config.activity_type,
            len(activities),
        )
        enriched = self._enrich_all(access_token, rides)

        normalized: List[NormalizedActivity] = []
        for ride in enriched:
            if not ride.route or ride.detail is None:
                self._log.warning(
                    "No route data available for activity %s", ride.activity_id
                )
                continue
            self._log.debug(
                "Activity %s route from %s (%d points)",
                ride.activity_id,
                ride.route_source,
                len(ride.route),
            )
            normalized.append(normalize_activity(ride.detail, ride.route))
        dropped = len(enriched) - len(normalized)
        self._log.info(
            "Successfully processed %d activities (%d dropped without route)",
            len(normalized),
            dropped,
        )
        return normalized

    def _enrich_all(
        self, access_token: str, rides: List[RawActivity]
    ) -> List[EnrichedRide]:
        if not rides:
            return []
        workers = max(1, min(self.config.max_workers, len(rides)))
        # map() yields in submission order, so results keep the sorted order.
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(
                executor.map(lambda ride: self._enrich(access_token, ride), rides)
            )

    def _enrich(self, access_token: str, ride: RawActivity) -> EnrichedRide:
        activity_id = ride.get("id")
        detail_outcome = self._fetch_detail(access_token, activity_id)
        if not isinstance(detail_outcome, Ok):
            cause = detail_outcome.cause if isinstance(detail_outcome, Failed) else None
            self._log.error(
                "Error fetching activity details for ID %s: %s", activity_id, cause
            )
            return EnrichedRide(activity_id=activity_id, detail=None)
        detail = detail_outcome.value

        stream = self._fetch_stream(access_token, activity_id)
        if isinstance(stream, Ok):
            return EnrichedRide(activity_id, detail, stream.value, "stream")
        if isinstance(stream, Failed):
            self._log.error(
                "Error fetching streams for activity %s: %s",
                activity_id,
                stream.cause,
            )
        else:
            self._log.warning(
                "No valid latlng data for activity %s: %s", activity_id, stream.reason
            )

        summary = decode_summary_polyline(detail)
        if isinstance(summary, Ok):
            self._log.info("Using summary_polyline for activity %s", activity_id)
            return EnrichedRide(
                activity_id, detail, summary.value, "summary_polyline"
            )
        if isinstance(summary, Failed):
            self._log.warning(
                "Summary polyline for activity %s is malformed: %s",
                activity_id,
                summary.cause,
            )
        return EnrichedRide(activity_id, detail)

    def _fetch_detail(
        self, access_token: str, activity_id: Any
    ) -> Outcome[Dict[str, Any]]:
        self._log.debug("Fetching details for activity %s", activity_id)
        try:
            return Ok(self._api.get_activity(access_token, activity_id))
        except StravaAPIError as exc:
            return Failed(exc)

    def _fetch_stream(self, access_token: str, activity_id: Any) -> Outcome[List[GeoPoint]]:
        self._log.debug("Fetching streams for activity %s", activity_id)
        try:
            return Ok(self._api.get_latlng_stream(access_token, activity_id))
        except (StravaStreamEmptyError, StravaResourceNotFoundError) as exc:
            return Missing(str(exc))
        except StravaAPIError as exc:
            return Failed(exc)


def decode_summary_polyline(detail: Mapping[str, Any]) -> Outcome[List[GeoPoint]]:
    """Decode ``detail["map"]["summary_polyline"]`` when present."""

    activity_map = detail.get("map")
    encoded = activity_map.get("summary_polyline") if isinstance(activity_map, dict) else None
    if not encoded or not isinstance(encoded, str):
        return MISSING
    try:
        points = decode(encoded)
    except DecodeError as exc:
        return Failed(exc)
    return Ok(points) if points else MISSING


def sort_by_start(activities: List[RawActivity]) -> List[RawActivity]:
    """Stable ascending sort on ``start_date``; undated activities sort first."""

    return sorted(activities, key=_start_key)


def _start_key(activity: RawActivity) -> datetime:
    value = activity.get("start_date")
    if not value:
        return _EPOCH
    try:
        return to_utc_aware(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return _EPOCH


def normalize_activity(
    detail: Mapping[str, Any], route: List[GeoPoint]
) -> NormalizedActivity:
    """Convert a Strava detail record plus its route into the map shape."""

    distance_m = _as_float(detail.get("distance"))
    return NormalizedActivity(
        id=detail.get("id"),
        name=str(detail.get("name") or f"Activity {detail.get('id')}"),
        date=iso_date(detail.get("start_date")),
        distance=distance_m / 1000,
        moving_time=detail.get("moving_time"),
        elevation_gain=detail.get("total_elevation_gain"),
        start_point=route[0] if route else None,
        end_point=route[-1] if route else None,
        route=list(route),
    )


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
