"""Caller-facing operations backing the web routes and the CLI.

Every path through :meth:`MapDataService.get_activities` ends in either real
ride data or the configured sample set; provider failures never surface as
errors to the end user.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime
import logging
from typing import Any, Dict, List, Optional

from ..auth import CredentialManager
from ..config import DEFAULT_END_DATE, DEFAULT_START_DATE
from ..errors import AggregationError, AuthExchangeError, NoCredentialError
from ..sample_data import load_sample_activities
from ..strava_client import ActivitiesAPI
from ..utils import parse_date
from .aggregation_service import ActivityAggregator, AggregatorConfig

DateInput = str | date | datetime


@dataclass(slots=True)
class MapDataServiceConfig:
    default_start: DateInput = DEFAULT_START_DATE
    default_end: DateInput = DEFAULT_END_DATE
    sample_activities: List[Dict[str, Any]] = field(
        default_factory=load_sample_activities
    )
    logger: logging.Logger | None = None


class MapDataService:
    def __init__(
        self,
        credentials: CredentialManager | None = None,
        *,
        api: ActivitiesAPI | None = None,
        aggregator: ActivityAggregator | None = None,
        aggregator_config: AggregatorConfig | None = None,
        config: MapDataServiceConfig | None = None,
    ) -> None:
        self.credentials = credentials or CredentialManager()
        self._api = api or ActivitiesAPI()
        self.aggregator = aggregator or ActivityAggregator(
            self.credentials, self._api, aggregator_config
        )
        self.config = config or MapDataServiceConfig()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def sample_activities(self) -> List[Dict[str, Any]]:
        self._log.info("Returning sample activities")
        return copy.deepcopy(self.config.sample_activities)

    def get_activities(
        self,
        start_date: Optional[DateInput] = None,
        end_date: Optional[DateInput] = None,
    ) -> List[Dict[str, Any]]:
        """Return mapped rides for the window, or the sample set on any failure."""

        try:
            start = parse_date(start_date or self.config.default_start)
            end = parse_date(end_date or self.config.default_end)
        except ValueError as exc:
            self._log.warning(
                "Bad date range start=%s end=%s: %s", start_date, end_date, exc
            )
            return self.sample_activities()
        self._log.info("Fetching activities for date range: %s to %s", start, end)
        try:
            activities = self.aggregator.list_mapped_activities(start, end)
        except NoCredentialError:
            self._log.info("No token available, returning sample data")
            return self.sample_activities()
        except AggregationError as exc:
            self._log.error("Error fetching activities from Strava: %s", exc)
            self._log.info("Falling back to sample data due to error")
            return self.sample_activities()

        if not activities:
            self._log.info("No activities found, returning sample data")
            return self.sample_activities()
        self._log.info("Returning %d real activities", len(activities))
        return [activity.to_dict() for activity in activities]

    def auth_status(self) -> Dict[str, bool]:
        return {"authenticated": self.credentials.get_usable_credential() is not None}

    def authorization_url(self) -> str:
        return self.credentials.build_authorization_url()

    def exchange_code(self, code: Optional[str]) -> bool:
        """Exchange ``code`` for a credential; ``False`` when the exchange fails."""

        try:
            self.credentials.exchange_code(code or "")
        except AuthExchangeError as exc:
            self._log.error("Auth callback error: %s", exc)
            return False
        return True

    def get_athlete(self) -> Dict[str, Any]:
        """Return the authenticated athlete profile.

        Raises:
            NoCredentialError: If no usable credential is available.
            StravaAPIError: If the profile request fails.
        """

        credential = self.credentials.get_usable_credential()
        if credential is None:
            raise NoCredentialError("No valid token available")
        return self._api.get_athlete(credential.access_token)
