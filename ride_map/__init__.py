"""Strava ride map package."""

from .auth import CredentialManager
from .errors import (
    AggregationError,
    AuthExchangeError,
    DecodeError,
    NoCredentialError,
    StravaAPIError,
)
from .models import Credential, NormalizedActivity
from .services import ActivityAggregator, MapDataService

__all__ = [
    "ActivityAggregator",
    "AggregationError",
    "AuthExchangeError",
    "Credential",
    "CredentialManager",
    "DecodeError",
    "MapDataService",
    "NoCredentialError",
    "NormalizedActivity",
    "StravaAPIError",
]
