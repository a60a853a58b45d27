"""Central error types used across the application."""

from __future__ import annotations


class RideMapError(RuntimeError):
    """Base error for the ride map package."""


class AuthExchangeError(RideMapError):
    """Raised when a code exchange or token refresh is rejected or unreachable."""


class NoCredentialError(RideMapError):
    """Raised when no usable Strava credential is available."""


class AggregationError(RideMapError):
    """Raised when building the activity list fails outside per-ride recovery."""


class DecodeError(ValueError):
    """Raised when an encoded polyline string is malformed."""


class StravaAPIError(RideMapError):
    """Base error for Strava API failures."""


class StravaPermissionError(StravaAPIError):
    """Raised when the API reports insufficient scopes or authentication issues."""


class StravaResourceNotFoundError(StravaAPIError):
    """Raised when an activity or stream does not exist."""


class StravaStreamEmptyError(StravaAPIError):
    """Raised when an activity stream is missing lat/lng samples."""


__all__ = [
    "RideMapError",
    "AuthExchangeError",
    "NoCredentialError",
    "AggregationError",
    "DecodeError",
    "StravaAPIError",
    "StravaPermissionError",
    "StravaResourceNotFoundError",
    "StravaStreamEmptyError",
]
