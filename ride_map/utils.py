"""General utility helpers shared across modules."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def to_utc_aware(value: date | datetime) -> datetime:
    """Return ``value`` as a timezone-aware UTC datetime.

    Plain dates map to midnight UTC and naive datetimes are assumed to be UTC.
    """

    if not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_seconds(value: date | datetime) -> int:
    return int(to_utc_aware(value).timestamp())


def parse_date(value: str | date | datetime) -> date | datetime:
    """Accept ISO date/datetime strings as well as date objects."""

    if isinstance(value, (date, datetime)):
        return value
    text = value.strip()
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    return date.fromisoformat(text)


def iso_date(timestamp: Any) -> str:
    """Return the ``YYYY-MM-DD`` part of a Strava ISO timestamp, or ``""``."""

    if not timestamp or not isinstance(timestamp, str):
        return ""
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return timestamp[:10]


def mask_token(token: Optional[str], visible: int = 4) -> str:
    """Return ``token`` with all but the trailing ``visible`` chars masked."""

    if not token:
        return ""
    visible = max(0, visible)
    if visible == 0:
        return "*" * len(token)
    hidden_length = max(len(token) - visible, 0)
    if hidden_length == 0:
        return token
    return ("*" * hidden_length) + token[-visible:]
