"""Helpers for selecting activities by their Strava type."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

__all__ = ["activity_type_matches", "filter_by_type"]


def activity_type_matches(activity: Mapping[str, Any], kind: str) -> bool:
    """Return ``True`` when the provider-classified ``type`` equals ``kind``."""

    return activity.get("type") == kind


def filter_by_type(
    activities: Iterable[Mapping[str, Any]], kind: str
) -> List[Mapping[str, Any]]:
    return [activity for activity in activities if activity_type_matches(activity, kind)]
