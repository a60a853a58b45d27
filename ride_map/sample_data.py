"""Static activities served when Strava data is unavailable."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .config import SAMPLE_DATA_FILE

LOGGER = logging.getLogger(__name__)

SAMPLE_ACTIVITIES: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Day 1: Land's End to Bodmin",
        "date": "2024-09-02",
        "distance": 83.7,
        "startPoint": [50.0657, -5.7147],
        "endPoint": [50.4722, -4.7235],
        "route": [
            [50.0657, -5.7147],
            [50.1269, -5.5284],
            [50.2660, -5.0527],
            [50.3429, -4.8731],
            [50.4722, -4.7235],
        ],
    },
    {
        "id": 2,
        "name": "Day 2: Bodmin to Exeter",
        "date": "2024-09-03",
        "distance": 132.5,
        "startPoint": [50.4722, -4.7235],
        "endPoint": [50.7236, -3.5275],
        "route": [
            [50.4722, -4.7235],
            [50.5060, -4.4672],
            [50.5846, -4.1444],
            [50.6546, -3.8963],
            [50.7236, -3.5275],
        ],
    },
]


def load_sample_activities(path: str = SAMPLE_DATA_FILE) -> List[Dict[str, Any]]:
    """Return the configured sample set, or the bundled one when ``path`` is empty.

    Raises:
        ValueError: If the file does not contain a JSON list.
    """

    if not path:
        return copy.deepcopy(SAMPLE_ACTIVITIES)
    with Path(path).open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError(f"Sample data file {path} must contain a JSON list")
    LOGGER.info("Loaded %s sample activities from %s", len(data), path)
    return data
