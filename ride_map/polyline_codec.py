"""Encoded polyline codec (precision 5) on top of the ``polyline`` package."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from polyline import decode as polyline_decode
from polyline import encode as polyline_encode

from .errors import DecodeError
from .models import GeoPoint

__all__ = ["decode", "encode"]

_PRECISION = 5
# Encoded characters are chunk + 63 with chunks in 0..63.
_MIN_CHAR = 63
_MAX_CHAR = 126


def decode(encoded: Optional[str]) -> List[GeoPoint]:
    """Decode an encoded polyline string into a list of (lat, lng) tuples.

    Raises:
        DecodeError: If the string is truncated or contains a character
            outside the encoding range.
    """

    if not encoded:
        return []
    for offset, char in enumerate(encoded):
        if not _MIN_CHAR <= ord(char) <= _MAX_CHAR:
            raise DecodeError(f"Invalid polyline character {char!r} at offset {offset}")
    try:
        decoded = polyline_decode(encoded, _PRECISION)
    except (IndexError, ValueError, TypeError) as exc:
        raise DecodeError("Unable to decode polyline") from exc
    return [(float(lat), float(lng)) for lat, lng in decoded]


def encode(points: Iterable[Sequence[float]]) -> str:
    """Encode (lat, lng) pairs into a polyline string."""

    return polyline_encode([(point[0], point[1]) for point in points], _PRECISION)
