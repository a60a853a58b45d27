from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

GeoPoint = Tuple[float, float]


@dataclass(frozen=True)
class Credential:
    access_token: str
    refresh_token: str
    expires_at: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Credential":
        """Build a credential from a token response or a stored record.

        Raises:
            ValueError: If a token is missing or ``expires_at`` is not an integer.
        """

        access_token = payload.get("access_token")
        refresh_token = payload.get("refresh_token")
        expires_at = payload.get("expires_at")
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("access_token missing")
        if not isinstance(refresh_token, str) or not refresh_token:
            raise ValueError("refresh_token missing")
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise ValueError("expires_at missing or not numeric")
        return cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=int(expires_at),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
        }

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class NormalizedActivity:
    id: int
    name: str
    date: str
    distance: float
    moving_time: Optional[int]
    elevation_gain: Optional[float]
    start_point: Optional[GeoPoint]
    end_point: Optional[GeoPoint]
    route: List[GeoPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON shape consumed by the map front end."""

        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "distance": self.distance,
            "movingTime": self.moving_time,
            "elevationGain": self.elevation_gain,
            "startPoint": list(self.start_point) if self.start_point else None,
            "endPoint": list(self.end_point) if self.end_point else None,
            "route": [[lat, lng] for lat, lng in self.route],
        }
