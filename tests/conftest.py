"""Global pytest fixtures & helpers.

Adds project root to path and provides fake HTTP responses/sessions so no
test touches the network.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ride_map.auth import CredentialManager
from ride_map.polyline_codec import encode
from ride_map.strava_client import ActivitiesAPI, ResourceAPI
from ride_map.token_store import MemoryTokenStore

NOW = 1_700_000_000
BASE_URL = "https://strava.test/api/v3"


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, text=None):
        self.status_code = status_code
        self._data = data
        self._text = text
        self.headers: Dict[str, str] = {}

    def json(self):
        if isinstance(self._data, Exception):  # force JSON error
            raise self._data
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        try:
            return json.dumps(self._data)
        except Exception:
            return str(self._data)


class FakeSession:
    """Routes GET/POST calls to handler callables and records every call."""

    def __init__(
        self,
        get: Optional[Callable[..., Any]] = None,
        post: Optional[Callable[..., Any]] = None,
    ):
        self._get = get
        self._post = post
        self.get_calls: List[Dict[str, Any]] = []
        self.post_calls: List[Dict[str, Any]] = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.get_calls.append({"url": url, "headers": headers, "params": params})
        if self._get is None:
            raise AssertionError(f"unexpected GET {url}")
        result = self._get(url, params or {})
        if isinstance(result, Exception):
            raise result
        return result

    def post(self, url, data=None, timeout=None):
        self.post_calls.append({"url": url, "data": data})
        if self._post is None:
            raise AssertionError(f"unexpected POST {url}")
        result = self._post(url, data or {})
        if isinstance(result, Exception):
            raise result
        return result


class StravaRoutes:
    """Tiny fake of the Strava REST API keyed by activity id.

    ``pages`` is the list returned page by page from the listing endpoint.
    ``details`` maps id -> detail payload (or an Exception / FakeResp error).
    ``streams`` maps id -> latlng sample list (or an Exception / FakeResp).
    """

    def __init__(self, pages=None, details=None, streams=None, listing_error=None):
        self.pages: List[List[Dict[str, Any]]] = pages or [[]]
        self.details: Dict[int, Any] = details or {}
        self.streams: Dict[int, Any] = streams or {}
        self.listing_error = listing_error

    def __call__(self, url: str, params: Dict[str, Any]):
        path = url[len(BASE_URL):]
        if path == "/athlete/activities":
            if self.listing_error is not None:
                return self.listing_error
            page = int(params["page"])
            data = self.pages[page - 1] if page <= len(self.pages) else []
            return FakeResp(200, data=data)
        if path == "/athlete":
            return FakeResp(200, data={"id": 42, "firstname": "Pat"})
        parts = path.strip("/").split("/")
        activity_id = int(parts[1])
        if len(parts) == 2:
            return self._respond(self.details.get(activity_id))
        stream = self.streams.get(activity_id)
        if stream is None or isinstance(stream, (Exception, FakeResp)):
            return self._respond(stream)
        return FakeResp(
            200,
            data={"latlng": {"data": stream, "series_type": "distance"}},
        )

    @staticmethod
    def _respond(value):
        if value is None:
            return FakeResp(404, data={"message": "Record Not Found"})
        if isinstance(value, (Exception, FakeResp)):
            return value
        return FakeResp(200, data=value)


# --- Factory helpers -------------------------------------------------
def make_credential_record(expires_at=NOW + 3600, access="access-abc", refresh="refresh-xyz"):
    return {"access_token": access, "refresh_token": refresh, "expires_at": expires_at}


def make_listing(activity_id, start, activity_type="Ride"):
    return {"id": activity_id, "type": activity_type, "start_date": start}


def make_detail(activity_id, start, *, polyline_points=None, distance=50_000.0):
    detail = {
        "id": activity_id,
        "name": f"Ride {activity_id}",
        "type": "Ride",
        "start_date": start,
        "distance": distance,
        "moving_time": 7200,
        "total_elevation_gain": 640.0,
        "map": {"summary_polyline": encode(polyline_points) if polyline_points else None},
    }
    return detail


def make_route(seed: float, count: int = 5):
    return [[50.0 + seed + i * 0.01, -5.0 + seed + i * 0.01] for i in range(count)]


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def fresh_store():
    return MemoryTokenStore(make_credential_record())


@pytest.fixture
def build_manager():
    def _build(store, post=None):
        session = FakeSession(post=post)
        manager = CredentialManager(
            store,
            session=session,  # type: ignore[arg-type]
            client_id="cid",
            client_secret="csec",
            redirect_uri="http://localhost:3000/auth/callback",
            scope="activity:read_all",
            clock=lambda: NOW,
        )
        return manager, session

    return _build


@pytest.fixture
def build_api():
    def _build(routes: StravaRoutes):
        session = FakeSession(get=routes)
        resources = ResourceAPI(session=session)  # type: ignore[arg-type]
        api = ActivitiesAPI(session=session, resources=resources, base_url=BASE_URL)  # type: ignore[arg-type]
        return api, session

    return _build


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("connection refused")
