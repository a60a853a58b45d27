"""Strava client components (session, resource fetcher, pagination, activities)."""

from .activities import ActivitiesAPI  # noqa: F401
from .pagination import Pages, collect_pages  # noqa: F401
from .resources import ResourceAPI, auth_headers  # noqa: F401
from .session import create_default_session, get_default_session  # noqa: F401
