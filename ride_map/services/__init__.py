"""Service layer package.

Exports the ride aggregation pipeline and the caller-facing map data service.
"""

from .aggregation_service import ActivityAggregator, AggregatorConfig
from .map_data_service import MapDataService, MapDataServiceConfig

__all__ = [
    "ActivityAggregator",
    "AggregatorConfig",
    "MapDataService",
    "MapDataServiceConfig",
]
