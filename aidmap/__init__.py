"""
aidmap package

Aggregates point-of-interest records (food distribution sites, shelters,
sexual-health clinics, CUNY campus food sites) from a hosted data store,
normalizes them into uniform markers and renders them as one clustered
Leaflet map that follows the viewer's location.
"""

__version__ = "0.1.0"

from .categories import CATEGORIES, CategoryConfig, category_by_key
from .store import Marker, MarkerStore
from .normalize import normalize_record, normalize_records
from .backend import CollectionClient
from .fetch import fetch_all, fetch_category, FetchOutcome
from .recenter import LocationFeed, RecenterController, ViewerLocation, Viewport, recenter
from .map_create import create_map, save_map
from .widget import MapWidget
from .exceptions import AidmapError, BackendError, ConfigError

__all__ = [
    "CATEGORIES",
    "CategoryConfig",
    "category_by_key",
    "Marker",
    "MarkerStore",
    "normalize_record",
    "normalize_records",
    "CollectionClient",
    "fetch_all",
    "fetch_category",
    "FetchOutcome",
    "LocationFeed",
    "RecenterController",
    "ViewerLocation",
    "Viewport",
    "recenter",
    "create_map",
    "save_map",
    "MapWidget",
    "AidmapError",
    "BackendError",
    "ConfigError",
]
