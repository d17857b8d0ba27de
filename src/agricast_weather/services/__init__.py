"""Externally callable orchestrators."""

from .factory import (
    build_cache_store,
    build_cache_warmer,
    build_satellite_service,
    build_weather_service,
)
from .satellite_service import SatelliteService
from .stations import (
    CENTRAL_PRIORITY_STATIONS,
    MOUNTAIN_PRIORITY_STATIONS,
    WARMING_ZONES,
    StationRef,
    merge_station_lists,
)
from .warming import CacheWarmer, WarmReport, WarmResult
from .weather_service import WeatherService

__all__ = [
    "CENTRAL_PRIORITY_STATIONS",
    "MOUNTAIN_PRIORITY_STATIONS",
    "WARMING_ZONES",
    "CacheWarmer",
    "SatelliteService",
    "StationRef",
    "WarmReport",
    "WarmResult",
    "WeatherService",
    "build_cache_store",
    "build_cache_warmer",
    "build_satellite_service",
    "build_weather_service",
    "merge_station_lists",
]
