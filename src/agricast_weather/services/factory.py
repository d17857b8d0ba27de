"""Wire services from Settings."""

from __future__ import annotations

import logging

from ..bulletin.fetcher import StationBulletinFetcher
from ..bulletin.precipitation import PrecipitationAnalyzer
from ..cache.backends import CacheBackend, InMemoryCacheBackend, JsonFileCacheBackend
from ..cache.store import CacheStore
from ..config import Settings
from ..satellite.fetcher import SatelliteSeriesFetcher
from .satellite_service import SatelliteService
from .warming import CacheWarmer
from .weather_service import WeatherService


def build_cache_store(settings: Settings, logger: logging.Logger | None = None) -> CacheStore:
    backend: CacheBackend
    if settings.cache_backend == "memory":
        backend = InMemoryCacheBackend()
    else:
        backend = JsonFileCacheBackend(settings.cache_dir)
    return CacheStore(backend, logger=logger)


def build_weather_service(
    settings: Settings,
    cache: CacheStore,
    logger: logging.Logger | None = None,
) -> WeatherService:
    return WeatherService(
        cache=cache,
        fetcher=StationBulletinFetcher(settings, logger=logger),
        analyzer=PrecipitationAnalyzer(
            chance_of_estimate_pct=settings.pop_chance_of_estimate_pct,
            periods_of_estimate_pct=settings.pop_periods_of_estimate_pct,
        ),
        ttl_seconds=settings.bulletin_cache_ttl_seconds,
        logger=logger,
    )


def build_satellite_service(
    settings: Settings,
    cache: CacheStore,
    logger: logging.Logger | None = None,
) -> SatelliteService:
    return SatelliteService(
        cache=cache,
        fetcher=SatelliteSeriesFetcher(settings, logger=logger),
        ttl_seconds=settings.satellite_cache_ttl_seconds,
        logger=logger,
    )


def build_cache_warmer(
    settings: Settings,
    weather_service: WeatherService,
    logger: logging.Logger | None = None,
) -> CacheWarmer:
    return CacheWarmer(
        weather_service,
        concurrency=settings.warm_concurrency,
        pause_seconds=settings.warm_batch_pause_seconds,
        logger=logger,
    )
