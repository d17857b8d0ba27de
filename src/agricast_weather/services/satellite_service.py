"""Cached satellite series orchestration."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..cache.store import CacheStore
from ..log_setup import get_logger
from ..satellite.dates import validate_point_request
from ..satellite.fetcher import SatelliteSeriesFetcher
from ..satellite.models import SatelliteSeries
from ..satellite.reducer import SatelliteSeriesReducer

DEFAULT_SATELLITE_TTL_SECONDS = 86400


class SatelliteService:
    """Cache-aside composition of the satellite fetcher and reducer."""

    def __init__(
        self,
        *,
        cache: CacheStore,
        fetcher: SatelliteSeriesFetcher,
        reducer: SatelliteSeriesReducer | None = None,
        ttl_seconds: int = DEFAULT_SATELLITE_TTL_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.reducer = reducer or SatelliteSeriesReducer()
        self.ttl_seconds = ttl_seconds
        self.logger = logger or get_logger("satellite_service")

    def close(self) -> None:
        self.fetcher.close()

    @staticmethod
    def cache_key(lat: float, lon: float, start_date: str, end_date: str) -> str:
        return f"satellite_{lat}_{lon}_{start_date}_{end_date}"

    def get_satellite_series(
        self, lat: float, lon: float, start_date: str, end_date: str
    ) -> SatelliteSeries:
        start, end = validate_point_request(lat, lon, start_date, end_date)
        key = self.cache_key(lat, lon, start_date, end_date)

        cached = self.cache.get(key)
        if cached is not None:
            try:
                return SatelliteSeries.model_validate(cached)
            except ValidationError as exc:
                self.logger.warning("Discarding unreadable cached series for %s: %s", key, exc)

        payload = self.fetcher.fetch(lat, lon, start_date, end_date)
        series = self.reducer.reduce(payload, lat=lat, lon=lon, start=start, end=end)
        self.cache.put(key, series.model_dump(mode="json"), self.ttl_seconds)
        self.logger.info(
            "Reduced satellite series for %s: %d/%d days with data",
            key, series.period.days_with_data, series.period.total_days,
        )
        return series
