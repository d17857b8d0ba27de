"""Cached enriched-weather orchestration over station bulletins."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..agronomy.calculator import build_insights
from ..agronomy.models import WeatherWithInsights
from ..bulletin.fetcher import StationBulletinFetcher, normalize_station_ref
from ..bulletin.models import EnrichedWeather
from ..bulletin.parser import BulletinParser
from ..bulletin.precipitation import PrecipitationAnalyzer
from ..cache.store import CacheStore, Clock, utc_now
from ..log_setup import get_logger

DEFAULT_BULLETIN_TTL_SECONDS = 300


class WeatherService:
    """Cache-aside composition of fetch, parse and precipitation analysis."""

    def __init__(
        self,
        *,
        cache: CacheStore,
        fetcher: StationBulletinFetcher,
        parser: BulletinParser | None = None,
        analyzer: PrecipitationAnalyzer | None = None,
        ttl_seconds: int = DEFAULT_BULLETIN_TTL_SECONDS,
        clock: Clock = utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.parser = parser or BulletinParser()
        self.analyzer = analyzer or PrecipitationAnalyzer()
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logger or get_logger("weather_service")

    def close(self) -> None:
        self.fetcher.close()

    @staticmethod
    def cache_key(region: str, station: str) -> str:
        return f"bulletin_{region}_{station}"

    def get_enriched_weather(
        self,
        region: str,
        station: str,
        *,
        force_refresh: bool = False,
    ) -> EnrichedWeather:
        """Return the parsed snapshot with its precipitation outlook, cached per station."""
        region_code, station_code = normalize_station_ref(region, station)
        key = self.cache_key(region_code, station_code)

        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                try:
                    return EnrichedWeather.model_validate(cached)
                except ValidationError as exc:
                    self.logger.warning(
                        "Discarding unreadable cached weather for %s: %s", key, exc
                    )

        raw = self.fetcher.fetch(region_code, station_code)
        snapshot = self.parser.parse(raw.xml_text)
        enriched = EnrichedWeather(
            region=region_code,
            station=station_code,
            retrieved_at=self.clock(),
            snapshot=snapshot,
            precipitation=self.analyzer.analyze(snapshot.forecast),
        )
        self.cache.put(key, enriched.model_dump(mode="json"), self.ttl_seconds)
        self.logger.info(
            "Fetched weather for %s/%s (%d forecast periods)",
            region_code, station_code, len(snapshot.forecast),
        )
        return enriched

    def get_weather_with_insights(self, region: str, station: str) -> WeatherWithInsights:
        """Enriched weather plus spray, drying, frost and heat-unit assessments."""
        weather = self.get_enriched_weather(region, station)
        return WeatherWithInsights(weather=weather, insights=build_insights(weather.snapshot))
