"""Bounded-concurrency cache warming for batches of stations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Literal

from pydantic import BaseModel, Field

from ..exceptions import WeatherEngineError
from ..log_setup import get_logger
from .stations import StationRef
from .weather_service import WeatherService

DEFAULT_WARM_CONCURRENCY = 3
DEFAULT_BATCH_PAUSE_SECONDS = 1.0


class WarmResult(BaseModel):
    station_key: str
    name: str | None = None
    status: Literal["fulfilled", "rejected"]
    error: str | None = None


class WarmReport(BaseModel):
    results: list[WarmResult] = Field(default_factory=list)

    @property
    def successful(self) -> int:
        return sum(1 for result in self.results if result.status == "fulfilled")

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.status == "rejected")


class CacheWarmer:
    """Refreshes cached weather for many stations without overwhelming the upstream."""

    def __init__(
        self,
        weather_service: WeatherService,
        *,
        concurrency: int = DEFAULT_WARM_CONCURRENCY,
        pause_seconds: float = DEFAULT_BATCH_PAUSE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if concurrency <= 0:
            raise ValueError("concurrency must be > 0.")
        self.weather_service = weather_service
        self.concurrency = concurrency
        self.pause_seconds = pause_seconds
        self.sleep = sleep
        self.logger = logger or get_logger("warming")

    def warm(self, stations: Sequence[StationRef]) -> WarmReport:
        """Warm every station in fixed-size batches; never raises for a station failure."""
        results: list[WarmResult] = []
        for offset in range(0, len(stations), self.concurrency):
            batch = stations[offset : offset + self.concurrency]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                results.extend(executor.map(self._warm_one, batch))
            if offset + self.concurrency < len(stations):
                self.sleep(self.pause_seconds)

        report = WarmReport(results=results)
        self.logger.info(
            "Cache warming complete: %d successful, %d failed out of %d stations.",
            report.successful, report.failed, len(stations),
        )
        return report

    def _warm_one(self, station: StationRef) -> WarmResult:
        label = station.name or station.station
        try:
            self.weather_service.get_enriched_weather(
                station.region, station.station, force_refresh=True
            )
        except WeatherEngineError as exc:
            self.logger.warning("Failed to warm %s (%s): %s", label, station.key, exc)
            return WarmResult(
                station_key=station.key, name=station.name, status="rejected", error=str(exc)
            )
        except Exception as exc:  # noqa: BLE001 - one station must not abort the batch
            self.logger.exception("Unexpected failure warming %s (%s)", label, station.key)
            return WarmResult(
                station_key=station.key,
                name=station.name,
                status="rejected",
                error=f"{type(exc).__name__}: {exc}",
            )
        self.logger.info("Warmed cache for %s (%s)", label, station.key)
        return WarmResult(station_key=station.key, name=station.name, status="fulfilled")
