"""Cached weather orchestration tests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from agricast_weather.bulletin.models import RawBulletin
from agricast_weather.bulletin.precipitation import PrecipitationAnalyzer
from agricast_weather.cache.backends import InMemoryCacheBackend
from agricast_weather.cache.store import CacheStore
from agricast_weather.exceptions import FetchTimeoutError, InvalidLocationError, ParseError
from agricast_weather.services.weather_service import WeatherService

FIXTURES = Path(__file__).parent / "fixtures"
T0 = datetime(2024, 5, 17, 2, 5, tzinfo=UTC)


class _Clock:
    def __init__(self) -> None:
        self.now = T0

    def __call__(self) -> datetime:
        return self.now


class _FakeFetcher:
    def __init__(self, xml_text: str | None = None, error: Exception | None = None) -> None:
        self.xml_text = xml_text or (FIXTURES / "winnipeg_bulletin.xml").read_text(
            encoding="utf-8"
        )
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def fetch(self, region: str, station: str) -> RawBulletin:
        self.calls.append((region, station))
        if self.error is not None:
            raise self.error
        return RawBulletin(
            region=region,
            station=station,
            url=f"https://bulletins.example.test/{region}/{station}_e.xml",
            xml_text=self.xml_text,
            fetched_at=T0,
        )

    def close(self) -> None:
        self.closed = True


def _service(
    fetcher: _FakeFetcher,
    backend: InMemoryCacheBackend | None = None,
) -> tuple[WeatherService, _Clock, InMemoryCacheBackend]:
    clock = _Clock()
    backend = backend or InMemoryCacheBackend()
    logger = logging.getLogger("test_weather_service")
    service = WeatherService(
        cache=CacheStore(backend, clock=clock, logger=logger),
        fetcher=fetcher,  # type: ignore[arg-type]
        analyzer=PrecipitationAnalyzer(),
        ttl_seconds=300,
        clock=clock,
        logger=logger,
    )
    return service, clock, backend


def test_miss_fetches_parses_analyzes_and_caches() -> None:
    fetcher = _FakeFetcher()
    service, _, backend = _service(fetcher)

    weather = service.get_enriched_weather("mb", "s0000193")

    assert fetcher.calls == [("MB", "s0000193")]
    assert weather.source == "ECCC"
    assert weather.region == "MB"
    assert weather.station == "s0000193"
    assert weather.retrieved_at == T0
    assert weather.snapshot.location.city == "Winnipeg"
    assert len(weather.precipitation.periods) == len(weather.snapshot.forecast) == 5
    assert backend.read("bulletin_MB_s0000193") is not None


def test_hit_within_ttl_skips_fetch_and_returns_same_data() -> None:
    fetcher = _FakeFetcher()
    service, clock, _ = _service(fetcher)

    first = service.get_enriched_weather("MB", "s0000193")
    clock.now = T0 + timedelta(seconds=299)
    second = service.get_enriched_weather("MB", "s0000193")

    assert len(fetcher.calls) == 1
    assert second == first


def test_stale_entry_triggers_refetch() -> None:
    fetcher = _FakeFetcher()
    service, clock, _ = _service(fetcher)

    service.get_enriched_weather("MB", "s0000193")
    clock.now = T0 + timedelta(seconds=301)
    refreshed = service.get_enriched_weather("MB", "s0000193")

    assert len(fetcher.calls) == 2
    assert refreshed.retrieved_at == clock.now


def test_force_refresh_bypasses_fresh_entry() -> None:
    fetcher = _FakeFetcher()
    service, _, _ = _service(fetcher)

    service.get_enriched_weather("MB", "s0000193")
    service.get_enriched_weather("MB", "s0000193", force_refresh=True)

    assert len(fetcher.calls) == 2


def test_unreadable_cached_value_is_refetched() -> None:
    backend = InMemoryCacheBackend()
    backend.write(
        "bulletin_MB_s0000193",
        {
            "key": "bulletin_MB_s0000193",
            "value": {"unexpected": True},
            "stored_at": T0.isoformat(),
            "ttl_seconds": 300,
        },
    )
    fetcher = _FakeFetcher()
    service, _, _ = _service(fetcher, backend)

    weather = service.get_enriched_weather("MB", "s0000193")

    assert len(fetcher.calls) == 1
    assert weather.snapshot.location.city == "Winnipeg"


def test_fetch_failure_propagates_and_caches_nothing() -> None:
    fetcher = _FakeFetcher(error=FetchTimeoutError("slow"))
    service, _, backend = _service(fetcher)

    with pytest.raises(FetchTimeoutError):
        service.get_enriched_weather("MB", "s0000193")
    assert len(backend) == 0


def test_parse_failure_propagates_and_caches_nothing() -> None:
    fetcher = _FakeFetcher(xml_text="<siteData><location/></siteData>")
    service, _, backend = _service(fetcher)

    with pytest.raises(ParseError):
        service.get_enriched_weather("MB", "s0000193")
    assert len(backend) == 0


def test_invalid_station_is_rejected_before_fetch() -> None:
    fetcher = _FakeFetcher()
    service, _, _ = _service(fetcher)

    with pytest.raises(InvalidLocationError):
        service.get_enriched_weather("MB", "winnipeg")
    assert fetcher.calls == []


def test_weather_with_insights_reuses_cached_weather() -> None:
    fetcher = _FakeFetcher()
    service, _, _ = _service(fetcher)

    service.get_enriched_weather("MB", "s0000193")
    result = service.get_weather_with_insights("MB", "s0000193")

    assert len(fetcher.calls) == 1
    assert result.weather.station == "s0000193"
    assert result.insights.frost.risk_level == "HIGH"
    assert result.insights.spray is not None


def test_close_releases_fetcher() -> None:
    fetcher = _FakeFetcher()
    service, _, _ = _service(fetcher)

    service.close()

    assert fetcher.closed is True
