"""Bulletin retrieval tests against a mocked transport."""

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from agricast_weather.bulletin.fetcher import StationBulletinFetcher, normalize_station_ref
from agricast_weather.exceptions import (
    FetchTimeoutError,
    InvalidLocationError,
    UpstreamRequestError,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _make_settings(**overrides: Any) -> Any:
    defaults = {
        "bulletin_base_url": "https://bulletins.example.test/citypage_weather/xml/",
        "bulletin_timeout_seconds": 5.0,
        "http_user_agent": "agricast-tests/0.1",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _make_fetcher(handler: Any) -> StationBulletinFetcher:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return StationBulletinFetcher(
        settings=_make_settings(),
        logger=logging.getLogger("test_bulletin_fetcher"),
        client=client,
    )


def test_fetch_builds_station_url_and_returns_raw_text() -> None:
    xml_text = (FIXTURES / "winnipeg_bulletin.xml").read_text(encoding="utf-8")
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=xml_text)

    with _make_fetcher(handler) as fetcher:
        raw = fetcher.fetch("mb", "S0000193")

    assert seen == ["https://bulletins.example.test/citypage_weather/xml/MB/s0000193_e.xml"]
    assert raw.region == "MB"
    assert raw.station == "s0000193"
    assert raw.xml_text == xml_text


def test_not_found_means_invalid_location() -> None:
    fetcher = _make_fetcher(lambda request: httpx.Response(404, text="Not Found"))

    with pytest.raises(InvalidLocationError, match="MB/s9999999"):
        fetcher.fetch("MB", "s9999999")


def test_timeout_is_reported_distinctly() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(FetchTimeoutError):
        _make_fetcher(handler).fetch("MB", "s0000193")


def test_server_error_carries_status_code() -> None:
    fetcher = _make_fetcher(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(UpstreamRequestError) as excinfo:
        fetcher.fetch("SK", "s0000788")
    assert excinfo.value.status_code == 503


def test_transport_error_is_upstream_request_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamRequestError) as excinfo:
        _make_fetcher(handler).fetch("AB", "s0000047")
    assert excinfo.value.status_code is None


@pytest.mark.parametrize(
    ("region", "station"),
    [("Manitoba", "s0000193"), ("M1", "s0000193"), ("MB", "0000193"), ("MB", "s000019")],
)
def test_malformed_identifiers_are_rejected_before_any_request(
    region: str, station: str
) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text="<siteData/>")

    with pytest.raises(InvalidLocationError):
        _make_fetcher(handler).fetch(region, station)
    assert calls == []


def test_normalize_station_ref_canonicalizes_case() -> None:
    assert normalize_station_ref(" sk ", "S0000797") == ("SK", "s0000797")
