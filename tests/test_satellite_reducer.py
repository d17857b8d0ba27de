"""Satellite series reduction tests."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from agricast_weather.exceptions import InvalidLocationError, UpstreamDataUnavailableError
from agricast_weather.satellite.dates import (
    format_display,
    is_valid_compact_date,
    iter_days,
    parse_compact_date,
    validate_point_request,
)
from agricast_weather.satellite.reducer import NO_DATA_NOTE, SatelliteSeriesReducer

FIXTURES = Path(__file__).parent / "fixtures"


def _payload() -> dict[str, Any]:
    return json.loads((FIXTURES / "power_daily_point.json").read_text(encoding="utf-8"))


def _reduce(payload: dict[str, Any], start: date, end: date) -> Any:
    return SatelliteSeriesReducer().reduce(payload, lat=49.9, lon=-97.14, start=start, end=end)


def test_fixture_series_statistics() -> None:
    series = _reduce(_payload(), date(2024, 5, 1), date(2024, 5, 8))

    assert series.period.total_days == 8
    assert series.period.days_with_data == 7
    assert series.period.start_display == "May 1, 2024"
    assert series.period.end_display == "May 8, 2024"
    assert series.summary.data_completeness_pct == 87.5
    assert series.summary.total_precipitation_mm == pytest.approx(17.35)
    assert series.summary.average_daily_mm == pytest.approx(2.48)
    assert series.metadata.source == "NASA POWER"


def test_sentinel_days_stay_present_with_note() -> None:
    series = _reduce(_payload(), date(2024, 5, 1), date(2024, 5, 8))

    assert [record.date for record in series.daily] == list(
        iter_days(date(2024, 5, 1), date(2024, 5, 8))
    )
    missing = series.daily[2]
    assert missing.date == date(2024, 5, 3)
    assert missing.precipitation_mm is None
    assert missing.note == NO_DATA_NOTE
    assert series.daily[3].precipitation_mm == 10.25
    assert series.daily[3].note is None


def test_heat_units_accumulate_over_days_with_both_temperatures() -> None:
    summary = _reduce(_payload(), date(2024, 5, 1), date(2024, 5, 8)).summary

    assert summary.heat_unit_days == 7
    assert summary.gdd_accumulated == pytest.approx(70.0)
    assert summary.chu_accumulated == pytest.approx(350.9)


def test_days_absent_from_the_map_are_reported_missing() -> None:
    payload = {"properties": {"parameter": {"PRECTOTCORR": {"20240501": 4.0}}}}
    series = _reduce(payload, date(2024, 5, 1), date(2024, 5, 4))

    assert series.period.total_days == 4
    assert series.period.days_with_data == 1
    assert series.summary.data_completeness_pct == 25.0
    assert series.summary.average_daily_mm == 4.0
    assert series.summary.gdd_accumulated is None


def test_all_sentinel_map_is_a_valid_empty_series() -> None:
    payload = {
        "properties": {"parameter": {"PRECTOTCORR": {"20240501": -999, "20240502": -999.0}}}
    }
    series = _reduce(payload, date(2024, 5, 1), date(2024, 5, 2))

    assert series.summary.total_precipitation_mm == 0.0
    assert series.summary.average_daily_mm == 0.0
    assert series.summary.data_completeness_pct == 0.0
    assert all(record.note == NO_DATA_NOTE for record in series.daily)


def test_header_fill_value_is_treated_as_missing() -> None:
    payload = {
        "header": {"fill_value": -99.0},
        "properties": {"parameter": {"PRECTOTCORR": {"20240501": -99.0, "20240502": 1.0}}},
    }
    series = _reduce(payload, date(2024, 5, 1), date(2024, 5, 2))

    assert series.period.days_with_data == 1


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"properties": {}},
        {"properties": {"parameter": {"T2M": {"20240501": 3.0}}}},
        {"properties": {"parameter": {"PRECTOTCORR": {}}}},
    ],
)
def test_missing_or_empty_precipitation_map_raises(payload: dict[str, Any]) -> None:
    with pytest.raises(UpstreamDataUnavailableError):
        _reduce(payload, date(2024, 5, 1), date(2024, 5, 2))


# ---------------------------------------------------------------------------
# Date handling
# ---------------------------------------------------------------------------


def test_leap_day_range_is_inclusive() -> None:
    start, end = validate_point_request(49.9, -97.1, "20240228", "20240301")
    assert list(iter_days(start, end)) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]


def test_single_day_range() -> None:
    start, end = validate_point_request(0, 0, "20240529", "20240529")
    assert start == end == date(2024, 5, 29)
    assert format_display(start) == "May 29, 2024"


@pytest.mark.parametrize(
    "value",
    [
        "20230229",
        "2024-05-01",
        "202405",
        "20241301",
        "",
        "20240501\n",
        "２０２４０５０１",
        "٢٠٢٤٠٥٠١",
    ],
)
def test_invalid_compact_dates(value: str) -> None:
    assert is_valid_compact_date(value) is False
    with pytest.raises(InvalidLocationError):
        parse_compact_date(value)


@pytest.mark.parametrize(
    ("lat", "lon", "start", "end"),
    [
        (91.0, 0.0, "20240501", "20240502"),
        (-90.5, 0.0, "20240501", "20240502"),
        (0.0, 181.0, "20240501", "20240502"),
        (0.0, 0.0, "20240503", "20240502"),
    ],
)
def test_invalid_point_requests(lat: float, lon: float, start: str, end: str) -> None:
    with pytest.raises(InvalidLocationError):
        validate_point_request(lat, lon, start, end)
