"""Compact YYYYMMDD date handling for satellite requests."""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import date, timedelta

from ..exceptions import InvalidLocationError

_COMPACT_DATE_RE = re.compile(r"[0-9]{8}")


def parse_compact_date(value: str) -> date:
    """Parse an 8-digit YYYYMMDD string into a calendar date."""
    if not isinstance(value, str) or not _COMPACT_DATE_RE.fullmatch(value):
        raise InvalidLocationError(f"Invalid date {value!r}; expected YYYYMMDD.")
    try:
        return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
    except ValueError as exc:
        raise InvalidLocationError(f"Invalid calendar date {value!r}.") from exc


def is_valid_compact_date(value: str) -> bool:
    try:
        parse_compact_date(value)
    except InvalidLocationError:
        return False
    return True


def to_compact(day: date) -> str:
    return day.strftime("%Y%m%d")


def format_display(day: date) -> str:
    """Long-form date label, e.g. 'May 29, 2024'."""
    return f"{day:%B} {day.day}, {day.year}"


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def validate_point_request(
    lat: float, lon: float, start_date: str, end_date: str
) -> tuple[date, date]:
    """Validate coordinates and the inclusive date range before any upstream call."""
    if not (-90 <= lat <= 90):
        raise InvalidLocationError(f"Invalid latitude {lat}; expected between -90 and 90.")
    if not (-180 <= lon <= 180):
        raise InvalidLocationError(f"Invalid longitude {lon}; expected between -180 and 180.")
    start = parse_compact_date(start_date)
    end = parse_compact_date(end_date)
    if start > end:
        raise InvalidLocationError(f"Start date {start_date} is after end date {end_date}.")
    return start, end
