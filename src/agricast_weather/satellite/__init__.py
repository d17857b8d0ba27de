"""Satellite point time-series acquisition and reduction."""

from .dates import (
    format_display,
    is_valid_compact_date,
    parse_compact_date,
    validate_point_request,
)
from .fetcher import SatelliteSeriesFetcher
from .models import DailyPrecipitation, SatelliteSeries, SatelliteSummary
from .reducer import MISSING_VALUE_SENTINEL, SatelliteSeriesReducer, summarize

__all__ = [
    "MISSING_VALUE_SENTINEL",
    "DailyPrecipitation",
    "SatelliteSeries",
    "SatelliteSeriesFetcher",
    "SatelliteSeriesReducer",
    "SatelliteSummary",
    "format_display",
    "is_valid_compact_date",
    "parse_compact_date",
    "summarize",
    "validate_point_request",
]
