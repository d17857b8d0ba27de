"""Typed models for reduced satellite point time series."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class SatelliteLocation(BaseModel):
    lat: float
    lon: float


class SatellitePeriod(BaseModel):
    """Requested date range with display labels and coverage counts."""

    start_date: dt.date
    end_date: dt.date
    start_display: str
    end_display: str
    total_days: int = Field(ge=1)
    days_with_data: int = Field(ge=0)


class DailyPrecipitation(BaseModel):
    """One requested day; missing upstream data stays None."""

    date: dt.date
    precipitation_mm: float | None = None
    unit: str = "mm"
    note: str | None = None
    temp_max_c: float | None = None
    temp_min_c: float | None = None


class SatelliteSummary(BaseModel):
    total_precipitation_mm: float
    average_daily_mm: float
    data_completeness_pct: float = Field(ge=0, le=100)
    unit: str = "mm"
    heat_unit_days: int = 0
    gdd_accumulated: float | None = None
    chu_accumulated: float | None = None


class SatelliteMetadata(BaseModel):
    source: str = "NASA POWER"
    parameter: str = "PRECTOTCORR (Precipitation Corrected)"
    spatial_resolution: str = "0.5 x 0.5 degree"
    temporal_resolution: str = "Daily"


class SatelliteSeries(BaseModel):
    """Per-day precipitation records plus summary statistics for one point."""

    location: SatelliteLocation
    period: SatellitePeriod
    daily: list[DailyPrecipitation] = Field(default_factory=list)
    summary: SatelliteSummary
    metadata: SatelliteMetadata = Field(default_factory=SatelliteMetadata)
