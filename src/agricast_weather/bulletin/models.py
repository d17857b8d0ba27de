"""Typed models for normalized station bulletins and precipitation outlooks."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class BulletinLocation(BaseModel):
    """Station location as published in the bulletin."""

    city: str
    province_code: str | None = None
    lat: float | None = None
    lon: float | None = None


class CurrentConditions(BaseModel):
    """Latest observation at the station."""

    temperature_c: float
    condition_text: str | None = None
    humidity_pct: float | None = None
    wind_speed_kmh: float | None = None
    wind_direction: str | None = None
    pressure_kpa: float | None = None
    visibility_km: float | None = None
    dewpoint_c: float | None = None
    observed_at: str | None = None
    observed_at_utc: datetime | None = None
    station_name: str | None = None


class ForecastPeriod(BaseModel):
    """One named forecast period, nearest first."""

    name: str | None = None
    summary_text: str | None = None
    abbreviated_summary: str | None = None
    temp_high_c: float | None = None
    temp_low_c: float | None = None
    prob_precip_pct: int = 0


class Almanac(BaseModel):
    """Historical reference values; absent values stay None."""

    extreme_max_c: float | None = None
    extreme_min_c: float | None = None
    normal_max_c: float | None = None
    normal_min_c: float | None = None
    normal_pop: float | None = None


class WeatherSnapshot(BaseModel):
    """Normalized station state plus short-range forecast."""

    location: BulletinLocation
    current: CurrentConditions
    forecast: list[ForecastPeriod] = Field(default_factory=list, max_length=5)
    almanac: Almanac = Field(default_factory=Almanac)


class RawBulletin(BaseModel):
    """Raw bulletin document as returned by the upstream provider."""

    region: str
    station: str
    url: str
    xml_text: str
    fetched_at: datetime


PrecipitationType = Literal[
    "rain",
    "snow",
    "drizzle",
    "showers",
    "freezing_rain",
    "ice_pellets",
    "thunderstorm",
    "none",
]
Timing = Literal[
    "beginning",
    "ending",
    "overnight",
    "morning",
    "afternoon",
    "evening",
    "throughout",
]
Confidence = Literal["high", "medium-high", "medium", "low"]
ProbabilitySource = Literal["explicit_pop", "percent_chance", "estimated", "default"]
FieldworkStatus = Literal["urgent", "favorable", "plan_ahead"]


class ProbabilityOfPrecip(BaseModel):
    """Precipitation probability and how it was obtained."""

    value_pct: int = Field(ge=0, le=100)
    text: str
    source: ProbabilitySource


class PrecipitationAmounts(BaseModel):
    """Expected accumulations extracted from forecast wording."""

    rain_mm: float | None = None
    rain_range_mm: tuple[float, float] | None = None
    snow_cm: float | None = None
    snow_range_cm: tuple[float, float] | None = None
    total_mm_equivalent: float | None = None
    unit: str = "mm"


class PrecipitationForecast(BaseModel):
    """Structured precipitation reading of one forecast period."""

    period_index: int = Field(ge=0)
    period: str
    probability_of_precip: ProbabilityOfPrecip
    amounts: PrecipitationAmounts
    precipitation_types: list[PrecipitationType]
    timing: Timing
    confidence: Confidence


class DryWindow(BaseModel):
    """A maximal run of at least two consecutive dry periods."""

    start_index: int
    end_index: int
    length_periods: int = Field(ge=2)
    start_period: str
    end_period: str


class FieldworkRecommendation(BaseModel):
    """Field-operation advice derived from the precipitation outlook."""

    status: FieldworkStatus
    message: str


class PrecipitationOutlook(BaseModel):
    """Per-period precipitation forecasts with derived aggregates."""

    periods: list[PrecipitationForecast] = Field(default_factory=list)
    dry_windows: list[DryWindow] = Field(default_factory=list)
    fieldwork: FieldworkRecommendation


class EnrichedWeather(BaseModel):
    """Snapshot merged with its precipitation outlook, as cached and served."""

    source: str = "ECCC"
    region: str
    station: str
    retrieved_at: datetime
    snapshot: WeatherSnapshot
    precipitation: PrecipitationOutlook
