"""Typed results of agronomic assessments."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..bulletin.models import EnrichedWeather

DryingRating = Literal["Excellent", "Good", "Fair", "Poor"]
FrostRiskLevel = Literal["LOW", "MEDIUM", "HIGH"]


class SprayCheck(BaseModel):
    """One bounded suitability check."""

    value: float
    suitable: bool
    reason: str


class SprayOverall(BaseModel):
    can_spray: bool
    best_window: str | None = None


class SprayConditions(BaseModel):
    """Temperature, wind and humidity checks for pesticide application."""

    temperature: SprayCheck
    wind: SprayCheck
    humidity: SprayCheck
    overall: SprayOverall


class DryingDetails(BaseModel):
    temperature_c: float
    humidity_pct: float
    wind_kmh: float


class DryingConditions(BaseModel):
    """Harvest drying potential."""

    emc_estimated_pct: float
    drying_score: int = Field(ge=0, le=100)
    rating: DryingRating
    details: DryingDetails


class FrostRisk(BaseModel):
    """Overnight frost classification with every contributing factor."""

    current_temp_c: float
    expected_low_c: float | None = None
    effective_temp_c: float
    effective_temp_is_estimate: bool
    risk_level: FrostRiskLevel
    factors: list[str] = Field(default_factory=list)


class HeatUnits(BaseModel):
    """Daily heat accumulation from one high/low pair."""

    temp_max_c: float
    temp_min_c: float
    base_temp_c: float
    gdd: float
    chu: float


class AgronomicInsights(BaseModel):
    spray: SprayConditions | None = None
    drying: DryingConditions | None = None
    frost: FrostRisk
    heat_units: HeatUnits | None = None
    notes: list[str] = Field(default_factory=list)


class WeatherWithInsights(BaseModel):
    """Enriched weather together with the agronomic assessments derived from it."""

    weather: EnrichedWeather
    insights: AgronomicInsights
