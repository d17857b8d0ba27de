"""Agronomic formula library."""

from .calculator import (
    build_insights,
    calculate_chu,
    calculate_drying_conditions,
    calculate_frost_risk,
    calculate_gdd,
    calculate_spray_conditions,
    estimate_emc,
    estimate_heat_units,
    find_best_spray_window,
)
from .models import (
    AgronomicInsights,
    DryingConditions,
    FrostRisk,
    HeatUnits,
    SprayConditions,
    WeatherWithInsights,
)

__all__ = [
    "AgronomicInsights",
    "DryingConditions",
    "FrostRisk",
    "HeatUnits",
    "SprayConditions",
    "WeatherWithInsights",
    "build_insights",
    "calculate_chu",
    "calculate_drying_conditions",
    "calculate_frost_risk",
    "calculate_gdd",
    "calculate_spray_conditions",
    "estimate_emc",
    "estimate_heat_units",
    "find_best_spray_window",
]
