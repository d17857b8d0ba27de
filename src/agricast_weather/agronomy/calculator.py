"""Closed-form agronomic formulas over normalized weather snapshots.

All functions are pure. Passing None for a reading a formula needs is a
caller error and raises ValueError.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..bulletin.models import ForecastPeriod, WeatherSnapshot
from ..rounding import round_half_up, round_to_int
from .models import (
    AgronomicInsights,
    DryingConditions,
    DryingDetails,
    DryingRating,
    FrostRisk,
    FrostRiskLevel,
    HeatUnits,
    SprayCheck,
    SprayConditions,
    SprayOverall,
)

GDD_BASE_TEMP_C = 10.0
GDD_MAX_THRESHOLD_C = 30.0

SPRAY_TEMP_RANGE_C = (5.0, 28.0)
SPRAY_WIND_RANGE_KMH = (3.0, 15.0)
SPRAY_HUMIDITY_RANGE_PCT = (40.0, 80.0)

EMC_MAX_PCT = 40.0
EMC_BONE_DRY_PCT = 5.0

# Rough estimate used when the nearest period has no forecast low.
# Not a validated meteorological model.
FROST_FALLBACK_DROP_C = 3.0
FROST_CALM_WIND_KMH = 8.0

NO_SPRAY_WINDOW_MESSAGE = (
    "No ideal window identified with current daily forecast data. Check hourly if available."
)


def calculate_gdd(
    temp_max: float,
    temp_min: float,
    base_temp: float = GDD_BASE_TEMP_C,
    max_threshold: float = GDD_MAX_THRESHOLD_C,
) -> float:
    """Growing degree days with both temperatures clamped into [base, max]."""
    adj_max = min(max(temp_max, base_temp), max_threshold)
    adj_min = min(max(temp_min, base_temp), max_threshold)
    return max(0.0, (adj_max + adj_min) / 2 - base_temp)


def calculate_chu(temp_max: float, temp_min: float) -> float:
    """Corn heat units (Ontario method)."""
    y_max = 0.0
    if temp_max > 10:
        y_max = 3.33 * (temp_max - 10) - 0.084 * max(0.0, temp_max - 10) ** 2
    y_min = 0.0
    if temp_min > 4.4:
        y_min = 1.8 * (temp_min - 4.4)
    return max(0.0, y_max) + max(0.0, y_min)


def _require(value: float | None, name: str) -> float:
    if value is None:
        raise ValueError(f"{name} is required for this calculation.")
    return value


def _bounded_check(
    value: float,
    bounds: tuple[float, float],
    *,
    below_reason: str,
    above_reason: str,
) -> SprayCheck:
    low, high = bounds
    if value < low:
        return SprayCheck(value=value, suitable=False, reason=below_reason)
    if value > high:
        return SprayCheck(value=value, suitable=False, reason=above_reason)
    return SprayCheck(value=value, suitable=True, reason="Good")


def find_best_spray_window(forecast: Sequence[ForecastPeriod]) -> str:
    """Name the first period whose daytime high suits spraying."""
    low, high = SPRAY_TEMP_RANGE_C
    for period in forecast:
        if period.temp_high_c is not None and low < period.temp_high_c < high:
            name = (period.name or "the next period").lower()
            return (
                f"Consider spraying during {name} if other conditions "
                "(wind, humidity) are met."
            )
    return NO_SPRAY_WINDOW_MESSAGE


def calculate_spray_conditions(snapshot: WeatherSnapshot) -> SprayConditions:
    current = snapshot.current
    temperature = _bounded_check(
        current.temperature_c,
        SPRAY_TEMP_RANGE_C,
        below_reason="Too cold - reduced herbicide efficacy",
        above_reason="Too hot - increased drift and volatility",
    )
    wind = _bounded_check(
        _require(current.wind_speed_kmh, "wind_speed_kmh"),
        SPRAY_WIND_RANGE_KMH,
        below_reason="Too calm - potential for inversion layer",
        above_reason="Too windy - high drift risk",
    )
    humidity = _bounded_check(
        _require(current.humidity_pct, "humidity_pct"),
        SPRAY_HUMIDITY_RANGE_PCT,
        below_reason="Too dry - rapid droplet evaporation",
        above_reason="Too humid - slow drying, reduced absorption",
    )
    return SprayConditions(
        temperature=temperature,
        wind=wind,
        humidity=humidity,
        overall=SprayOverall(
            can_spray=temperature.suitable and wind.suitable and humidity.suitable,
            best_window=find_best_spray_window(snapshot.forecast) if snapshot.forecast else None,
        ),
    )


def estimate_emc(temperature_c: float, humidity_pct: float) -> float:
    """Equilibrium moisture content estimate, clamped to [0, 40]."""
    if humidity_pct <= 0:
        return EMC_BONE_DRY_PCT
    if humidity_pct >= 100:
        return EMC_MAX_PCT
    denominator = -0.0005 * (temperature_c + 20)
    if denominator == 0:
        return EMC_MAX_PCT
    emc = 100 * math.log(1 - humidity_pct / 100) / denominator
    return max(0.0, min(emc, EMC_MAX_PCT))


def _drying_rating(score: int) -> DryingRating:
    if score >= 75:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Poor"


def calculate_drying_conditions(snapshot: WeatherSnapshot) -> DryingConditions:
    temp = snapshot.current.temperature_c
    humidity = _require(snapshot.current.humidity_pct, "humidity_pct")
    wind = _require(snapshot.current.wind_speed_kmh, "wind_speed_kmh")

    temp_score = max(0.0, min(temp, 30.0)) / 30 * 35
    humidity_score = max(0.0, (100 - humidity) / 100 * 45)
    wind_score = min(wind, 25.0) / 25 * 20
    score = round_to_int(temp_score + humidity_score + wind_score)

    return DryingConditions(
        emc_estimated_pct=round_half_up(estimate_emc(temp, humidity), 1),
        drying_score=min(100, max(0, score)),
        rating=_drying_rating(score),
        details=DryingDetails(temperature_c=temp, humidity_pct=humidity, wind_kmh=wind),
    )


def calculate_frost_risk(snapshot: WeatherSnapshot) -> FrostRisk:
    current = snapshot.current
    current_temp = current.temperature_c
    condition = (current.condition_text or "").lower()

    forecast_low = snapshot.forecast[0].temp_low_c if snapshot.forecast else None
    is_estimate = forecast_low is None
    effective = current_temp - FROST_FALLBACK_DROP_C if is_estimate else forecast_low

    level: FrostRiskLevel = "LOW"
    factors: list[str] = []
    if effective <= 0:
        level = "HIGH"
        factors.append("Temperature expected to drop to 0°C or below.")
    elif effective <= 2:
        level = "MEDIUM"
        factors.append("Temperature expected to drop near 0-2°C, light frost possible.")
    elif effective <= 4:
        factors.append(
            "Temperatures expected to remain above 2-4°C, but monitor if skies clear."
        )

    calm = current.wind_speed_kmh is not None and current.wind_speed_kmh < FROST_CALM_WIND_KMH
    clear = "clear" in condition or "a few clouds" in condition
    if calm and clear:
        factors.append("Clear skies and light winds increase radiative cooling and frost risk.")
        if level == "LOW" and effective <= 5:
            level = "MEDIUM"

    dewpoint = current.dewpoint_c
    if dewpoint is not None and effective <= dewpoint and effective <= 2:
        factors.append(
            "Temperature may drop to dew point, increasing frost intensity if below freezing."
        )

    if not factors and level == "LOW":
        factors.append("Currently, frost risk appears low based on available data.")

    return FrostRisk(
        current_temp_c=current_temp,
        expected_low_c=forecast_low,
        effective_temp_c=effective,
        effective_temp_is_estimate=is_estimate,
        risk_level=level,
        factors=factors,
    )


def estimate_heat_units(
    snapshot: WeatherSnapshot,
    base_temp: float = GDD_BASE_TEMP_C,
) -> HeatUnits | None:
    """GDD/CHU for the coming day from the first high and low in the next two periods."""
    upcoming = snapshot.forecast[:2]
    high = next((p.temp_high_c for p in upcoming if p.temp_high_c is not None), None)
    low = next((p.temp_low_c for p in upcoming if p.temp_low_c is not None), None)
    if high is None or low is None:
        return None
    return HeatUnits(
        temp_max_c=high,
        temp_min_c=low,
        base_temp_c=base_temp,
        gdd=calculate_gdd(high, low, base_temp=base_temp),
        chu=calculate_chu(high, low),
    )


def build_insights(snapshot: WeatherSnapshot) -> AgronomicInsights:
    """Run every assessment whose inputs the snapshot provides."""
    notes: list[str] = []
    spray = None
    drying = None
    if snapshot.current.humidity_pct is None or snapshot.current.wind_speed_kmh is None:
        notes.append("Spray and drying assessments skipped: humidity or wind not reported.")
    else:
        spray = calculate_spray_conditions(snapshot)
        drying = calculate_drying_conditions(snapshot)

    heat_units = estimate_heat_units(snapshot)
    if heat_units is None:
        notes.append("Heat units unavailable: forecast lacks a high/low pair.")

    return AgronomicInsights(
        spray=spray,
        drying=drying,
        frost=calculate_frost_risk(snapshot),
        heat_units=heat_units,
        notes=notes,
    )
