"""Reduce raw satellite daily parameter maps into a SatelliteSeries."""

from __future__ import annotations

import math
from datetime import date
from typing import Any

from ..agronomy.calculator import calculate_chu, calculate_gdd
from ..exceptions import UpstreamDataUnavailableError
from ..rounding import round_half_up
from .dates import format_display, iter_days, to_compact
from .models import (
    DailyPrecipitation,
    SatelliteLocation,
    SatellitePeriod,
    SatelliteSeries,
    SatelliteSummary,
)

MISSING_VALUE_SENTINEL = -999.0
PRECIPITATION_PARAMETER = "PRECTOTCORR"
TEMP_MAX_PARAMETER = "T2M_MAX"
TEMP_MIN_PARAMETER = "T2M_MIN"
NO_DATA_NOTE = "No data available"


class SatelliteSeriesReducer:
    """Turns the provider's `{YYYYMMDD: value}` maps into daily records and statistics."""

    def reduce(
        self,
        payload: dict[str, Any],
        *,
        lat: float,
        lon: float,
        start: date,
        end: date,
    ) -> SatelliteSeries:
        parameters = self._parameter_maps(payload)
        precipitation = parameters.get(PRECIPITATION_PARAMETER)
        if not isinstance(precipitation, dict) or not precipitation:
            raise UpstreamDataUnavailableError(
                "No satellite precipitation data available for this location/time."
            )
        temp_max = parameters.get(TEMP_MAX_PARAMETER)
        temp_min = parameters.get(TEMP_MIN_PARAMETER)
        sentinels = self._sentinels(payload)

        daily: list[DailyPrecipitation] = []
        for day in iter_days(start, end):
            key = to_compact(day)
            value = self._clean(precipitation.get(key), sentinels)
            daily.append(
                DailyPrecipitation(
                    date=day,
                    precipitation_mm=value,
                    note=NO_DATA_NOTE if value is None else None,
                    temp_max_c=self._lookup(temp_max, key, sentinels),
                    temp_min_c=self._lookup(temp_min, key, sentinels),
                )
            )

        return SatelliteSeries(
            location=SatelliteLocation(lat=lat, lon=lon),
            period=SatellitePeriod(
                start_date=start,
                end_date=end,
                start_display=format_display(start),
                end_display=format_display(end),
                total_days=len(daily),
                days_with_data=sum(1 for record in daily if record.precipitation_mm is not None),
            ),
            daily=daily,
            summary=summarize(daily),
        )

    @staticmethod
    def _parameter_maps(payload: dict[str, Any]) -> dict[str, Any]:
        properties = payload.get("properties")
        if not isinstance(properties, dict):
            raise UpstreamDataUnavailableError("Satellite payload missing 'properties' object.")
        parameters = properties.get("parameter")
        if not isinstance(parameters, dict):
            raise UpstreamDataUnavailableError(
                "Satellite payload missing 'properties.parameter' object."
            )
        return parameters

    @staticmethod
    def _sentinels(payload: dict[str, Any]) -> set[float]:
        sentinels = {MISSING_VALUE_SENTINEL}
        header = payload.get("header")
        if isinstance(header, dict):
            fill_value = header.get("fill_value")
            if isinstance(fill_value, (int, float)) and not isinstance(fill_value, bool):
                sentinels.add(float(fill_value))
        return sentinels

    @classmethod
    def _lookup(cls, values: Any, key: str, sentinels: set[float]) -> float | None:
        if not isinstance(values, dict):
            return None
        return cls._clean(values.get(key), sentinels)

    @staticmethod
    def _clean(value: Any, sentinels: set[float]) -> float | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        number = float(value)
        if not math.isfinite(number) or number in sentinels:
            return None
        return number


def summarize(daily: list[DailyPrecipitation]) -> SatelliteSummary:
    """Totals and averages over non-null days; completeness over all requested days."""
    values = [record.precipitation_mm for record in daily if record.precipitation_mm is not None]
    total = sum(values)
    average = total / len(values) if values else 0.0
    completeness = len(values) / len(daily) * 100 if daily else 0.0

    gdd_total = 0.0
    chu_total = 0.0
    heat_days = 0
    for record in daily:
        if record.temp_max_c is None or record.temp_min_c is None:
            continue
        gdd_total += calculate_gdd(record.temp_max_c, record.temp_min_c)
        chu_total += calculate_chu(record.temp_max_c, record.temp_min_c)
        heat_days += 1

    return SatelliteSummary(
        total_precipitation_mm=round_half_up(total, 2),
        average_daily_mm=round_half_up(average, 2),
        data_completeness_pct=round_half_up(completeness, 1),
        heat_unit_days=heat_days,
        gdd_accumulated=round_half_up(gdd_total, 1) if heat_days else None,
        chu_accumulated=round_half_up(chu_total, 1) if heat_days else None,
    )
