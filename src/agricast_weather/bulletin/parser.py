"""Normalize station bulletin XML into WeatherSnapshot models."""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from xml.etree import ElementTree as ET

from ..exceptions import ParseError
from .models import (
    Almanac,
    BulletinLocation,
    CurrentConditions,
    ForecastPeriod,
    WeatherSnapshot,
)

MAX_FORECAST_PERIODS = 5

_COORDINATE_RE = re.compile(r"^\s*(?P<value>-?\d+(?:\.\d+)?)\s*(?P<hemisphere>[NSEW])?\s*$")


class BulletinParser:
    """Pure parser from bulletin document text to a WeatherSnapshot.

    Only `location` and `currentConditions` (with a numeric temperature) are
    required; every other field degrades to None.
    """

    def parse(self, xml_text: str) -> WeatherSnapshot:
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as exc:
            raise ParseError(f"Bulletin is not well-formed XML: {exc}") from exc

        location_el = root.find("location")
        current_el = root.find("currentConditions")
        if location_el is None or current_el is None:
            raise ParseError("Weather data structure is invalid or missing key elements.")

        return WeatherSnapshot(
            location=self._parse_location(location_el),
            current=self._parse_current(current_el),
            forecast=self._parse_forecast(root.find("forecastGroup")),
            almanac=self._parse_almanac(root.find("almanac")),
        )

    def _parse_location(self, location_el: ET.Element) -> BulletinLocation:
        name_el = location_el.find("name")
        city = self._text(name_el)
        if name_el is None or city is None:
            raise ParseError("Bulletin location is missing the station name.")
        province_el = location_el.find("province")
        return BulletinLocation(
            city=city,
            province_code=province_el.get("code") if province_el is not None else None,
            lat=self._parse_coordinate(name_el.get("lat")),
            lon=self._parse_coordinate(name_el.get("lon")),
        )

    def _parse_current(self, current_el: ET.Element) -> CurrentConditions:
        temperature = self._as_float(self._text(current_el.find("temperature")))
        if temperature is None:
            raise ParseError("Bulletin current temperature is missing or not numeric.")

        wind_el = current_el.find("wind")
        wind_speed: float | None = None
        wind_direction: str | None = None
        if wind_el is not None:
            wind_speed = self._as_float(self._text(wind_el.find("speed")))
            wind_direction = self._text(wind_el.find("direction"))

        observed_at, observed_at_utc = self._parse_observation_times(current_el)
        return CurrentConditions(
            temperature_c=temperature,
            condition_text=self._text(current_el.find("condition")),
            humidity_pct=self._as_float(self._text(current_el.find("relativeHumidity"))),
            wind_speed_kmh=wind_speed,
            wind_direction=wind_direction,
            pressure_kpa=self._as_float(self._text(current_el.find("pressure"))),
            visibility_km=self._as_float(self._text(current_el.find("visibility"))),
            dewpoint_c=self._as_float(self._text(current_el.find("dewpoint"))),
            observed_at=observed_at,
            observed_at_utc=observed_at_utc,
            station_name=self._text(current_el.find("station")),
        )

    def _parse_observation_times(
        self, current_el: ET.Element
    ) -> tuple[str | None, datetime | None]:
        date_times = current_el.findall("dateTime")
        utc_el = next((el for el in date_times if el.get("zone") == "UTC"), None)
        local_el = next((el for el in date_times if el.get("zone") not in (None, "UTC")), None)

        summary_el = local_el if local_el is not None else utc_el
        observed_at: str | None = None
        if summary_el is not None:
            observed_at = self._text(summary_el.find("textSummary"))
        return observed_at, self._parse_utc_timestamp(utc_el)

    def _parse_forecast(self, group_el: ET.Element | None) -> list[ForecastPeriod]:
        if group_el is None:
            return []
        periods: list[ForecastPeriod] = []
        for forecast_el in group_el.findall("forecast")[:MAX_FORECAST_PERIODS]:
            period_el = forecast_el.find("period")
            name: str | None = None
            if period_el is not None:
                name = period_el.get("textForecastName") or self._text(period_el)

            abbreviated_el = forecast_el.find("abbreviatedForecast")
            abbreviated_summary: str | None = None
            pop_text: str | None = None
            if abbreviated_el is not None:
                abbreviated_summary = self._text(abbreviated_el.find("textSummary"))
                pop_text = self._text(abbreviated_el.find("pop"))

            high, low = self._tagged_temperatures(forecast_el)
            periods.append(
                ForecastPeriod(
                    name=name,
                    summary_text=self._text(forecast_el.find("textSummary")),
                    abbreviated_summary=abbreviated_summary,
                    temp_high_c=high,
                    temp_low_c=low,
                    prob_precip_pct=self._as_pop(pop_text),
                )
            )
        return periods

    def _tagged_temperatures(self, forecast_el: ET.Element) -> tuple[float | None, float | None]:
        # Untagged entries never yield a high or a low.
        high: float | None = None
        low: float | None = None
        for temp_el in forecast_el.findall("temperatures/temperature"):
            tag = temp_el.get("class")
            if tag == "high" and high is None:
                high = self._as_float(self._text(temp_el))
            elif tag == "low" and low is None:
                low = self._as_float(self._text(temp_el))
        return high, low

    def _parse_almanac(self, almanac_el: ET.Element | None) -> Almanac:
        if almanac_el is None:
            return Almanac()
        by_class: dict[str, float | None] = {}
        for temp_el in almanac_el.findall("temperature"):
            tag = temp_el.get("class")
            if tag and tag not in by_class:
                by_class[tag] = self._as_float(self._text(temp_el))
        return Almanac(
            extreme_max_c=by_class.get("extremeMax"),
            extreme_min_c=by_class.get("extremeMin"),
            normal_max_c=by_class.get("normalMax"),
            normal_min_c=by_class.get("normalMin"),
            normal_pop=self._as_float(self._text(almanac_el.find("pop"))),
        )

    @staticmethod
    def _text(element: ET.Element | None) -> str | None:
        if element is None or element.text is None:
            return None
        text = element.text.strip()
        return text or None

    @staticmethod
    def _as_float(value: str | None) -> float | None:
        if value is None:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    @classmethod
    def _as_pop(cls, value: str | None) -> int:
        parsed = cls._as_float(value)
        if parsed is None:
            return 0
        return max(0, min(100, int(parsed)))

    @staticmethod
    def _parse_coordinate(value: str | None) -> float | None:
        if value is None:
            return None
        match = _COORDINATE_RE.match(value)
        if not match:
            return None
        number = float(match.group("value"))
        if match.group("hemisphere") in {"S", "W"}:
            number = -abs(number)
        return number

    @classmethod
    def _parse_utc_timestamp(cls, date_time_el: ET.Element | None) -> datetime | None:
        if date_time_el is None:
            return None
        parts: list[int] = []
        for tag in ("year", "month", "day", "hour", "minute"):
            value = cls._as_float(cls._text(date_time_el.find(tag)))
            if value is None:
                return None
            parts.append(int(value))
        try:
            return datetime(*parts, tzinfo=UTC)
        except ValueError:
            return None
