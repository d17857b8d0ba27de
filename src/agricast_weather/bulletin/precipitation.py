"""Rule-based precipitation reading of forecast narrative text.

Each field is resolved by an ordered rule table; the first rule that
produces a value wins. Rules only look at the text of one period, so the
analysis of a period never depends on its neighbours. Dry windows and the
fieldwork recommendation are derived afterwards from the whole sequence.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .models import (
    Confidence,
    DryWindow,
    FieldworkRecommendation,
    ForecastPeriod,
    PrecipitationAmounts,
    PrecipitationForecast,
    PrecipitationOutlook,
    PrecipitationType,
    ProbabilityOfPrecip,
    Timing,
)

DEFAULT_CHANCE_OF_ESTIMATE_PCT = 30
DEFAULT_PERIODS_OF_ESTIMATE_PCT = 70

DRY_MAX_PROBABILITY_PCT = 30
DRY_MAX_TOTAL_MM = 2.0
MIN_DRY_WINDOW_PERIODS = 2
URGENT_LOOKAHEAD_PERIODS = 4
URGENT_TOTAL_MM = 10.0
SNOW_CM_TO_MM_WATER = 10.0

_POP_ABBREVIATION_RE = re.compile(r"\bPOP\s*(?P<value>\d+)\s*%", re.IGNORECASE)
_PERCENT_CHANCE_RE = re.compile(r"\b(?P<value>\d+)\s*percent\s+chance\b", re.IGNORECASE)
_RAIN_AMOUNT_RE = re.compile(
    r"(?<![\d.])(?P<low>\d+(?:\.\d+)?)(?:\s+to\s+(?P<high>\d+(?:\.\d+)?))?\s*mm\b",
    re.IGNORECASE,
)
_SNOW_AMOUNT_RE = re.compile(
    r"(?<![\d.])(?P<low>\d+(?:\.\d+)?)(?:\s+to\s+(?P<high>\d+(?:\.\d+)?))?\s*cm\b",
    re.IGNORECASE,
)

# Order matters: first matching keyword decides the timing bucket.
TIMING_RULES: tuple[tuple[str, Timing], ...] = (
    ("ending", "ending"),
    ("beginning", "beginning"),
    ("near noon", "afternoon"),
    ("overnight", "overnight"),
    ("morning", "morning"),
    ("afternoon", "afternoon"),
    ("evening", "evening"),
)

# Every matching rule contributes; order fixes the output order.
TYPE_RULES: tuple[tuple[PrecipitationType, Callable[[str], bool]], ...] = (
    ("freezing_rain", lambda text: "freezing rain" in text),
    ("ice_pellets", lambda text: "ice pellets" in text),
    ("snow", lambda text: "snow" in text and "no snow" not in text),
    ("rain", lambda text: "rain" in text.replace("freezing rain", "")),
    ("drizzle", lambda text: "drizzle" in text),
    ("showers", lambda text: "showers" in text),
    ("thunderstorm", lambda text: "thunderstorm" in text),
)


@dataclass(frozen=True)
class _PeriodText:
    index: int
    label: str
    summary: str
    abbreviated: str

    @property
    def narrative(self) -> str:
        return " ".join(part for part in (self.abbreviated, self.summary) if part).lower()


def confidence_for_index(index: int) -> Confidence:
    """Confidence decays with lead time; the nearest period is always high."""
    if index <= 0:
        return "high"
    if index <= 2:
        return "medium-high"
    if index <= 4:
        return "medium"
    return "low"


def is_dry_period(forecast: PrecipitationForecast) -> bool:
    """Dry when unlikely to precipitate and any known amount is negligible."""
    if forecast.probability_of_precip.value_pct >= DRY_MAX_PROBABILITY_PCT:
        return False
    total = forecast.amounts.total_mm_equivalent
    return total is None or total < DRY_MAX_TOTAL_MM


def detect_dry_windows(forecasts: Sequence[PrecipitationForecast]) -> list[DryWindow]:
    """Return maximal non-overlapping runs of at least two dry periods."""
    windows: list[DryWindow] = []
    start: int | None = None

    def _close(end: int) -> None:
        if start is not None and end - start + 1 >= MIN_DRY_WINDOW_PERIODS:
            windows.append(
                DryWindow(
                    start_index=start,
                    end_index=end,
                    length_periods=end - start + 1,
                    start_period=forecasts[start].period,
                    end_period=forecasts[end].period,
                )
            )

    for index, forecast in enumerate(forecasts):
        if is_dry_period(forecast):
            if start is None:
                start = index
            continue
        _close(index - 1)
        start = None
    _close(len(forecasts) - 1)
    return windows


def recommend_fieldwork(
    forecasts: Sequence[PrecipitationForecast],
    dry_windows: Sequence[DryWindow],
) -> FieldworkRecommendation:
    """Classify the outlook as urgent, favorable or plan_ahead."""
    for forecast in forecasts[:URGENT_LOOKAHEAD_PERIODS]:
        total = forecast.amounts.total_mm_equivalent
        if total is not None and total > URGENT_TOTAL_MM:
            return FieldworkRecommendation(
                status="urgent",
                message=(
                    f"Significant precipitation ({total:g} mm) expected {forecast.period}; "
                    "complete time-sensitive field operations before then."
                ),
            )
    if dry_windows and dry_windows[0].start_index == 0:
        window = dry_windows[0]
        return FieldworkRecommendation(
            status="favorable",
            message=(
                f"Dry conditions from {window.start_period} through {window.end_period} "
                f"({window.length_periods} periods) favour field operations now."
            ),
        )
    return FieldworkRecommendation(
        status="plan_ahead",
        message="No immediate dry window; plan field operations around the forecast.",
    )


class PrecipitationAnalyzer:
    """Derive structured precipitation forecasts from bulletin period text."""

    def __init__(
        self,
        *,
        chance_of_estimate_pct: int = DEFAULT_CHANCE_OF_ESTIMATE_PCT,
        periods_of_estimate_pct: int = DEFAULT_PERIODS_OF_ESTIMATE_PCT,
    ) -> None:
        self.chance_of_estimate_pct = chance_of_estimate_pct
        self.periods_of_estimate_pct = periods_of_estimate_pct
        self.probability_rules: tuple[
            Callable[[_PeriodText], ProbabilityOfPrecip | None], ...
        ] = (
            self._explicit_pop,
            self._percent_chance,
            self._wording_estimate,
        )

    def analyze(self, periods: Sequence[ForecastPeriod]) -> PrecipitationOutlook:
        """Analyze every period in order and derive windows + recommendation."""
        forecasts = [self.analyze_period(index, period) for index, period in enumerate(periods)]
        dry_windows = detect_dry_windows(forecasts)
        return PrecipitationOutlook(
            periods=forecasts,
            dry_windows=dry_windows,
            fieldwork=recommend_fieldwork(forecasts, dry_windows),
        )

    def analyze_period(self, index: int, period: ForecastPeriod) -> PrecipitationForecast:
        text = _PeriodText(
            index=index,
            label=period.name or f"Period {index + 1}",
            summary=period.summary_text or "",
            abbreviated=period.abbreviated_summary or "",
        )
        return PrecipitationForecast(
            period_index=index,
            period=text.label,
            probability_of_precip=self.extract_probability(text),
            amounts=self.extract_amounts(text),
            precipitation_types=self.extract_types(text),
            timing=self.extract_timing(text),
            confidence=confidence_for_index(index),
        )

    def extract_probability(self, text: _PeriodText) -> ProbabilityOfPrecip:
        for rule in self.probability_rules:
            result = rule(text)
            if result is not None:
                return result
        return ProbabilityOfPrecip(value_pct=0, text="No precipitation expected", source="default")

    @staticmethod
    def _explicit_pop(text: _PeriodText) -> ProbabilityOfPrecip | None:
        match = _POP_ABBREVIATION_RE.search(text.abbreviated)
        if not match:
            return None
        value = min(100, int(match.group("value")))
        return ProbabilityOfPrecip(
            value_pct=value,
            text=f"{value}% chance of precipitation",
            source="explicit_pop",
        )

    @staticmethod
    def _percent_chance(text: _PeriodText) -> ProbabilityOfPrecip | None:
        match = _PERCENT_CHANCE_RE.search(text.summary)
        if not match:
            return None
        value = min(100, int(match.group("value")))
        return ProbabilityOfPrecip(
            value_pct=value,
            text=f"{value}% chance of precipitation",
            source="percent_chance",
        )

    def _wording_estimate(self, text: _PeriodText) -> ProbabilityOfPrecip | None:
        narrative = text.narrative
        if "showers" not in narrative and "rain" not in narrative:
            return None
        for phrase, value in (
            ("chance of", self.chance_of_estimate_pct),
            ("periods of", self.periods_of_estimate_pct),
        ):
            if phrase in narrative:
                return ProbabilityOfPrecip(
                    value_pct=value,
                    text=f"Estimated {value}% from '{phrase}' wording",
                    source="estimated",
                )
        return None

    @staticmethod
    def extract_amounts(text: _PeriodText) -> PrecipitationAmounts:
        rain_range = _match_range(_RAIN_AMOUNT_RE, text.summary)
        snow_range = _match_range(_SNOW_AMOUNT_RE, text.summary)

        rain_mm = _midpoint(rain_range) if rain_range else None
        snow_cm = _midpoint(snow_range) if snow_range else None

        total: float | None = None
        if rain_mm is not None:
            total = rain_mm
        if snow_cm is not None:
            total = (total or 0.0) + snow_cm * SNOW_CM_TO_MM_WATER

        return PrecipitationAmounts(
            rain_mm=rain_mm,
            rain_range_mm=rain_range,
            snow_cm=snow_cm,
            snow_range_cm=snow_range,
            total_mm_equivalent=total,
            unit="mm water equivalent" if snow_cm is not None else "mm",
        )

    @staticmethod
    def extract_types(text: _PeriodText) -> list[PrecipitationType]:
        narrative = text.narrative
        matched = [kind for kind, predicate in TYPE_RULES if predicate(narrative)]
        return matched or ["none"]

    @staticmethod
    def extract_timing(text: _PeriodText) -> Timing:
        narrative = text.narrative
        for keyword, bucket in TIMING_RULES:
            if keyword in narrative:
                return bucket
        return "throughout"


def _match_range(pattern: re.Pattern[str], text: str) -> tuple[float, float] | None:
    match = pattern.search(text)
    if not match:
        return None
    low = float(match.group("low"))
    high = float(match.group("high")) if match.group("high") else low
    if high < low:
        low, high = high, low
    return low, high


def _midpoint(bounds: tuple[float, float]) -> float:
    return (bounds[0] + bounds[1]) / 2
