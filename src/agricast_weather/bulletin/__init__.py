"""Station bulletin acquisition, parsing and precipitation analysis."""

from .fetcher import StationBulletinFetcher, normalize_station_ref
from .models import (
    DryWindow,
    EnrichedWeather,
    FieldworkRecommendation,
    ForecastPeriod,
    PrecipitationForecast,
    PrecipitationOutlook,
    RawBulletin,
    WeatherSnapshot,
)
from .parser import BulletinParser
from .precipitation import PrecipitationAnalyzer, detect_dry_windows, recommend_fieldwork

__all__ = [
    "BulletinParser",
    "DryWindow",
    "EnrichedWeather",
    "FieldworkRecommendation",
    "ForecastPeriod",
    "PrecipitationAnalyzer",
    "PrecipitationForecast",
    "PrecipitationOutlook",
    "RawBulletin",
    "StationBulletinFetcher",
    "WeatherSnapshot",
    "detect_dry_windows",
    "normalize_station_ref",
    "recommend_fieldwork",
]
