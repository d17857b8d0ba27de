"""Command line entry point: fetch weather, satellite series, or warm the cache."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table

from .agronomy.models import AgronomicInsights
from .bulletin.models import EnrichedWeather
from .cache.store import CacheStore
from .config import Settings, load_settings
from .exceptions import ConfigError, InvalidLocationError, WeatherEngineError
from .log_setup import setup_logger
from .satellite.models import SatelliteSeries
from .services import (
    WARMING_ZONES,
    StationRef,
    WarmReport,
    build_cache_store,
    build_cache_warmer,
    build_satellite_service,
    build_weather_service,
    merge_station_lists,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="agricast-weather",
        description="Station bulletins, satellite precipitation and agronomic insights.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    weather = commands.add_parser("weather", help="Fetch the enriched bulletin for a station.")
    weather.add_argument("--region", required=True, help="Two-letter province code, e.g. MB.")
    weather.add_argument("--station", required=True, help="Station code, e.g. s0000193.")
    weather.add_argument(
        "--insights",
        action="store_true",
        help="Also print spray, drying, frost and heat-unit assessments.",
    )

    satellite = commands.add_parser("satellite", help="Fetch a daily satellite series.")
    satellite.add_argument("--lat", type=float, required=True, help="Latitude in degrees.")
    satellite.add_argument("--lon", type=float, required=True, help="Longitude in degrees.")
    satellite.add_argument("--start", required=True, help="First day, YYYYMMDD.")
    satellite.add_argument("--end", required=True, help="Last day, YYYYMMDD.")

    warm = commands.add_parser("warm", help="Refresh cached bulletins for a zone.")
    warm.add_argument("--zone", choices=sorted(WARMING_ZONES), default="central")
    warm.add_argument(
        "--station",
        dest="extra_stations",
        action="append",
        default=[],
        metavar="REGION/STATION",
        help="Additional station to warm after the zone's priority list (repeatable).",
    )
    return parser.parse_args(argv)


def _parse_station_arg(value: str) -> StationRef:
    region, sep, station = value.partition("/")
    if not sep or not region or not station:
        raise InvalidLocationError(f"Invalid --station {value!r}; expected REGION/STATION.")
    return StationRef(region=region.upper(), station=station.lower())


def _fmt(value: float | int | None, suffix: str = "") -> str:
    return f"{value:g}{suffix}" if value is not None else "-"


def _print_weather(console: Console, weather: EnrichedWeather) -> None:
    snapshot = weather.snapshot
    current = snapshot.current
    location = snapshot.location.city
    if snapshot.location.province_code:
        location = f"{location}, {snapshot.location.province_code}"
    console.print(f"Station {weather.region}/{weather.station}: {location}")
    console.print(f"Source: {weather.source}")
    console.print(
        f"Now: temp={_fmt(current.temperature_c, 'C')} "
        f"condition={current.condition_text or '-'}"
    )

    outlook = {item.period_index: item for item in weather.precipitation.periods}
    table = Table(title="Forecast Periods")
    table.add_column("Period", overflow="fold")
    table.add_column("High")
    table.add_column("Low")
    table.add_column("POP")
    table.add_column("Types")
    table.add_column("Timing")
    table.add_column("Amount")
    table.add_column("Summary", overflow="fold")
    for index, period in enumerate(snapshot.forecast):
        precip = outlook.get(index)
        table.add_row(
            period.name or "-",
            _fmt(period.temp_high_c),
            _fmt(period.temp_low_c),
            f"{precip.probability_of_precip.value_pct}%" if precip else "-",
            ", ".join(precip.precipitation_types) if precip else "-",
            precip.timing if precip else "-",
            _fmt(precip.amounts.total_mm_equivalent, " mm") if precip else "-",
            period.summary_text or "-",
        )
    console.print(table)

    for window in weather.precipitation.dry_windows:
        console.print(
            f"Dry window: {window.start_period} -> {window.end_period} "
            f"({window.length_periods} periods)"
        )
    fieldwork = weather.precipitation.fieldwork
    console.print(f"Fieldwork ({fieldwork.status}): {fieldwork.message}")


def _print_insights(console: Console, insights: AgronomicInsights) -> None:
    table = Table(title="Agronomic Insights")
    table.add_column("Assessment")
    table.add_column("Result")
    table.add_column("Detail", overflow="fold")
    if insights.spray is not None:
        spray = insights.spray
        reasons = "; ".join(
            f"{name}: {check.reason}"
            for name, check in (
                ("temp", spray.temperature),
                ("wind", spray.wind),
                ("humidity", spray.humidity),
            )
        )
        table.add_row("Spray", "yes" if spray.overall.can_spray else "no", reasons)
    if insights.drying is not None:
        drying = insights.drying
        table.add_row(
            "Drying",
            f"{drying.drying_score} ({drying.rating})",
            f"EMC ~{drying.emc_estimated_pct:g}%",
        )
    frost = insights.frost
    table.add_row("Frost", frost.risk_level, " ".join(frost.factors))
    if insights.heat_units is not None:
        heat = insights.heat_units
        table.add_row("Heat units", f"GDD {heat.gdd:.1f}", f"CHU {heat.chu:.1f}")
    console.print(table)
    for note in insights.notes:
        console.print(f"Note: {note}")


def _print_satellite(console: Console, series: SatelliteSeries) -> None:
    period = series.period
    summary = series.summary
    console.print(
        f"Location=({series.location.lat:.4f}, {series.location.lon:.4f}) "
        f"period={period.start_display} - {period.end_display} "
        f"days={period.days_with_data}/{period.total_days}"
    )
    table = Table(title="Daily Precipitation")
    table.add_column("Date")
    table.add_column("Precip (mm)")
    table.add_column("Max")
    table.add_column("Min")
    table.add_column("Note")
    for record in series.daily:
        table.add_row(
            record.date.isoformat(),
            _fmt(record.precipitation_mm),
            _fmt(record.temp_max_c),
            _fmt(record.temp_min_c),
            record.note or "",
        )
    console.print(table)
    console.print(
        f"Total={summary.total_precipitation_mm:g} mm "
        f"average={summary.average_daily_mm:g} mm/day "
        f"completeness={summary.data_completeness_pct:g}%"
    )
    if summary.gdd_accumulated is not None:
        console.print(f"GDD={summary.gdd_accumulated:g} CHU={summary.chu_accumulated:g}")


def _print_warm_report(console: Console, report: WarmReport) -> None:
    table = Table(title="Cache Warming")
    table.add_column("Station")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Error", overflow="fold")
    for result in report.results:
        table.add_row(result.station_key, result.name or "-", result.status, result.error or "")
    console.print(table)
    console.print(f"Successful={report.successful} failed={report.failed}")


def _run(
    args: argparse.Namespace,
    settings: Settings,
    cache: CacheStore,
    console: Console,
    logger: logging.Logger,
) -> int:
    if args.command == "satellite":
        satellite_service = build_satellite_service(settings, cache, logger=logger)
        try:
            series = satellite_service.get_satellite_series(
                args.lat, args.lon, args.start, args.end
            )
        finally:
            satellite_service.close()
        _print_satellite(console, series)
        return 0

    weather_service = build_weather_service(settings, cache, logger=logger)
    try:
        if args.command == "warm":
            priority, region_filter = WARMING_ZONES[args.zone]
            extras = [_parse_station_arg(value) for value in args.extra_stations]
            stations = merge_station_lists(priority, extras, region_filter)
            report = build_cache_warmer(settings, weather_service, logger=logger).warm(stations)
            _print_warm_report(console, report)
            return 0 if report.failed == 0 else 4

        if args.insights:
            result = weather_service.get_weather_with_insights(args.region, args.station)
            _print_weather(console, result.weather)
            _print_insights(console, result.insights)
        else:
            _print_weather(
                console, weather_service.get_enriched_weather(args.region, args.station)
            )
    finally:
        weather_service.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return its exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    logger.setLevel(settings.log_level.upper())
    logger.info("Starting %s command with config %s", args.command, settings.safe_summary())

    try:
        cache = build_cache_store(settings, logger=logger)
        return _run(args, settings, cache, console, logger)
    except WeatherEngineError as exc:
        logger.error("%s command failed: %s", args.command, exc)
        return 4
    except Exception as exc:  # pragma: no cover - last-resort CLI guard
        logger.exception("Unexpected CLI failure: %s", exc)
        return 99


if __name__ == "__main__":
    sys.exit(main())
