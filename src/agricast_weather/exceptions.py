"""Application exception classes."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherEngineError(Exception):
    """Base class for acquisition and parsing failures surfaced to callers."""


class ParseError(WeatherEngineError):
    """Raised when a bulletin is malformed or lacks required fields."""


class FetchTimeoutError(WeatherEngineError):
    """Raised when an upstream provider does not answer within the timeout."""


class InvalidLocationError(WeatherEngineError):
    """Raised for bad station/region identifiers, coordinates or date ranges."""


class UpstreamDataUnavailableError(WeatherEngineError):
    """Raised when the upstream has no data for the requested location/period."""


class UpstreamRequestError(WeatherEngineError):
    """Raised for other upstream failures with status metadata."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheUnavailableError(Exception):
    """Raised by cache backends on persistence I/O failure."""
