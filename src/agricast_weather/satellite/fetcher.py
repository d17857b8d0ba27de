"""HTTP retrieval of daily satellite point time series."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import (
    FetchTimeoutError,
    InvalidLocationError,
    UpstreamDataUnavailableError,
    UpstreamRequestError,
)
from ..log_setup import get_logger
from .dates import validate_point_request


class SatelliteSeriesFetcher:
    """Fetches raw daily point data for coordinates and a YYYYMMDD range."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or get_logger("satellite.fetcher")
        self._url = str(settings.satellite_base_url).rstrip("/")
        self._client = client or httpx.Client(
            timeout=settings.satellite_timeout_seconds,
            headers={"User-Agent": settings.http_user_agent},
        )

    def __enter__(self) -> SatelliteSeriesFetcher:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_params(
        self, lat: float, lon: float, start_date: str, end_date: str
    ) -> dict[str, Any]:
        return {
            "parameters": self.settings.satellite_parameters,
            "community": self.settings.satellite_community,
            "longitude": lon,
            "latitude": lat,
            "start": start_date,
            "end": end_date,
            "format": "JSON",
        }

    def fetch(self, lat: float, lon: float, start_date: str, end_date: str) -> dict[str, Any]:
        """Fetch the raw JSON payload after validating the request locally."""
        validate_point_request(lat, lon, start_date, end_date)
        params = self.build_params(lat, lon, start_date, end_date)
        self.logger.info(
            "Fetching satellite series for (%s, %s) %s-%s", lat, lon, start_date, end_date
        )

        try:
            response = self._client.get(self._url, params=params)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            self.logger.warning("Satellite fetch timed out for (%s, %s)", lat, lon)
            raise FetchTimeoutError(
                "Satellite data service timeout; the provider may be slow to respond."
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self.logger.warning("Satellite fetch failed for (%s, %s) (HTTP %d)", lat, lon, status)
            if status == 422:
                raise InvalidLocationError(
                    "Invalid coordinates or date range for the satellite data service."
                ) from exc
            if status == 404:
                raise UpstreamDataUnavailableError(
                    "No satellite data available for this location/time."
                ) from exc
            raise UpstreamRequestError(
                f"Satellite fetch failed with status {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.warning(
                "Satellite request failed for (%s, %s) (%s)", lat, lon, type(exc).__name__
            )
            raise UpstreamRequestError(f"Satellite request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamRequestError(
                "Satellite data service returned non-JSON response."
            ) from exc
        if not isinstance(payload, dict):
            raise UpstreamRequestError(
                f"Satellite data service returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        return payload
