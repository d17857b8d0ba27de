"""HTTP retrieval of raw station bulletins."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import (
    FetchTimeoutError,
    InvalidLocationError,
    UpstreamRequestError,
)
from ..log_setup import get_logger
from .models import RawBulletin

_REGION_RE = re.compile(r"^[A-Z]{2}$")
_STATION_RE = re.compile(r"^s\d{7}$")


def normalize_station_ref(region: str, station: str) -> tuple[str, str]:
    """Validate and canonicalize a (region, station) pair."""
    region_code = (region or "").strip().upper()
    station_code = (station or "").strip().lower()
    if not _REGION_RE.match(region_code):
        raise InvalidLocationError(f"Invalid region code {region!r}; expected two letters.")
    if not _STATION_RE.match(station_code):
        raise InvalidLocationError(
            f"Invalid station code {station!r}; expected 's' followed by 7 digits."
        )
    return region_code, station_code


class StationBulletinFetcher:
    """Fetches bulletin XML documents for one (region, station) pair."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or get_logger("bulletin.fetcher")
        self._base_url = str(settings.bulletin_base_url).rstrip("/")
        self._client = client or httpx.Client(
            timeout=settings.bulletin_timeout_seconds,
            headers={"User-Agent": settings.http_user_agent},
        )

    def __enter__(self) -> StationBulletinFetcher:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def bulletin_url(self, region: str, station: str) -> str:
        return f"{self._base_url}/{region}/{station}_e.xml"

    def fetch(self, region: str, station: str) -> RawBulletin:
        """Fetch the raw bulletin, mapping transport failures to engine errors."""
        region_code, station_code = normalize_station_ref(region, station)
        url = self.bulletin_url(region_code, station_code)

        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            self.logger.warning("Bulletin fetch timed out for %s/%s", region_code, station_code)
            raise FetchTimeoutError(
                f"Weather service timeout fetching {region_code}/{station_code}; "
                "the bulletin provider may be slow to respond."
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self.logger.warning(
                "Bulletin fetch failed for %s/%s (HTTP %d)", region_code, station_code, status
            )
            if status == 404:
                raise InvalidLocationError(
                    f"Invalid location or station code: {region_code}/{station_code}"
                ) from exc
            raise UpstreamRequestError(
                f"Bulletin fetch failed with status {status} at {url}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            self.logger.warning(
                "Bulletin request failed for %s/%s (%s)",
                region_code, station_code, type(exc).__name__,
            )
            raise UpstreamRequestError(f"Bulletin request failed at {url}: {exc}") from exc

        return RawBulletin(
            region=region_code,
            station=station_code,
            url=url,
            xml_text=response.text,
            fetched_at=datetime.now(UTC),
        )
