"""Station references and built-in warming priority lists."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel


class StationRef(BaseModel):
    region: str
    station: str
    name: str | None = None

    @property
    def key(self) -> str:
        return f"{self.region.upper()}/{self.station.lower()}"


CENTRAL_PRIORITY_STATIONS: tuple[StationRef, ...] = (
    StationRef(region="MB", station="s0000193", name="Winnipeg"),
    StationRef(region="MB", station="s0000492", name="Brandon"),
    StationRef(region="MB", station="s0000626", name="Portage la Prairie"),
    StationRef(region="SK", station="s0000788", name="Regina"),
    StationRef(region="SK", station="s0000797", name="Saskatoon"),
)

MOUNTAIN_PRIORITY_STATIONS: tuple[StationRef, ...] = (
    StationRef(region="AB", station="s0000047", name="Calgary"),
    StationRef(region="AB", station="s0000045", name="Edmonton"),
    StationRef(region="AB", station="s0000030", name="Lethbridge"),
)

WARMING_ZONES: dict[str, tuple[tuple[StationRef, ...], frozenset[str] | None]] = {
    "central": (CENTRAL_PRIORITY_STATIONS, frozenset({"MB", "SK"})),
    "mountain": (MOUNTAIN_PRIORITY_STATIONS, frozenset({"AB"})),
}


def merge_station_lists(
    priority: Iterable[StationRef],
    popular: Iterable[StationRef] = (),
    region_filter: frozenset[str] | None = None,
) -> list[StationRef]:
    """Priority stations first, then popular ones not already listed."""
    merged: dict[str, StationRef] = {}
    for station in priority:
        merged.setdefault(station.key, station)
    for station in popular:
        if region_filter is not None and station.region.upper() not in region_filter:
            continue
        merged.setdefault(station.key, station)
    return list(merged.values())
