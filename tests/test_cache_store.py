"""Cache-aside store and backend tests."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from agricast_weather.cache.backends import (
    CacheBackend,
    InMemoryCacheBackend,
    JsonFileCacheBackend,
)
from agricast_weather.cache.store import CacheStore, is_expired
from agricast_weather.exceptions import CacheUnavailableError

T0 = datetime(2024, 5, 17, 12, 0, tzinfo=UTC)


class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class _BrokenBackend(CacheBackend):
    def read(self, key: str) -> dict[str, Any] | None:
        raise CacheUnavailableError("store offline")

    def write(self, key: str, document: dict[str, Any]) -> None:
        raise CacheUnavailableError("store offline")

    def delete(self, key: str) -> None:
        raise CacheUnavailableError("store offline")


def _store(backend: CacheBackend | None = None) -> tuple[CacheStore, _Clock]:
    clock = _Clock(T0)
    store = CacheStore(
        backend or InMemoryCacheBackend(),
        clock=clock,
        logger=logging.getLogger("test_cache_store"),
    )
    return store, clock


def test_put_then_get_within_ttl() -> None:
    store, clock = _store()
    store.put("bulletin_MB_s0000193", {"temp": 3.2}, ttl_seconds=300)

    clock.advance(120)
    assert store.get("bulletin_MB_s0000193") == {"temp": 3.2}


def test_entry_exactly_at_ttl_is_still_fresh() -> None:
    store, clock = _store()
    store.put("k", [1, 2], ttl_seconds=300)

    clock.advance(300)
    assert store.get("k") == [1, 2]


def test_expired_entry_is_a_miss_and_is_evicted() -> None:
    backend = InMemoryCacheBackend()
    store, clock = _store(backend)
    store.put("k", "v", ttl_seconds=300)

    clock.advance(301)
    assert store.get("k") is None
    assert len(backend) == 0
    assert store.get("k") is None


def test_put_overwrites_and_resets_timestamp() -> None:
    store, clock = _store()
    store.put("k", "old", ttl_seconds=300)
    clock.advance(200)
    store.put("k", "new", ttl_seconds=300)
    clock.advance(200)

    assert store.get("k") == "new"


def test_missing_key_is_a_miss() -> None:
    store, _ = _store()
    assert store.get("absent") is None


def test_backend_failures_fail_open() -> None:
    store, _ = _store(_BrokenBackend())

    store.put("k", "v", ttl_seconds=60)
    assert store.get("k") is None


def test_unreadable_document_is_a_miss() -> None:
    backend = InMemoryCacheBackend()
    backend.write("k", {"value": "no timestamp"})
    store, _ = _store(backend)

    assert store.get("k") is None


def test_mutating_a_returned_value_leaves_the_entry_intact() -> None:
    store, _ = _store()
    value = {"daily": [1.0]}
    store.put("k", value, ttl_seconds=300)
    value["daily"].append(-1.0)

    first = store.get("k")
    first["daily"].append(999.0)

    assert store.get("k") == {"daily": [1.0]}


def test_is_expired_is_strict() -> None:
    assert is_expired(T0 + timedelta(seconds=10), T0, 10) is False
    assert is_expired(T0 + timedelta(seconds=10.5), T0, 10) is True


class TestJsonFileCacheBackend:
    def test_round_trip_through_disk(self, tmp_path: Path) -> None:
        store, clock = _store(JsonFileCacheBackend(tmp_path))
        store.put("satellite_49.9_-97.14_20240501_20240508", {"total": 17.35}, ttl_seconds=86400)

        clock.advance(3600)
        assert store.get("satellite_49.9_-97.14_20240501_20240508") == {"total": 17.35}
        assert len(list(tmp_path.glob("*.json"))) == 1

    def test_missing_file_reads_none(self, tmp_path: Path) -> None:
        assert JsonFileCacheBackend(tmp_path).read("nothing") is None

    def test_corrupt_file_raises_cache_unavailable(self, tmp_path: Path) -> None:
        backend = JsonFileCacheBackend(tmp_path)
        backend.write("k", {"a": 1})
        next(tmp_path.glob("*.json")).write_text("{not json", encoding="utf-8")

        with pytest.raises(CacheUnavailableError):
            backend.read("k")

    def test_write_ignores_leftover_temp_file_and_cleans_up(self, tmp_path: Path) -> None:
        backend = JsonFileCacheBackend(tmp_path)
        (tmp_path / "k.json.tmp").mkdir()

        backend.write("k", {"a": 1})
        backend.write("k", {"a": 2})

        assert backend.read("k") == {"a": 2}
        assert sorted(path.name for path in tmp_path.iterdir()) == ["k.json", "k.json.tmp"]

    def test_unserializable_document_leaves_no_temp_file(self, tmp_path: Path) -> None:
        backend = JsonFileCacheBackend(tmp_path)

        with pytest.raises(CacheUnavailableError):
            backend.write("k", {"a": object()})

        assert list(tmp_path.iterdir()) == []

    def test_delete_is_idempotent(self, tmp_path: Path) -> None:
        backend = JsonFileCacheBackend(tmp_path)
        backend.write("k", {"a": 1})
        backend.delete("k")
        backend.delete("k")

        assert backend.read("k") is None
