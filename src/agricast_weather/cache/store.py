"""Cache-aside store with per-entry TTL and lazy expiry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..exceptions import CacheUnavailableError
from ..log_setup import get_logger
from .backends import CacheBackend
from .models import CacheEntry

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def is_expired(now: datetime, stored_at: datetime, ttl_seconds: float) -> bool:
    """Return True once strictly more than `ttl_seconds` have elapsed since `stored_at`."""
    return (now - stored_at).total_seconds() > ttl_seconds


class CacheStore:
    """Generic key/value cache over a document backend.

    Backend failures never reach the caller: a failed read is a miss and a
    failed write is dropped, both logged as warnings.
    """

    def __init__(
        self,
        backend: CacheBackend,
        *,
        clock: Clock = utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.backend = backend
        self.clock = clock
        self.logger = logger or get_logger("cache")

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        try:
            document = self.backend.read(key)
        except CacheUnavailableError as exc:
            self.logger.warning("Cache read failed for %s; treating as miss: %s", key, exc)
            return None
        if document is None:
            self.logger.debug("Cache miss for %s", key)
            return None

        try:
            entry = CacheEntry.model_validate(document)
        except ValidationError as exc:
            self.logger.warning("Cache entry for %s is unreadable; treating as miss: %s", key, exc)
            return None

        if is_expired(self.clock(), entry.stored_at, entry.ttl_seconds):
            self.logger.info("Cache expired for %s", key)
            self._delete(key)
            return None

        self.logger.debug("Cache hit for %s", key)
        return entry.value

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store `value` under `key`, replacing any existing entry."""
        entry = CacheEntry(key=key, value=value, stored_at=self.clock(), ttl_seconds=ttl_seconds)
        try:
            self.backend.write(key, entry.model_dump(mode="json"))
        except CacheUnavailableError as exc:
            self.logger.warning("Cache write failed for %s: %s", key, exc)
            return
        self.logger.debug("Cached %s with TTL %ss", key, ttl_seconds)

    def _delete(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except CacheUnavailableError as exc:
            self.logger.warning("Cache delete failed for %s: %s", key, exc)
