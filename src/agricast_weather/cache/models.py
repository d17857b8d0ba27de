"""Typed cache entry persisted by cache backends."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """One cached value with its storage timestamp and time-to-live."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: Any
    stored_at: datetime
    ttl_seconds: int = Field(gt=0)
