"""Cache-aside storage with source-specific freshness."""

from .backends import CacheBackend, InMemoryCacheBackend, JsonFileCacheBackend
from .models import CacheEntry
from .store import CacheStore, is_expired, utc_now

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "CacheStore",
    "InMemoryCacheBackend",
    "JsonFileCacheBackend",
    "is_expired",
    "utc_now",
]
