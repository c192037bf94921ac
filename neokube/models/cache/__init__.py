"""Fast cache data models."""

from neokube.models.cache.cache_entry import AccessStats, CacheEntry, CacheStats

__all__ = [
    "AccessStats",
    "CacheEntry",
    "CacheStats",
]
