"""Adaptive per-kind read cache in front of the object store."""

from neokube.fastcache.access_tracker import AccessTracker
from neokube.fastcache.client import FastCacheClient
from neokube.fastcache.eviction import EvictionWorker
from neokube.fastcache.fast_cache import FastCache
from neokube.fastcache.registry import CacheRegistry
from neokube.fastcache.scheduler import WarmupScheduler

__all__ = [
    "AccessTracker",
    "CacheRegistry",
    "EvictionWorker",
    "FastCache",
    "FastCacheClient",
    "WarmupScheduler",
]
