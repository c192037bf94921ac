"""Registry of per-kind mirrors.

Lookups and access recording are plain synchronous calls: on a single event
loop they cannot interleave with other coroutines, so a caller's read never
waits. Mutations that span an await (warmup, eviction, stop) serialize
through one ``asyncio.Lock``.

Scaling knob: if warmup contention becomes material, the single lock can be
split into one lock per kind.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from neokube.constants.limits import EVICTION_MIN_ACCESS_COUNT
from neokube.constants.timeouts import CACHE_INITIAL_SYNC_TIMEOUT, CACHE_STALE_AFTER
from neokube.controllers.watch.factory import WatchCacheFactory
from neokube.controllers.watch.watch_cache import WatchCache
from neokube.errors import CacheConstructionError
from neokube.fastcache.access_tracker import AccessTracker
from neokube.models.cache.cache_entry import AccessStats, CacheEntry
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.scheme import Scheme

logger = logging.getLogger(__name__)


class CacheRegistry:
    """Owns every cache entry and every access stat."""

    def __init__(
        self,
        scheme: Scheme,
        factory: WatchCacheFactory,
        stop_event: asyncio.Event,
        *,
        initial_sync_timeout: float = CACHE_INITIAL_SYNC_TIMEOUT,
        stale_after: float = CACHE_STALE_AFTER,
        min_access_count: int = EVICTION_MIN_ACCESS_COUNT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._scheme = scheme
        self._factory = factory
        self._stop_event = stop_event
        self._initial_sync_timeout = initial_sync_timeout
        self._stale_after = stale_after
        self._min_access_count = min_access_count
        self._clock = clock

        self._lock = asyncio.Lock()
        self._entries: dict[ResourceKind, CacheEntry] = {}
        self._tracker = AccessTracker(clock)

        self.constructions = 0
        self.evictions = 0

    # =========================================================================
    # Lookups
    # =========================================================================

    def reader_for(self, kind: ResourceKind) -> WatchCache | None:
        """Reader for ``kind`` if it is warmed, else None."""
        entry = self._entries.get(kind)
        if entry is None or not entry.warmed:
            return None
        return entry.reader

    def is_warmed(self, kind: ResourceKind) -> bool:
        return self.reader_for(kind) is not None

    def entry(self, kind: ResourceKind) -> CacheEntry | None:
        return self._entries.get(kind)

    def warmed_kinds(self) -> list[ResourceKind]:
        return [kind for kind, entry in self._entries.items() if entry.warmed]

    def access_stats(self, kind: ResourceKind) -> AccessStats | None:
        return self._tracker.get(kind)

    def access_snapshot(self) -> dict[ResourceKind, AccessStats]:
        return self._tracker.snapshot()

    def __len__(self) -> int:
        return len(self._entries)

    # =========================================================================
    # Access tracking
    # =========================================================================

    def record_access(self, kind: ResourceKind) -> AccessStats:
        return self._tracker.record(kind, self._clock())

    # =========================================================================
    # Warmup
    # =========================================================================

    async def warmup(self, kind: ResourceKind) -> bool:
        """Build, start and register a mirror for ``kind``.

        Idempotent: returns False without doing anything if the kind is
        already warmed. An initial sync that does not finish within the
        bounded wait is not an error; the mirror keeps syncing in the
        background.

        Raises:
            CacheConstructionError: If no mirror can be built for the kind.
        """
        async with self._lock:
            existing = self._entries.get(kind)
            if existing is not None and existing.warmed:
                return False
            if self._stop_event.is_set():
                logger.debug("Fast cache stopped, not warming up %s", kind)
                return False

            logger.info("Warming up resource %s", kind)
            try:
                blank = self._scheme.new_object(kind)
                mirror = self._factory.build(blank)
                mirror.start(self._stop_event)
            except Exception as exc:
                raise CacheConstructionError(f"failed to create cache for {kind}: {exc}") from exc
            self.constructions += 1

            try:
                synced = await mirror.wait_for_initial_sync(self._initial_sync_timeout)
            except asyncio.CancelledError:
                await mirror.stop()
                raise
            if not synced:
                logger.warning("Cache sync timeout for %s, cache will sync in background", kind)

            self._entries[kind] = CacheEntry(kind=kind, mirror=mirror, warmed=True)
            logger.info("Resource %s warmed up successfully", kind)
            return True

    # =========================================================================
    # Eviction
    # =========================================================================

    async def evict_stale(self, now: float | None = None) -> list[ResourceKind]:
        """Remove kinds that are both stale and rarely used.

        A kind whose lifetime count reached the floor is never evicted, however
        long it stays idle.
        """
        async with self._lock:
            now = self._clock() if now is None else now
            stale = self._tracker.stale_kinds(now, self._stale_after, self._min_access_count)
            removed: list[CacheEntry] = []
            for kind in stale:
                entry = self._entries.pop(kind, None)
                if entry is not None:
                    removed.append(entry)
                self._tracker.forget(kind)

            await asyncio.gather(*(entry.mirror.stop() for entry in removed))
            self.evictions += len(removed)

        if removed:
            logger.info("Cleaned up unused caches: %d", len(removed))
        return stale

    async def stop(self) -> None:
        """Stop every mirror and clear all entries and stats."""
        async with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
            self._tracker.clear()
            await asyncio.gather(*(entry.mirror.stop() for entry in entries))
        logger.debug("Registry cleared (%d mirrors stopped)", len(entries))


__all__ = [
    "CacheRegistry",
]
