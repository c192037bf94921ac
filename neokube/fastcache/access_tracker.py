"""Per-kind access counting for eviction decisions."""

from __future__ import annotations

import time
from collections.abc import Callable

from neokube.models.cache.cache_entry import AccessStats
from neokube.models.resources.kinds import ResourceKind


class AccessTracker:
    """Lifetime access count and last access time per kind.

    Stats are created lazily on first access. Counters never decay.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._stats: dict[ResourceKind, AccessStats] = {}

    def record(self, kind: ResourceKind, now: float | None = None) -> AccessStats:
        stats = self._stats.get(kind)
        if stats is None:
            stats = self._stats[kind] = AccessStats()
        stats.count += 1
        stats.last_accessed = self._clock() if now is None else now
        return stats

    def get(self, kind: ResourceKind) -> AccessStats | None:
        return self._stats.get(kind)

    def stale_kinds(self, now: float, stale_after: float, min_count: int) -> list[ResourceKind]:
        """Kinds idle longer than ``stale_after`` AND accessed fewer than ``min_count`` times."""
        cutoff = now - stale_after
        return [
            kind
            for kind, stats in self._stats.items()
            if stats.last_accessed < cutoff and stats.count < min_count
        ]

    def forget(self, kind: ResourceKind) -> None:
        self._stats.pop(kind, None)

    def clear(self) -> None:
        self._stats.clear()

    def snapshot(self) -> dict[ResourceKind, AccessStats]:
        return {
            kind: AccessStats(stats.count, stats.last_accessed)
            for kind, stats in self._stats.items()
        }

    def __contains__(self, kind: object) -> bool:
        return kind in self._stats

    def __len__(self) -> int:
        return len(self._stats)
