"""Fast cache registry records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from neokube.controllers.watch.watch_cache import WatchCache
    from neokube.models.resources.kinds import ResourceKind


@dataclass
class CacheEntry:
    """Mirror and reader registered for one warmed kind.

    The reader is usable if and only if ``warmed`` is set.
    """

    kind: ResourceKind
    mirror: WatchCache
    warmed: bool = True

    @property
    def reader(self) -> WatchCache:
        return self.mirror

    @property
    def active(self) -> bool:
        """True while the mirror's sync loop is still running."""
        return self.mirror.active


@dataclass
class AccessStats:
    """Lifetime access count and last access time (monotonic seconds)."""

    count: int = 0
    last_accessed: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "last_accessed": self.last_accessed}


@dataclass
class CacheStats:
    """Point-in-time snapshot of fast cache state."""

    strategy: str
    warmed_kinds: list[str] = field(default_factory=list)
    access: dict[str, AccessStats] = field(default_factory=dict)
    queue_depth: int = 0
    dropped_requests: int = 0
    constructions: int = 0
    evictions: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "warmed_kinds": list(self.warmed_kinds),
            "access": {kind: stats.to_dict() for kind, stats in self.access.items()},
            "queue_depth": self.queue_depth,
            "dropped_requests": self.dropped_requests,
            "constructions": self.constructions,
            "evictions": self.evictions,
        }
