"""FastCache - adaptive per-kind read caching for the operator.

Usage:
    fast_cache = FastCache.from_settings(load_settings("cache.yaml"))
    await fast_cache.start()
    client = fast_cache.client()

    cluster = await client.get(Neo4jEnterpriseCluster, "graph", "prod")

    await fast_cache.stop()

Background tasks (one warmup consumer, one eviction ticker, one sync loop per
warmed kind) all watch the same stop event and are joined by ``stop()``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable

from neokube.constants.enums import CacheStrategy
from neokube.constants.limits import EVICTION_MIN_ACCESS_COUNT, WARMUP_QUEUE_SIZE
from neokube.constants.timeouts import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_INITIAL_SYNC_TIMEOUT,
    CACHE_STALE_AFTER,
)
from neokube.controllers.base import ObjectStore
from neokube.controllers.store.kubectl_store import KubectlStore
from neokube.controllers.watch.factory import KubectlWatchCacheFactory, WatchCacheFactory
from neokube.fastcache.client import FastCacheClient
from neokube.fastcache.eviction import EvictionWorker
from neokube.fastcache.registry import CacheRegistry
from neokube.fastcache.scheduler import WarmupScheduler
from neokube.models.cache.cache_entry import CacheStats
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.scheme import NEO4J_CLUSTER_KIND
from neokube.models.state.cache_settings import CacheSettings

logger = logging.getLogger(__name__)


class FastCache:
    """Read cache subsystem started and stopped as a unit.

    The strategy is fixed at construction:
    - none: never mirror, every read goes to the direct store
    - lazy: mirror a kind after its first read
    - selective: pre-warm the essential kinds, the rest on first read
    - on-demand: like lazy, never pre-warms
    """

    def __init__(
        self,
        direct: ObjectStore,
        factory: WatchCacheFactory,
        strategy: CacheStrategy = CacheStrategy.LAZY,
        *,
        essential_kinds: Iterable[ResourceKind] | None = None,
        warmup_queue_size: int = WARMUP_QUEUE_SIZE,
        initial_sync_timeout: float = CACHE_INITIAL_SYNC_TIMEOUT,
        cleanup_interval: float = CACHE_CLEANUP_INTERVAL,
        stale_after: float = CACHE_STALE_AFTER,
        min_access_count: int = EVICTION_MIN_ACCESS_COUNT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._strategy = CacheStrategy(strategy)
        self._direct = direct
        self._essential_kinds = (
            list(essential_kinds) if essential_kinds is not None else [NEO4J_CLUSTER_KIND]
        )
        self._stop_event = asyncio.Event()
        self._started = False

        self.registry = CacheRegistry(
            direct.scheme,
            factory,
            self._stop_event,
            initial_sync_timeout=initial_sync_timeout,
            stale_after=stale_after,
            min_access_count=min_access_count,
            clock=clock,
        )
        self.scheduler = WarmupScheduler(self.registry, maxsize=warmup_queue_size)
        self.eviction = EvictionWorker(self.registry, interval=cleanup_interval)

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        direct: ObjectStore | None = None,
        factory: WatchCacheFactory | None = None,
    ) -> FastCache:
        """Build a fast cache, defaulting to kubectl-backed collaborators."""
        store = direct or KubectlStore(context=settings.kube_context)
        if factory is None:
            kubectl_store = (
                store
                if isinstance(store, KubectlStore)
                else KubectlStore(store.scheme, context=settings.kube_context)
            )
            factory = KubectlWatchCacheFactory(
                kubectl_store, sync_period=settings.sync_period_seconds
            )
        return cls(
            store,
            factory,
            settings.strategy,
            essential_kinds=settings.essential_resource_kinds(),
            warmup_queue_size=settings.warmup_queue_size,
            initial_sync_timeout=settings.initial_sync_timeout_seconds,
            cleanup_interval=settings.cleanup_interval_seconds,
            stale_after=settings.stale_after_seconds,
            min_access_count=settings.min_access_count,
        )

    @property
    def strategy(self) -> CacheStrategy:
        return self._strategy

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Start the background workers, then pre-warm per strategy."""
        if self._stop_event.is_set():
            raise RuntimeError("fast cache has been stopped and cannot be restarted")
        if self._started:
            return
        self._started = True

        logger.info("Starting fast cache (strategy=%s)", self._strategy.value)
        self.scheduler.start(self._stop_event)
        self.eviction.start(self._stop_event)
        self._prewarm_essential_resources()

    def _prewarm_essential_resources(self) -> None:
        if self._strategy is CacheStrategy.NONE:
            logger.info("No-cache strategy - skipping prewarming")
        elif self._strategy is CacheStrategy.LAZY:
            logger.info("Lazy strategy - minimal prewarming")
        elif self._strategy is CacheStrategy.ON_DEMAND:
            logger.info("On-demand strategy - no prewarming")
        elif self._strategy is CacheStrategy.SELECTIVE:
            logger.info("Selective strategy - prewarming %d essential kinds", len(self._essential_kinds))
            for kind in self._essential_kinds:
                self.scheduler.request(kind)

    async def stop(self) -> None:
        """Stop every background task and clear the registry."""
        if self._stop_event.is_set():
            return
        logger.info("Stopping fast cache")
        self._stop_event.set()
        await asyncio.gather(self.scheduler.stop(), self.eviction.stop())
        await self.registry.stop()

    async def __aenter__(self) -> FastCache:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    # =========================================================================
    # Access
    # =========================================================================

    def client(self) -> FastCacheClient:
        """Object store routing reads through the cache."""
        return FastCacheClient(self, self._direct)

    def request_warmup(self, kind: ResourceKind) -> bool:
        """Queue ``kind`` for warmup without blocking."""
        if self._strategy is CacheStrategy.NONE or self._stop_event.is_set():
            return False
        return self.scheduler.request(kind)

    def stats(self) -> CacheStats:
        """Snapshot of registry, queue and counters."""
        return CacheStats(
            strategy=self._strategy.value,
            warmed_kinds=sorted(str(kind) for kind in self.registry.warmed_kinds()),
            access={str(kind): stats for kind, stats in self.registry.access_snapshot().items()},
            queue_depth=self.scheduler.pending,
            dropped_requests=self.scheduler.dropped,
            constructions=self.registry.constructions,
            evictions=self.registry.evictions,
        )


__all__ = [
    "FastCache",
]
