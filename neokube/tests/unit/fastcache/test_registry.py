"""Tests for CacheRegistry - warmup, eviction and stop."""

from __future__ import annotations

import asyncio

import pytest
from conftest import FakeWatchCacheFactory, make_manifest

from neokube.controllers.watch import WatchCacheFactory
from neokube.errors import CacheConstructionError
from neokube.fastcache import CacheRegistry
from neokube.models.resources import NEO4J_CLUSTER_KIND, ResourceKind

BACKUP_KIND = ResourceKind("neo4j.neo4j.com", "v1alpha1", "Neo4jBackup")
UNKNOWN_KIND = ResourceKind("example.com", "v1", "Widget")


@pytest.fixture
def stop_event() -> asyncio.Event:
    return asyncio.Event()


@pytest.fixture
def registry(scheme, factory, stop_event, clock) -> CacheRegistry:
    return CacheRegistry(
        scheme,
        factory,
        stop_event,
        initial_sync_timeout=1.0,
        stale_after=300.0,
        min_access_count=10,
        clock=clock,
    )


class TestWarmup:
    """Mirror construction."""

    @pytest.mark.asyncio
    async def test_warmup_registers_synced_mirror(self, registry, store, factory, stop_event) -> None:
        store.add(make_manifest(NEO4J_CLUSTER_KIND, "graph", "prod"))

        assert await registry.warmup(NEO4J_CLUSTER_KIND) is True

        entry = registry.entry(NEO4J_CLUSTER_KIND)
        assert entry is not None
        assert entry.warmed is True
        assert entry.active is True
        assert entry.mirror.synced is True
        assert registry.reader_for(NEO4J_CLUSTER_KIND) is factory.built[0]
        assert registry.constructions == 1
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_warmup_is_idempotent(self, registry, factory, stop_event) -> None:
        assert await registry.warmup(NEO4J_CLUSTER_KIND) is True
        assert await registry.warmup(NEO4J_CLUSTER_KIND) is False

        assert factory.build_count == 1
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_concurrent_warmups_collapse(self, registry, factory, stop_event) -> None:
        results = await asyncio.gather(*(registry.warmup(BACKUP_KIND) for _ in range(5)))

        assert sorted(results) == [False, False, False, False, True]
        assert factory.build_count == 1
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_unknown_kind_raises_construction_error(self, registry, factory) -> None:
        with pytest.raises(CacheConstructionError):
            await registry.warmup(UNKNOWN_KIND)

        assert factory.build_count == 0
        assert registry.entry(UNKNOWN_KIND) is None

    @pytest.mark.asyncio
    async def test_failed_kind_is_retried_on_next_warmup(self, registry) -> None:
        """Construction failures are not remembered."""
        for _ in range(3):
            with pytest.raises(CacheConstructionError):
                await registry.warmup(UNKNOWN_KIND)

        assert not registry.is_warmed(UNKNOWN_KIND)

    @pytest.mark.asyncio
    async def test_factory_failure_wrapped(self, scheme, stop_event, clock) -> None:
        class BrokenFactory(WatchCacheFactory):
            def build(self, blank):
                raise RuntimeError("no API server")

        registry = CacheRegistry(scheme, BrokenFactory(), stop_event, clock=clock)

        with pytest.raises(CacheConstructionError, match="no API server"):
            await registry.warmup(NEO4J_CLUSTER_KIND)

    @pytest.mark.asyncio
    async def test_sync_timeout_still_warms(self, scheme, store, stop_event, clock) -> None:
        """An initial sync slower than the bounded wait is not an error."""
        held = FakeWatchCacheFactory(store, hold_sync=True)
        registry = CacheRegistry(scheme, held, stop_event, initial_sync_timeout=0.01, clock=clock)
        store.add(make_manifest(NEO4J_CLUSTER_KIND, "graph", "prod"))

        assert await registry.warmup(NEO4J_CLUSTER_KIND) is True

        mirror = registry.reader_for(NEO4J_CLUSTER_KIND)
        assert mirror is not None
        assert mirror.synced is False
        assert mirror.active is True

        held.list_gate.set()
        assert await mirror.wait_for_initial_sync(1.0) is True
        assert len(mirror) == 1
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_warmup_after_stop_is_skipped(self, registry, factory, stop_event) -> None:
        stop_event.set()

        assert await registry.warmup(NEO4J_CLUSTER_KIND) is False
        assert factory.build_count == 0


class TestEviction:
    """Eviction requires stale AND below the frequency floor."""

    @pytest.mark.asyncio
    async def test_stale_and_rare_is_evicted(self, registry, factory, clock, stop_event) -> None:
        await registry.warmup(BACKUP_KIND)
        for _ in range(9):
            registry.record_access(BACKUP_KIND)
        clock.advance(301)

        evicted = await registry.evict_stale()

        assert evicted == [BACKUP_KIND]
        assert registry.entry(BACKUP_KIND) is None
        assert registry.access_stats(BACKUP_KIND) is None
        assert factory.built[0].active is False
        assert registry.evictions == 1
        stop_event.set()

    @pytest.mark.asyncio
    async def test_frequent_kind_survives_idle_period(self, registry, clock, stop_event) -> None:
        """A kind whose count met the floor is kept however long it idles."""
        await registry.warmup(BACKUP_KIND)
        for _ in range(10):
            registry.record_access(BACKUP_KIND)
        clock.advance(3600 * 24)

        assert await registry.evict_stale() == []
        assert registry.is_warmed(BACKUP_KIND)
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_recent_rare_kind_survives(self, registry, clock, stop_event) -> None:
        await registry.warmup(BACKUP_KIND)
        registry.record_access(BACKUP_KIND)
        clock.advance(299)

        assert await registry.evict_stale() == []
        assert registry.is_warmed(BACKUP_KIND)
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_exact_window_boundary_is_not_stale(self, registry, clock) -> None:
        registry.record_access(BACKUP_KIND)
        clock.advance(300)

        assert await registry.evict_stale() == []

    @pytest.mark.asyncio
    async def test_stats_only_kind_is_forgotten(self, registry, clock) -> None:
        """Stats recorded by direct reads are dropped even without a mirror."""
        registry.record_access(BACKUP_KIND)
        clock.advance(301)

        assert await registry.evict_stale() == [BACKUP_KIND]
        assert registry.access_stats(BACKUP_KIND) is None
        assert registry.evictions == 0

    @pytest.mark.asyncio
    async def test_prewarmed_kind_without_access_is_kept(self, registry, clock, stop_event) -> None:
        """Eviction only considers kinds with access stats."""
        await registry.warmup(NEO4J_CLUSTER_KIND)
        clock.advance(3600)

        assert await registry.evict_stale() == []
        assert registry.is_warmed(NEO4J_CLUSTER_KIND)
        stop_event.set()
        await registry.stop()

    @pytest.mark.asyncio
    async def test_evicted_kind_can_warm_again(self, registry, factory, clock, stop_event) -> None:
        await registry.warmup(BACKUP_KIND)
        registry.record_access(BACKUP_KIND)
        clock.advance(301)
        await registry.evict_stale()

        assert await registry.warmup(BACKUP_KIND) is True
        assert factory.build_count == 2
        stop_event.set()
        await registry.stop()


class TestStop:
    """Registry stop."""

    @pytest.mark.asyncio
    async def test_stop_clears_everything(self, registry, factory, stop_event) -> None:
        await registry.warmup(NEO4J_CLUSTER_KIND)
        await registry.warmup(BACKUP_KIND)
        registry.record_access(BACKUP_KIND)
        stop_event.set()

        await registry.stop()

        assert len(registry) == 0
        assert registry.warmed_kinds() == []
        assert registry.access_snapshot() == {}
        assert all(not mirror.active for mirror in factory.built)
