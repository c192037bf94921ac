"""Shared fixtures: in-memory direct store and watch-cache factory fakes."""

from __future__ import annotations

import asyncio
import copy
from collections.abc import AsyncIterator
from typing import Any

import pytest

from neokube.constants.enums import CacheStrategy, WatchEventType
from neokube.controllers.base import ObjectStore, SubResourceWriter
from neokube.controllers.watch import WatchCache, WatchCacheFactory
from neokube.errors import AlreadyExistsError, NotFoundError
from neokube.fastcache import FastCache
from neokube.models.resources import KubeObject, ResourceKind, Scheme, default_scheme
from neokube.utils.selectors import matches_labels


def make_manifest(
    kind: ResourceKind,
    name: str,
    namespace: str | None = "default",
    labels: dict[str, str] | None = None,
    spec: dict[str, Any] | None = None,
) -> dict[str, Any]:
    metadata: dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if labels:
        metadata["labels"] = labels
    return {
        "apiVersion": kind.api_version,
        "kind": kind.kind,
        "metadata": metadata,
        "spec": spec or {},
    }


class InMemoryStatusWriter(SubResourceWriter):
    def __init__(self, store: InMemoryStore, name: str) -> None:
        self._store = store
        self.name = name

    async def update(self, obj):
        self._store.calls.append((f"{self.name}.update", obj.name))
        return obj

    async def patch(self, obj, patch, patch_type="merge"):
        self._store.calls.append((f"{self.name}.patch", obj.name))
        return obj


class InMemoryStore(ObjectStore):
    """Authoritative store fake recording every call."""

    def __init__(self, scheme: Scheme) -> None:
        self._scheme = scheme
        self.objects: dict[ResourceKind, dict[tuple[str, str], dict[str, Any]]] = {}
        self.calls: list[tuple[str, ...]] = []
        self.revision = 0
        self.changes: list[tuple[int, ResourceKind, WatchEventType, dict[str, Any]]] = []

    @property
    def scheme(self) -> Scheme:
        return self._scheme

    def _record(
        self, kind: ResourceKind, event_type: WatchEventType, data: dict[str, Any]
    ) -> None:
        self.revision += 1
        data["metadata"]["resourceVersion"] = str(self.revision)
        self.changes.append((self.revision, kind, event_type, copy.deepcopy(data)))

    def add(self, manifest: dict[str, Any]) -> None:
        """Create or replace an object, recording the change."""
        kind = ResourceKind.from_api_version(manifest["apiVersion"], manifest["kind"])
        data = copy.deepcopy(manifest)
        key = (data["metadata"].get("namespace") or "", data["metadata"]["name"])
        bucket = self.objects.setdefault(kind, {})
        event_type = WatchEventType.MODIFIED if key in bucket else WatchEventType.ADDED
        self._record(kind, event_type, data)
        bucket[key] = data

    def remove(self, kind: ResourceKind, name: str, namespace: str | None = "default") -> None:
        data = self.objects.get(kind, {}).pop((namespace or "", name))
        self._record(kind, WatchEventType.DELETED, data)

    def changes_since(
        self, kind: ResourceKind, resource_version: str
    ) -> list[tuple[WatchEventType, dict[str, Any]]]:
        since = int(resource_version or 0)
        return [
            (event_type, copy.deepcopy(data))
            for revision, changed_kind, event_type, data in self.changes
            if changed_kind == kind and revision > since
        ]

    def items(self, kind: ResourceKind) -> list[dict[str, Any]]:
        return [copy.deepcopy(item) for item in self.objects.get(kind, {}).values()]

    def read_calls(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] in ("get", "list")]

    async def get(self, obj_type, name, namespace=None, *, kind=None):
        resolved = self._scheme.kind_for(obj_type, kind)
        self.calls.append(("get", str(resolved), name))
        data = self.objects.get(resolved, {}).get((namespace or "", name))
        if data is None:
            raise NotFoundError(f"{resolved.kind} {name} not found")
        return obj_type.from_dict(data)

    async def list(self, obj_type, *, namespace=None, label_selector=None, kind=None):
        resolved = self._scheme.kind_for(obj_type, kind)
        self.calls.append(("list", str(resolved)))
        return [
            obj_type.from_dict(data)
            for key, data in self.objects.get(resolved, {}).items()
            if (not namespace or key[0] == namespace)
            and matches_labels(label_selector, data["metadata"].get("labels") or {})
        ]

    async def create(self, obj):
        self.calls.append(("create", obj.name))
        kind = self._scheme.kind_for(obj)
        key = (obj.namespace or "", obj.name)
        if key in self.objects.get(kind, {}):
            raise AlreadyExistsError(obj.name)
        obj.set_resource_kind(kind)
        self.add(obj.to_dict())
        return obj

    async def update(self, obj):
        self.calls.append(("update", obj.name))
        return obj

    async def delete(self, obj):
        self.calls.append(("delete", obj.name))

    async def patch(self, obj, patch, patch_type="merge"):
        self.calls.append(("patch", obj.name))
        return obj

    async def delete_all_of(self, obj_type, *, namespace=None, label_selector=None, kind=None):
        self.calls.append(("delete_all_of", str(self._scheme.kind_for(obj_type, kind))))

    def sub_resource(self, name: str) -> SubResourceWriter:
        return InMemoryStatusWriter(self, name)


class FakeWatchCache(WatchCache):
    """Mirror fed from an InMemoryStore snapshot, its change log, and queued events."""

    def __init__(self, store: InMemoryStore, kind: ResourceKind, object_type, **kwargs) -> None:
        self.list_gate: asyncio.Event | None = kwargs.pop("list_gate", None)
        self.watch_gate: asyncio.Event | None = kwargs.pop("watch_gate", None)
        self.fail_lists = kwargs.pop("fail_lists", 0)
        super().__init__(kind, object_type, **kwargs)
        self._source = store
        self.events: asyncio.Queue[tuple[WatchEventType, dict[str, Any]]] = asyncio.Queue()
        self.list_count = 0
        self.watched_from: list[str] = []

    async def _list_objects(self) -> tuple[list[dict[str, Any]], str]:
        if self.list_gate is not None:
            await self.list_gate.wait()
        self.list_count += 1
        if self.fail_lists > 0:
            self.fail_lists -= 1
            raise RuntimeError("list failed")
        return self._source.items(self.kind), str(self._source.revision)

    async def _watch_events(
        self, resource_version: str
    ) -> AsyncIterator[tuple[WatchEventType, dict[str, Any]]]:
        self.watched_from.append(resource_version)
        if self.watch_gate is not None:
            await self.watch_gate.wait()
        for event in self._source.changes_since(self.kind, resource_version):
            yield event
        while True:
            yield await self.events.get()


class FakeWatchCacheFactory(WatchCacheFactory):
    """Counts builds; optionally holds every initial list until released."""

    def __init__(self, store: InMemoryStore, hold_sync: bool = False) -> None:
        self._store = store
        self.built: list[FakeWatchCache] = []
        self.list_gate = asyncio.Event()
        if not hold_sync:
            self.list_gate.set()

    @property
    def build_count(self) -> int:
        return len(self.built)

    def kinds_built(self) -> list[ResourceKind]:
        return [mirror.kind for mirror in self.built]

    def build(self, blank: KubeObject) -> WatchCache:
        kind = self._store.scheme.kind_for(blank)
        info = self._store.scheme.info_for(kind)
        mirror = FakeWatchCache(
            self._store,
            kind,
            info.object_type,
            list_gate=self.list_gate,
            retry_backoff=0.01,
        )
        self.built.append(mirror)
        return mirror


@pytest.fixture
def scheme() -> Scheme:
    return default_scheme()


@pytest.fixture
def store(scheme: Scheme) -> InMemoryStore:
    return InMemoryStore(scheme)


@pytest.fixture
def factory(store: InMemoryStore) -> FakeWatchCacheFactory:
    return FakeWatchCacheFactory(store)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_fast_cache(store: InMemoryStore, factory: FakeWatchCacheFactory, clock: FakeClock):
    """Build a FastCache over the fakes with short timeouts."""

    def _make(strategy: CacheStrategy = CacheStrategy.LAZY, **kwargs: Any) -> FastCache:
        kwargs.setdefault("initial_sync_timeout", 1.0)
        kwargs.setdefault("cleanup_interval", 3600.0)
        kwargs.setdefault("clock", clock)
        return FastCache(store, kwargs.pop("factory", factory), strategy, **kwargs)

    return _make
