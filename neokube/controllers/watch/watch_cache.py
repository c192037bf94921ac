"""Watch-based mirror of all objects of one kind.

A mirror lists every object of its kind, then watches from the resource
version of that list, so no change between the two is missed. Watch events
are applied until the resync period elapses, then the mirror lists again. The
loop runs as its own task from ``start()`` until the shared stop event is set
or ``stop()`` is called.
Failures inside the loop are logged and retried after a backoff; they never
escape the task.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from abc import abstractmethod
from collections.abc import AsyncIterator
from contextlib import suppress
from typing import Any, TypeVar

from neokube.constants.enums import WatchEventType
from neokube.constants.timeouts import CACHE_SYNC_PERIOD, WATCH_RETRY_BACKOFF
from neokube.controllers.base import ObjectReader
from neokube.errors import NotFoundError, StoreError
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import KubeObject
from neokube.utils.selectors import matches_labels, parse_label_selector

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=KubeObject)

_ObjectKey = tuple[str, str]


def _object_key(data: dict[str, Any]) -> _ObjectKey:
    metadata = data.get("metadata") or {}
    return (metadata.get("namespace") or "", metadata.get("name", ""))


class WatchCache(ObjectReader):
    """Local, asynchronously synchronized read-only copy of one kind."""

    def __init__(
        self,
        kind: ResourceKind,
        object_type: type[KubeObject] = KubeObject,
        *,
        sync_period: float = CACHE_SYNC_PERIOD,
        retry_backoff: float = WATCH_RETRY_BACKOFF,
    ) -> None:
        self.kind = kind
        self.object_type = object_type
        self._sync_period = sync_period
        self._retry_backoff = retry_backoff

        self._objects: dict[_ObjectKey, dict[str, Any]] = {}
        self._resource_version = ""
        self._synced = asyncio.Event()
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    # =========================================================================
    # Source hooks
    # =========================================================================

    @abstractmethod
    async def _list_objects(self) -> tuple[list[dict[str, Any]], str]:
        """List every object of this kind.

        Returns:
            The objects and the resource version the list was taken at.
        """
        ...

    @abstractmethod
    def _watch_events(
        self, resource_version: str
    ) -> AsyncIterator[tuple[WatchEventType, dict[str, Any]]]:
        """Stream change events for this kind made after ``resource_version``."""
        ...

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def active(self) -> bool:
        """True while the sync loop task is running."""
        return self._task is not None and not self._task.done()

    @property
    def synced(self) -> bool:
        return self._synced.is_set()

    @property
    def resource_version(self) -> str:
        """Resource version of the last list or applied event."""
        return self._resource_version

    def start(self, stop_event: asyncio.Event) -> None:
        """Schedule the sync loop and return immediately."""
        if self._task is not None:
            return
        self._stop_event = stop_event
        self._task = asyncio.create_task(self._run(), name=f"watch-cache:{self.kind}")

    async def wait_for_initial_sync(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for the first full list."""
        try:
            await asyncio.wait_for(self._synced.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    async def stop(self) -> None:
        """Cancel the sync loop and wait for it to finish."""
        task = self._task
        if task is None:
            return
        if not task.done():
            task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        stop_event = self._stop_event or asyncio.Event()
        while not stop_event.is_set():
            try:
                items, resource_version = await self._list_objects()
                self._replace(items, resource_version)
                if not self._synced.is_set():
                    logger.debug("Initial sync complete for %s (%d objects)", self.kind, len(items))
                self._synced.set()
                await self._watch_until_resync(stop_event)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Sync loop failed for %s, retrying", self.kind)
                with suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(stop_event.wait(), timeout=self._retry_backoff)
        logger.debug("Sync loop stopped for %s", self.kind)

    async def _watch_until_resync(self, stop_event: asyncio.Event) -> None:
        """Apply watch events until resync is due, the stream ends or stop is set."""
        watch_task = asyncio.create_task(self._consume_events())
        stop_task = asyncio.create_task(stop_event.wait())
        try:
            done, _ = await asyncio.wait(
                {watch_task, stop_task},
                timeout=self._sync_period,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (watch_task, stop_task):
                if not task.done():
                    task.cancel()
            await asyncio.gather(watch_task, stop_task, return_exceptions=True)
        if watch_task in done:
            # Re-raise stream errors; a clean end of stream just triggers a relist
            watch_task.result()

    async def _consume_events(self) -> None:
        async for event_type, data in self._watch_events(self._resource_version):
            self._apply(event_type, data)

    # =========================================================================
    # Store mutation
    # =========================================================================

    def _replace(self, items: list[dict[str, Any]], resource_version: str) -> None:
        self._objects = {_object_key(item): copy.deepcopy(item) for item in items}
        self._resource_version = resource_version

    def _apply(self, event_type: WatchEventType, data: dict[str, Any]) -> None:
        if event_type is WatchEventType.ERROR:
            raise StoreError(f"watch error for {self.kind}: {data.get('message', data)}")
        resource_version = (data.get("metadata") or {}).get("resourceVersion")
        if resource_version:
            self._resource_version = resource_version
        if event_type is WatchEventType.BOOKMARK:
            return
        key = _object_key(data)
        if event_type is WatchEventType.DELETED:
            self._objects.pop(key, None)
            return
        self._objects[key] = copy.deepcopy(data)

    def __len__(self) -> int:
        return len(self._objects)

    # =========================================================================
    # Reads
    # =========================================================================

    def _check_kind(self, kind: ResourceKind | None) -> None:
        if kind is not None and kind != self.kind:
            raise StoreError(f"mirror for {self.kind} cannot serve {kind}")

    async def get(
        self,
        obj_type: type[T],
        name: str,
        namespace: str | None = None,
        *,
        kind: ResourceKind | None = None,
    ) -> T:
        self._check_kind(kind)
        data = self._objects.get((namespace or "", name))
        if data is None:
            raise NotFoundError(f"{self.kind.kind} {namespace or ''}/{name} not found in cache")
        return obj_type.from_dict(data)

    async def list(
        self,
        obj_type: type[T],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> list[T]:
        self._check_kind(kind)
        requirements = parse_label_selector(label_selector)
        return [
            obj_type.from_dict(data)
            for key, data in sorted(self._objects.items(), key=lambda item: item[0])
            if (not namespace or key[0] == namespace)
            and matches_labels(requirements, (data.get("metadata") or {}).get("labels") or {})
        ]


__all__ = [
    "WatchCache",
]
