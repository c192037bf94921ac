"""Bounded warmup queue with one consuming task."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from neokube.constants.limits import WARMUP_QUEUE_SIZE
from neokube.errors import CacheConstructionError
from neokube.fastcache.registry import CacheRegistry
from neokube.models.resources.kinds import ResourceKind

logger = logging.getLogger(__name__)


class WarmupScheduler:
    """Turns warmup requests into mirror construction, one kind at a time.

    ``request()`` never blocks: when the queue is full the request is dropped
    and counted in ``dropped``. The caller already has its answer from the
    direct store, so nothing is lost but a future cache hit.
    """

    def __init__(self, registry: CacheRegistry, maxsize: int = WARMUP_QUEUE_SIZE) -> None:
        self._registry = registry
        self._queue: asyncio.Queue[ResourceKind] = asyncio.Queue(maxsize=maxsize)
        self._task: asyncio.Task[None] | None = None
        self.dropped = 0
        self.failures = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def request(self, kind: ResourceKind) -> bool:
        """Queue ``kind`` for background warmup."""
        try:
            self._queue.put_nowait(kind)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Warmup queue full, skipping %s (dropped=%d)", kind, self.dropped)
            return False
        logger.debug("Queued resource %s for warmup", kind)
        return True

    def start(self, stop_event: asyncio.Event) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(stop_event), name="fast-cache:warmup")

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            kind = await self._queue.get()
            try:
                await self._registry.warmup(kind)
            except CacheConstructionError as exc:
                self.failures += 1
                logger.error("Failed to warm up resource %s: %s", kind, exc)
            except Exception:
                self.failures += 1
                logger.exception("Unexpected error warming up resource %s", kind)
            finally:
                self._queue.task_done()

    async def wait_idle(self) -> None:
        """Wait until every queued request has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        """Cancel the consuming task and discard queued requests."""
        task = self._task
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()


__all__ = [
    "WarmupScheduler",
]
