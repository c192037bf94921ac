"""Periodic removal of cold mirrors."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

from neokube.constants.timeouts import CACHE_CLEANUP_INTERVAL
from neokube.fastcache.registry import CacheRegistry

logger = logging.getLogger(__name__)


class EvictionWorker:
    """Runs ``CacheRegistry.evict_stale`` every ``interval`` seconds."""

    def __init__(self, registry: CacheRegistry, interval: float = CACHE_CLEANUP_INTERVAL) -> None:
        self._registry = registry
        self._interval = interval
        self._task: asyncio.Task[None] | None = None
        self.sweeps = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, stop_event: asyncio.Event) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(stop_event), name="fast-cache:eviction")

    async def _run(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
                return
            except asyncio.TimeoutError:
                pass
            try:
                await self._registry.evict_stale()
            except Exception:
                logger.exception("Cache cleanup sweep failed")
            self.sweeps += 1

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


__all__ = [
    "EvictionWorker",
]
