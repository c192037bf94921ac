"""Mirror fed by the API server list and watch endpoints."""

from __future__ import annotations

import asyncio
import codecs
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from neokube.constants.enums import WatchEventType
from neokube.constants.timeouts import CACHE_SYNC_PERIOD, WATCH_RETRY_BACKOFF
from neokube.controllers.store.kubectl_store import KubectlStore
from neokube.controllers.watch.watch_cache import WatchCache
from neokube.errors import StoreError
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import KubeObject

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 64 * 1024
_STDERR_TAIL_BYTES = 8 * 1024


def decode_watch_stream(
    buffer: str, decoder: json.JSONDecoder | None = None
) -> tuple[list[dict[str, Any]], str]:
    """Split a buffer of concatenated JSON documents.

    Returns:
        Complete documents and the unconsumed (partial) remainder.
    """
    decoder = decoder or json.JSONDecoder()
    documents: list[dict[str, Any]] = []
    while True:
        buffer = buffer.lstrip()
        if not buffer:
            return documents, ""
        try:
            document, end = decoder.raw_decode(buffer)
        except json.JSONDecodeError:
            return documents, buffer
        documents.append(document)
        buffer = buffer[end:]


def parse_watch_event(document: dict[str, Any]) -> tuple[WatchEventType, dict[str, Any]]:
    """Parse one watch event document (``{"type": ..., "object": ...}``)."""
    try:
        event_type = WatchEventType(document.get("type", ""))
    except ValueError as exc:
        raise StoreError(f"unexpected watch event: {document.get('type')!r}") from exc
    return event_type, document.get("object") or {}


async def _drain(stream: asyncio.StreamReader, limit: int) -> bytes:
    """Read ``stream`` to EOF, keeping only the last ``limit`` bytes."""
    tail = b""
    while True:
        chunk = await stream.read(_READ_CHUNK_SIZE)
        if not chunk:
            return tail
        tail = (tail + chunk)[-limit:]


class KubectlWatchCache(WatchCache):
    """Mirror listing and watching the API server through ``kubectl get --raw``.

    The watch resumes from the resource version returned by the list, so the
    server replays every change made after the list was taken.
    """

    def __init__(
        self,
        store: KubectlStore,
        kind: ResourceKind,
        object_type: type[KubeObject] = KubeObject,
        *,
        sync_period: float = CACHE_SYNC_PERIOD,
        retry_backoff: float = WATCH_RETRY_BACKOFF,
    ) -> None:
        super().__init__(
            kind,
            object_type,
            sync_period=sync_period,
            retry_backoff=retry_backoff,
        )
        self._store = store

    async def _list_objects(self) -> tuple[list[dict[str, Any]], str]:
        data = await self._store.get_raw(self._store.scheme.api_path(self.kind))
        items: list[dict[str, Any]] = []
        for item in data.get("items") or []:
            # List items carry no apiVersion/kind of their own
            item.setdefault("apiVersion", self.kind.api_version)
            item.setdefault("kind", self.kind.kind)
            items.append(item)
        resource_version = (data.get("metadata") or {}).get("resourceVersion") or ""
        return items, resource_version

    def _build_watch_args(self, resource_version: str) -> tuple[str, ...]:
        query = "watch=1&allowWatchBookmarks=true"
        if resource_version:
            query += f"&resourceVersion={resource_version}"
        return ("get", "--raw", f"{self._store.scheme.api_path(self.kind)}?{query}")

    async def _watch_events(
        self, resource_version: str
    ) -> AsyncIterator[tuple[WatchEventType, dict[str, Any]]]:
        process = await asyncio.create_subprocess_exec(
            *self._store.build_command(self._build_watch_args(resource_version)),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stderr_task: asyncio.Task[bytes] | None = None
        try:
            if process.stdout is None or process.stderr is None:
                raise StoreError("kubectl watch started without output pipes")
            stderr_task = asyncio.create_task(_drain(process.stderr, _STDERR_TAIL_BYTES))

            text_decoder = codecs.getincrementaldecoder("utf-8")()
            json_decoder = json.JSONDecoder()
            buffer = ""
            while True:
                chunk = await process.stdout.read(_READ_CHUNK_SIZE)
                if not chunk:
                    break
                documents, buffer = decode_watch_stream(
                    buffer + text_decoder.decode(chunk), json_decoder
                )
                for document in documents:
                    yield parse_watch_event(document)

            returncode = await process.wait()
            stderr = await stderr_task
            if returncode != 0:
                raise StoreError(
                    stderr.decode("utf-8", errors="replace").strip()
                    or f"kubectl watch exited with {returncode}"
                )
            logger.debug("Watch stream for %s ended, relisting", self.kind)
        finally:
            if process.returncode is None:
                process.kill()
                await process.wait()
            if stderr_task is not None and not stderr_task.done():
                stderr_task.cancel()


__all__ = [
    "KubectlWatchCache",
    "decode_watch_stream",
    "parse_watch_event",
]
