"""Cache-aware object store handed to reconciliation code.

Reads may be served from a warmed mirror; writes always go to the direct
store. Mirror failures are never surfaced: the read is retried directly.
Direct store errors propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from neokube.constants.enums import CacheStrategy, PatchType
from neokube.controllers.base import ObjectReader, ObjectStore, SubResourceWriter
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import KubeObject
from neokube.models.resources.scheme import Scheme

if TYPE_CHECKING:
    from neokube.fastcache.fast_cache import FastCache

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=KubeObject)
R = TypeVar("R")


class FastCacheClient(ObjectStore):
    """Object store that arbitrates between mirrors and the direct store."""

    def __init__(self, fast_cache: FastCache, direct: ObjectStore) -> None:
        self._fast_cache = fast_cache
        self._direct = direct

    @property
    def scheme(self) -> Scheme:
        return self._direct.scheme

    # =========================================================================
    # Reads
    # =========================================================================

    async def _read(
        self,
        kind: ResourceKind,
        operation: str,
        read: Callable[[ObjectReader], Awaitable[R]],
    ) -> R:
        fast_cache = self._fast_cache
        fast_cache.registry.record_access(kind)

        if fast_cache.strategy is CacheStrategy.NONE:
            return await read(self._direct)

        reader = fast_cache.registry.reader_for(kind)
        if reader is not None:
            try:
                result = await read(reader)
            except Exception as exc:
                logger.debug("Cache %s miss for %s, using direct client: %s", operation, kind, exc)
            else:
                logger.debug("Cache %s hit for %s", operation, kind)
                return result
        else:
            fast_cache.request_warmup(kind)

        return await read(self._direct)

    async def get(
        self,
        obj_type: type[T],
        name: str,
        namespace: str | None = None,
        *,
        kind: ResourceKind | None = None,
    ) -> T:
        resolved = self._direct.kind_for(obj_type, kind)
        return await self._read(
            resolved,
            "get",
            lambda reader: reader.get(obj_type, name, namespace, kind=resolved),
        )

    async def list(
        self,
        obj_type: type[T],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> list[T]:
        resolved = self._direct.kind_for(obj_type, kind)
        return await self._read(
            resolved,
            "list",
            lambda reader: reader.list(
                obj_type, namespace=namespace, label_selector=label_selector, kind=resolved
            ),
        )

    # =========================================================================
    # Writes (always direct)
    # =========================================================================

    async def create(self, obj: T) -> T:
        return await self._direct.create(obj)

    async def update(self, obj: T) -> T:
        return await self._direct.update(obj)

    async def delete(self, obj: KubeObject) -> None:
        await self._direct.delete(obj)

    async def patch(self, obj: T, patch: Any, patch_type: str = PatchType.MERGE.value) -> T:
        return await self._direct.patch(obj, patch, patch_type)

    async def delete_all_of(
        self,
        obj_type: type[KubeObject],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> None:
        await self._direct.delete_all_of(
            obj_type, namespace=namespace, label_selector=label_selector, kind=kind
        )

    def sub_resource(self, name: str) -> SubResourceWriter:
        return self._direct.sub_resource(name)

    def status(self) -> SubResourceWriter:
        return self._direct.status()

    # =========================================================================
    # Introspection
    # =========================================================================

    def kind_for(
        self, obj: KubeObject | type[KubeObject], kind: ResourceKind | None = None
    ) -> ResourceKind:
        return self._direct.kind_for(obj, kind)

    def is_namespaced(self, obj: KubeObject | type[KubeObject]) -> bool:
        return self._direct.is_namespaced(obj)


__all__ = [
    "FastCacheClient",
]
