"""Object store contracts shared by the direct client, mirrors and the fast cache.

Reconciliation code depends only on ``ObjectStore``; whether a read is served
from a local mirror or from the API server is invisible to it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import KubeObject
from neokube.models.resources.scheme import Scheme

T = TypeVar("T", bound=KubeObject)


class ObjectReader(ABC):
    """Read half of the object store contract."""

    @abstractmethod
    async def get(
        self,
        obj_type: type[T],
        name: str,
        namespace: str | None = None,
        *,
        kind: ResourceKind | None = None,
    ) -> T:
        """Fetch one object.

        Raises:
            NotFoundError: If the object does not exist.
        """
        ...

    @abstractmethod
    async def list(
        self,
        obj_type: type[T],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> list[T]:
        """List objects, optionally scoped to a namespace and label selector."""
        ...


class SubResourceWriter(ABC):
    """Writer for a sub-resource such as ``status``."""

    @abstractmethod
    async def update(self, obj: T) -> T:
        ...

    @abstractmethod
    async def patch(self, obj: T, patch: Any, patch_type: str = "merge") -> T:
        ...


class ObjectStore(ObjectReader):
    """Full read/write object store contract."""

    @property
    @abstractmethod
    def scheme(self) -> Scheme:
        ...

    @abstractmethod
    async def create(self, obj: T) -> T:
        ...

    @abstractmethod
    async def update(self, obj: T) -> T:
        ...

    @abstractmethod
    async def delete(self, obj: KubeObject) -> None:
        ...

    @abstractmethod
    async def patch(self, obj: T, patch: Any, patch_type: str = "merge") -> T:
        ...

    @abstractmethod
    async def delete_all_of(
        self,
        obj_type: type[KubeObject],
        *,
        namespace: str | None = None,
        label_selector: str | None = None,
        kind: ResourceKind | None = None,
    ) -> None:
        ...

    @abstractmethod
    def sub_resource(self, name: str) -> SubResourceWriter:
        ...

    def status(self) -> SubResourceWriter:
        """Writer for the status sub-resource."""
        return self.sub_resource("status")

    def kind_for(
        self, obj: KubeObject | type[KubeObject], kind: ResourceKind | None = None
    ) -> ResourceKind:
        return self.scheme.kind_for(obj, kind)

    def is_namespaced(self, obj: KubeObject | type[KubeObject]) -> bool:
        return self.scheme.is_namespaced(obj)


__all__ = [
    "ObjectReader",
    "ObjectStore",
    "SubResourceWriter",
]
