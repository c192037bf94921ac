"""Resource kind and object key identifiers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceKind:
    """Group/version/kind triple identifying a class of managed objects."""

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """apiVersion string as written in manifests."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @classmethod
    def parse(cls, text: str) -> ResourceKind:
        """Parse ``group/version/Kind`` (or ``version/Kind`` for the core group)."""
        parts = [part.strip() for part in text.split("/")]
        if len(parts) == 2 and all(parts):
            return cls("", parts[0], parts[1])
        if len(parts) == 3 and parts[1] and parts[2]:
            return cls(parts[0], parts[1], parts[2])
        raise ValueError(f"Invalid resource kind: {text!r}")

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> ResourceKind:
        group, _, version = api_version.rpartition("/")
        return cls(group, version, kind)

    def __str__(self) -> str:
        return f"{self.api_version}/{self.kind}"


@dataclass(frozen=True)
class ObjectKey:
    """Namespace/name pair addressing one object."""

    name: str
    namespace: str | None = None

    def __str__(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name
