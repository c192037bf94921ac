"""Kubernetes object models.

Objects are plain dataclasses mirroring the manifest layout. Typed subclasses
carry no behavior of their own; the scheme maps each subclass to its kind.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from neokube.models.resources.kinds import ObjectKey, ResourceKind

_KNOWN_FIELDS = ("apiVersion", "kind", "metadata", "spec", "status")


@dataclass
class KubeObject:
    """Generic Kubernetes object."""

    api_version: str = ""
    kind: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    spec: dict[str, Any] = field(default_factory=dict)
    status: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @property
    def namespace(self) -> str | None:
        return self.metadata.get("namespace") or None

    @property
    def labels(self) -> dict[str, str]:
        return self.metadata.get("labels") or {}

    @property
    def resource_version(self) -> str:
        return self.metadata.get("resourceVersion", "")

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.name, self.namespace)

    @property
    def resource_kind(self) -> ResourceKind | None:
        """Explicit kind tag carried by the object, if both fields are set."""
        if not self.api_version or not self.kind:
            return None
        return ResourceKind.from_api_version(self.api_version, self.kind)

    def set_resource_kind(self, kind: ResourceKind) -> None:
        self.api_version = kind.api_version
        self.kind = kind.kind

    def to_dict(self) -> dict[str, Any]:
        """Convert to a manifest dictionary."""
        data: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": copy.deepcopy(self.metadata),
        }
        if self.spec:
            data["spec"] = copy.deepcopy(self.spec)
        if self.status:
            data["status"] = copy.deepcopy(self.status)
        data.update(copy.deepcopy(self.extra))
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KubeObject:
        """Build an object from a manifest dictionary."""
        return cls(
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
            metadata=copy.deepcopy(data.get("metadata") or {}),
            spec=copy.deepcopy(data.get("spec") or {}),
            status=copy.deepcopy(data.get("status") or {}),
            extra={
                key: copy.deepcopy(value)
                for key, value in data.items()
                if key not in _KNOWN_FIELDS
            },
        )


# =============================================================================
# Operator custom resources
# =============================================================================

class Neo4jEnterpriseCluster(KubeObject):
    """Multi-server Neo4j Enterprise cluster."""


class Neo4jEnterpriseStandalone(KubeObject):
    """Single-server Neo4j Enterprise deployment."""


class Neo4jDatabase(KubeObject):
    """Database hosted on a cluster or standalone server."""


class Neo4jBackup(KubeObject):
    """Backup job definition."""


class Neo4jRestore(KubeObject):
    """Restore job definition."""


class Neo4jPlugin(KubeObject):
    """Plugin installed into a deployment."""


class Neo4jShardedDatabase(KubeObject):
    """Property-sharded database."""


# =============================================================================
# Core resources owned by the operator
# =============================================================================

class Secret(KubeObject):
    pass


class Service(KubeObject):
    pass


class ConfigMap(KubeObject):
    pass


class PersistentVolumeClaim(KubeObject):
    pass


class StatefulSet(KubeObject):
    pass


class Job(KubeObject):
    pass


class CronJob(KubeObject):
    pass


class Certificate(KubeObject):
    """cert-manager Certificate."""


__all__ = [
    "Certificate",
    "ConfigMap",
    "CronJob",
    "Job",
    "KubeObject",
    "Neo4jBackup",
    "Neo4jDatabase",
    "Neo4jEnterpriseCluster",
    "Neo4jEnterpriseStandalone",
    "Neo4jPlugin",
    "Neo4jRestore",
    "Neo4jShardedDatabase",
    "PersistentVolumeClaim",
    "Secret",
    "Service",
    "StatefulSet",
]
