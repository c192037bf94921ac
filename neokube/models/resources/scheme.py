"""Type registration table mapping object types to resource kinds.

Every managed kind is registered once, at initialization, with the Python type
used as its blank-instance factory. Adding a kind never touches cache control
flow: the fast cache resolves kinds and builds mirrors only through this table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from neokube.constants.values import (
    CERT_MANAGER_GROUP,
    CERT_MANAGER_VERSION,
    NEO4J_GROUP,
    NEO4J_VERSION,
)
from neokube.errors import UnknownKindError
from neokube.models.resources.kinds import ResourceKind
from neokube.models.resources.objects import (
    Certificate,
    ConfigMap,
    CronJob,
    Job,
    KubeObject,
    Neo4jBackup,
    Neo4jDatabase,
    Neo4jEnterpriseCluster,
    Neo4jEnterpriseStandalone,
    Neo4jPlugin,
    Neo4jRestore,
    Neo4jShardedDatabase,
    PersistentVolumeClaim,
    Secret,
    Service,
    StatefulSet,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindInfo:
    """Registration record for one resource kind."""

    kind: ResourceKind
    object_type: type[KubeObject]
    plural: str
    namespaced: bool = True


class Scheme:
    """Registry of object types and their resource kinds."""

    def __init__(self) -> None:
        self._types: dict[type[KubeObject], ResourceKind] = {}
        self._kinds: dict[ResourceKind, KindInfo] = {}

    def register(
        self,
        object_type: type[KubeObject],
        kind: ResourceKind,
        plural: str,
        *,
        namespaced: bool = True,
    ) -> None:
        """Register a type and make its kind constructible."""
        self._types[object_type] = kind
        self._kinds[kind] = KindInfo(
            kind=kind,
            object_type=object_type,
            plural=plural,
            namespaced=namespaced,
        )
        logger.debug("Registered kind %s as %s", kind, object_type.__name__)

    def kinds(self) -> list[ResourceKind]:
        return list(self._kinds)

    def is_registered(self, kind: ResourceKind) -> bool:
        return kind in self._kinds

    def info_for(self, kind: ResourceKind) -> KindInfo:
        info = self._kinds.get(kind)
        if info is None:
            raise UnknownKindError(f"unsupported resource type: {kind}")
        return info

    def kind_for(
        self, obj: KubeObject | type[KubeObject], kind: ResourceKind | None = None
    ) -> ResourceKind:
        """Resolve the kind of an object or type.

        An explicit ``kind`` argument wins, then the object's own
        apiVersion/kind tag, then the type mapping.
        """
        if kind is not None:
            return kind
        if isinstance(obj, KubeObject):
            tagged = obj.resource_kind
            if tagged is not None:
                return tagged
            obj_type: type[KubeObject] = type(obj)
        else:
            obj_type = obj
        resolved = self._types.get(obj_type)
        if resolved is None:
            raise UnknownKindError(f"no kind registered for type {obj_type.__name__}")
        return resolved

    def new_object(self, kind: ResourceKind) -> KubeObject:
        """Build a blank, kind-tagged instance for ``kind``."""
        obj = self.info_for(kind).object_type()
        obj.set_resource_kind(kind)
        return obj

    def is_namespaced(
        self, obj: KubeObject | type[KubeObject], kind: ResourceKind | None = None
    ) -> bool:
        return self.info_for(self.kind_for(obj, kind)).namespaced

    def resource_arg(self, kind: ResourceKind) -> str:
        """kubectl resource argument for ``kind``.

        Registered kinds use the fully qualified ``plural.version.group`` form;
        unregistered kinds fall back to the lowercased kind name.
        """
        info = self._kinds.get(kind)
        if info is None:
            name = kind.kind.lower()
        else:
            name = info.plural
        if kind.group:
            return f"{name}.{kind.version}.{kind.group}"
        return name

    def api_path(self, kind: ResourceKind) -> str:
        """API server path listing ``kind`` across all namespaces.

        Raises:
            UnknownKindError: If the kind is not registered.
        """
        plural = self.info_for(kind).plural
        if kind.group:
            return f"/apis/{kind.group}/{kind.version}/{plural}"
        return f"/api/{kind.version}/{plural}"


NEO4J_CLUSTER_KIND = ResourceKind(NEO4J_GROUP, NEO4J_VERSION, "Neo4jEnterpriseCluster")


def default_scheme() -> Scheme:
    """Scheme with every kind the operator manages."""
    scheme = Scheme()

    neo4j_types: list[tuple[type[KubeObject], str]] = [
        (Neo4jEnterpriseCluster, "neo4jenterpriseclusters"),
        (Neo4jEnterpriseStandalone, "neo4jenterprisestandalones"),
        (Neo4jDatabase, "neo4jdatabases"),
        (Neo4jBackup, "neo4jbackups"),
        (Neo4jRestore, "neo4jrestores"),
        (Neo4jPlugin, "neo4jplugins"),
        (Neo4jShardedDatabase, "neo4jshardeddatabases"),
    ]
    for object_type, plural in neo4j_types:
        scheme.register(
            object_type,
            ResourceKind(NEO4J_GROUP, NEO4J_VERSION, object_type.__name__),
            plural,
        )

    # Core resources the operator creates for its deployments
    core_types: list[tuple[type[KubeObject], ResourceKind, str]] = [
        (Secret, ResourceKind("", "v1", "Secret"), "secrets"),
        (Service, ResourceKind("", "v1", "Service"), "services"),
        (ConfigMap, ResourceKind("", "v1", "ConfigMap"), "configmaps"),
        (
            PersistentVolumeClaim,
            ResourceKind("", "v1", "PersistentVolumeClaim"),
            "persistentvolumeclaims",
        ),
        (StatefulSet, ResourceKind("apps", "v1", "StatefulSet"), "statefulsets"),
        (Job, ResourceKind("batch", "v1", "Job"), "jobs"),
        (CronJob, ResourceKind("batch", "v1", "CronJob"), "cronjobs"),
        (
            Certificate,
            ResourceKind(CERT_MANAGER_GROUP, CERT_MANAGER_VERSION, "Certificate"),
            "certificates",
        ),
    ]
    for object_type, kind, plural in core_types:
        scheme.register(object_type, kind, plural)

    return scheme


__all__ = [
    "NEO4J_CLUSTER_KIND",
    "KindInfo",
    "Scheme",
    "default_scheme",
]
