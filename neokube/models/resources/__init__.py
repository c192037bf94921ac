"""Resource kinds, object models and the type registration scheme."""

from neokube.models.resources.kinds import ObjectKey, ResourceKind
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
from neokube.models.resources.scheme import (
    NEO4J_CLUSTER_KIND,
    KindInfo,
    Scheme,
    default_scheme,
)

__all__ = [
    "NEO4J_CLUSTER_KIND",
    "Certificate",
    "ConfigMap",
    "CronJob",
    "Job",
    "KindInfo",
    "KubeObject",
    "Neo4jBackup",
    "Neo4jDatabase",
    "Neo4jEnterpriseCluster",
    "Neo4jEnterpriseStandalone",
    "Neo4jPlugin",
    "Neo4jRestore",
    "Neo4jShardedDatabase",
    "ObjectKey",
    "PersistentVolumeClaim",
    "ResourceKind",
    "Scheme",
    "Secret",
    "Service",
    "StatefulSet",
    "default_scheme",
]
