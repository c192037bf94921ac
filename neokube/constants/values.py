"""Scalar constants for neokube."""

from typing import Final

# ============================================================================
# API groups
# ============================================================================

NEO4J_GROUP: Final = "neo4j.neo4j.com"
NEO4J_VERSION: Final = "v1alpha1"
CERT_MANAGER_GROUP: Final = "cert-manager.io"
CERT_MANAGER_VERSION: Final = "v1"

__all__ = [
    "CERT_MANAGER_GROUP",
    "CERT_MANAGER_VERSION",
    "NEO4J_GROUP",
    "NEO4J_VERSION",
]
