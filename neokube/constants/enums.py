"""All enum definitions for neokube.

This module consolidates all enumerations used throughout the package.
"""

from enum import Enum

# =============================================================================
# Cache Enums
# =============================================================================

class CacheStrategy(str, Enum):
    """Fast cache strategies, fixed when the cache is constructed."""

    NONE = "none"  # No caching, direct API calls
    LAZY = "lazy"  # Mirrors created only when first accessed
    SELECTIVE = "selective"  # Essential kinds pre-warmed, the rest on demand
    ON_DEMAND = "on-demand"  # Never pre-warm, sync only when requested


class WatchEventType(Enum):
    """Watch event types emitted by the Kubernetes API."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"


class PatchType(Enum):
    """Patch types accepted by kubectl patch --type."""

    MERGE = "merge"
    JSON = "json"
    STRATEGIC = "strategic"


__all__ = [
    "CacheStrategy",
    "PatchType",
    "WatchEventType",
]
