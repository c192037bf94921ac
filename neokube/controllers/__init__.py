"""Controllers module for neokube.

Object store contracts and their implementations: the kubectl-backed direct
store and the watch-based mirrors used by the fast cache.
"""

from __future__ import annotations

# Base contracts
from neokube.controllers.base import (
    ObjectReader,
    ObjectStore,
    SubResourceWriter,
)

# Direct store
from neokube.controllers.store import KubectlStore, KubectlSubResourceWriter

# Mirrors
from neokube.controllers.watch import (
    KubectlWatchCache,
    KubectlWatchCacheFactory,
    WatchCache,
    WatchCacheFactory,
)

__all__ = [
    "KubectlStore",
    "KubectlSubResourceWriter",
    "KubectlWatchCache",
    "KubectlWatchCacheFactory",
    "ObjectReader",
    "ObjectStore",
    "SubResourceWriter",
    "WatchCache",
    "WatchCacheFactory",
]
