"""Watch-cache factories."""

from __future__ import annotations

from abc import ABC, abstractmethod

from neokube.constants.timeouts import CACHE_SYNC_PERIOD
from neokube.controllers.store.kubectl_store import KubectlStore
from neokube.controllers.watch.kubectl_watch_cache import KubectlWatchCache
from neokube.controllers.watch.watch_cache import WatchCache
from neokube.models.resources.objects import KubeObject


class WatchCacheFactory(ABC):
    """Builds an unstarted mirror for the kind of a blank object."""

    @abstractmethod
    def build(self, blank: KubeObject) -> WatchCache:
        """Build a mirror.

        Raises:
            UnknownKindError: If the object's kind is not registered.
        """
        ...


class KubectlWatchCacheFactory(WatchCacheFactory):
    """Builds kubectl-fed mirrors scoped to all namespaces."""

    def __init__(self, store: KubectlStore, sync_period: float = CACHE_SYNC_PERIOD) -> None:
        self._store = store
        self._sync_period = sync_period

    def build(self, blank: KubeObject) -> WatchCache:
        kind = self._store.scheme.kind_for(blank)
        info = self._store.scheme.info_for(kind)
        return KubectlWatchCache(
            self._store,
            kind,
            info.object_type,
            sync_period=self._sync_period,
        )


__all__ = [
    "KubectlWatchCacheFactory",
    "WatchCacheFactory",
]
