"""Watch-based mirrors and their factories."""

from neokube.controllers.watch.factory import KubectlWatchCacheFactory, WatchCacheFactory
from neokube.controllers.watch.kubectl_watch_cache import KubectlWatchCache
from neokube.controllers.watch.watch_cache import WatchCache

__all__ = [
    "KubectlWatchCache",
    "KubectlWatchCacheFactory",
    "WatchCache",
    "WatchCacheFactory",
]
