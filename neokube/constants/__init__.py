"""Constants module for neokube.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (API groups)
- timeouts.py: Timeout and interval values (seconds)
- limits.py: Capacity and threshold values
- defaults.py: Default values for settings
"""

from neokube.constants.defaults import (
    CACHE_STRATEGY_DEFAULT,
    ESSENTIAL_KINDS_DEFAULT,
)
from neokube.constants.enums import (
    CacheStrategy,
    PatchType,
    WatchEventType,
)
from neokube.constants.limits import (
    EVICTION_MIN_ACCESS_COUNT,
    WARMUP_QUEUE_SIZE,
)
from neokube.constants.timeouts import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_INITIAL_SYNC_TIMEOUT,
    CACHE_STALE_AFTER,
    CACHE_SYNC_PERIOD,
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
)
from neokube.constants.values import (
    NEO4J_GROUP,
    NEO4J_VERSION,
)

__all__ = [
    # Timeouts
    "CACHE_CLEANUP_INTERVAL",
    "CACHE_INITIAL_SYNC_TIMEOUT",
    "CACHE_STALE_AFTER",
    # Defaults
    "CACHE_STRATEGY_DEFAULT",
    "CACHE_SYNC_PERIOD",
    "CLUSTER_REQUEST_TIMEOUT",
    "ESSENTIAL_KINDS_DEFAULT",
    # Limits
    "EVICTION_MIN_ACCESS_COUNT",
    "KUBECTL_COMMAND_TIMEOUT",
    # API groups
    "NEO4J_GROUP",
    "NEO4J_VERSION",
    "WARMUP_QUEUE_SIZE",
    # Enums
    "CacheStrategy",
    "PatchType",
    "WatchEventType",
]
