"""Default values for settings.

All default values used in the CacheSettings model.
"""

from typing import Final

from neokube.constants.limits import EVICTION_MIN_ACCESS_COUNT, WARMUP_QUEUE_SIZE
from neokube.constants.timeouts import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_INITIAL_SYNC_TIMEOUT,
    CACHE_STALE_AFTER,
    CACHE_SYNC_PERIOD,
)
from neokube.constants.values import NEO4J_GROUP, NEO4J_VERSION

# ============================================================================
# Cache defaults
# ============================================================================

CACHE_STRATEGY_DEFAULT: Final = "lazy"
ESSENTIAL_KINDS_DEFAULT: Final = (f"{NEO4J_GROUP}/{NEO4J_VERSION}/Neo4jEnterpriseCluster",)
WARMUP_QUEUE_SIZE_DEFAULT: Final = WARMUP_QUEUE_SIZE
SYNC_PERIOD_SECONDS_DEFAULT: Final = CACHE_SYNC_PERIOD
INITIAL_SYNC_TIMEOUT_SECONDS_DEFAULT: Final = CACHE_INITIAL_SYNC_TIMEOUT
CLEANUP_INTERVAL_SECONDS_DEFAULT: Final = CACHE_CLEANUP_INTERVAL
STALE_AFTER_SECONDS_DEFAULT: Final = CACHE_STALE_AFTER
MIN_ACCESS_COUNT_DEFAULT: Final = EVICTION_MIN_ACCESS_COUNT

__all__ = [
    "CACHE_STRATEGY_DEFAULT",
    "CLEANUP_INTERVAL_SECONDS_DEFAULT",
    "ESSENTIAL_KINDS_DEFAULT",
    "INITIAL_SYNC_TIMEOUT_SECONDS_DEFAULT",
    "MIN_ACCESS_COUNT_DEFAULT",
    "STALE_AFTER_SECONDS_DEFAULT",
    "SYNC_PERIOD_SECONDS_DEFAULT",
    "WARMUP_QUEUE_SIZE_DEFAULT",
]
