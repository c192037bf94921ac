"""Timeout constants for neokube.

All timeout and interval values for API requests, cache sync and worker cycles.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeouts (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45

# ============================================================================
# Cache timing (float, in seconds)
# ============================================================================

CACHE_SYNC_PERIOD: Final = 300.0
CACHE_INITIAL_SYNC_TIMEOUT: Final = 10.0
CACHE_CLEANUP_INTERVAL: Final = 120.0
CACHE_STALE_AFTER: Final = 300.0
WATCH_RETRY_BACKOFF: Final = 5.0

__all__ = [
    "CACHE_CLEANUP_INTERVAL",
    "CACHE_INITIAL_SYNC_TIMEOUT",
    "CACHE_STALE_AFTER",
    "CACHE_SYNC_PERIOD",
    "CLUSTER_REQUEST_TIMEOUT",
    "KUBECTL_COMMAND_TIMEOUT",
    "WATCH_RETRY_BACKOFF",
]
