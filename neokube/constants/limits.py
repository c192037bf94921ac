"""Limit constants for neokube.

Capacities and thresholds bounding the fast cache footprint.
"""

from typing import Final

# Warmup requests beyond this are dropped, never blocked
WARMUP_QUEUE_SIZE: Final = 100

# Kinds accessed at least this many times are never evicted
EVICTION_MIN_ACCESS_COUNT: Final = 10

__all__ = [
    "EVICTION_MIN_ACCESS_COUNT",
    "WARMUP_QUEUE_SIZE",
]
