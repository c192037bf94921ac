"""Utility functions for neokube."""

from neokube.utils.selectors import (
    matches_labels,
    parse_label_selector,
)

__all__ = [
    "matches_labels",
    "parse_label_selector",
]
