"""Base object store contracts."""

from neokube.controllers.base.base_client import (
    ObjectReader,
    ObjectStore,
    SubResourceWriter,
)

__all__ = [
    "ObjectReader",
    "ObjectStore",
    "SubResourceWriter",
]
