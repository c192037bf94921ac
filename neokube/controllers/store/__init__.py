"""Direct object store implementations."""

from neokube.controllers.store.kubectl_store import KubectlStore, KubectlSubResourceWriter

__all__ = [
    "KubectlStore",
    "KubectlSubResourceWriter",
]
