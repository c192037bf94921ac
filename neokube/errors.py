"""Object store and cache error hierarchy."""


class StoreError(Exception):
    """Base exception for object store failures."""


class NotFoundError(StoreError):
    """Raised when the requested object does not exist."""


class AlreadyExistsError(StoreError):
    """Raised when creating an object that already exists."""


class ConflictError(StoreError):
    """Raised when a write loses an optimistic-concurrency race."""


class UnknownKindError(StoreError):
    """Raised when an object type or kind is not registered in the scheme."""


class CacheConstructionError(Exception):
    """Raised when a mirror cannot be built for a resource kind."""


__all__ = [
    "AlreadyExistsError",
    "CacheConstructionError",
    "ConflictError",
    "NotFoundError",
    "StoreError",
    "UnknownKindError",
]
