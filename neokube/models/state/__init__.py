"""Settings models."""

from neokube.models.state.cache_settings import (
    CacheSettings,
    ConfigError,
    ConfigLoadError,
    load_settings,
)

__all__ = [
    "CacheSettings",
    "ConfigError",
    "ConfigLoadError",
    "load_settings",
]
