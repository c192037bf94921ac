"""Fast cache settings model and loader."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from neokube.constants.defaults import (
    CACHE_STRATEGY_DEFAULT,
    CLEANUP_INTERVAL_SECONDS_DEFAULT,
    ESSENTIAL_KINDS_DEFAULT,
    INITIAL_SYNC_TIMEOUT_SECONDS_DEFAULT,
    MIN_ACCESS_COUNT_DEFAULT,
    STALE_AFTER_SECONDS_DEFAULT,
    SYNC_PERIOD_SECONDS_DEFAULT,
    WARMUP_QUEUE_SIZE_DEFAULT,
)
from neokube.constants.enums import CacheStrategy
from neokube.models.resources.kinds import ResourceKind

logger = logging.getLogger(__name__)


class CacheSettings(BaseModel):
    """Fast cache settings model with validation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    strategy: CacheStrategy = CacheStrategy(CACHE_STRATEGY_DEFAULT)
    # Pre-warmed only by the selective strategy, as group/version/Kind
    essential_kinds: list[str] = Field(default_factory=lambda: list(ESSENTIAL_KINDS_DEFAULT))

    # Warmup queue and mirror timing
    warmup_queue_size: int = Field(default=WARMUP_QUEUE_SIZE_DEFAULT, ge=1)
    sync_period_seconds: float = Field(default=SYNC_PERIOD_SECONDS_DEFAULT, gt=0)
    initial_sync_timeout_seconds: float = Field(
        default=INITIAL_SYNC_TIMEOUT_SECONDS_DEFAULT, ge=0
    )

    # Eviction: stale AND rarely used
    cleanup_interval_seconds: float = Field(default=CLEANUP_INTERVAL_SECONDS_DEFAULT, gt=0)
    stale_after_seconds: float = Field(default=STALE_AFTER_SECONDS_DEFAULT, ge=0)
    min_access_count: int = Field(default=MIN_ACCESS_COUNT_DEFAULT, ge=0)

    kube_context: str | None = None

    @field_validator("essential_kinds")
    @classmethod
    def _validate_essential_kinds(cls, value: list[str]) -> list[str]:
        for item in value:
            ResourceKind.parse(item)
        return value

    def essential_resource_kinds(self) -> list[ResourceKind]:
        return [ResourceKind.parse(item) for item in self.essential_kinds]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


def load_settings(path: str | Path) -> CacheSettings:
    """Load settings from a YAML file.

    An empty file yields the defaults. Settings may sit at the top level or
    under a ``cache`` key.
    """
    settings_path = Path(path)
    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigLoadError(f"Failed to read settings from {settings_path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"Settings in {settings_path} must be a mapping")
    if isinstance(raw.get("cache"), dict):
        raw = raw["cache"]

    try:
        settings = CacheSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid settings in {settings_path}: {exc}") from exc

    logger.info("Loaded cache settings from %s (strategy=%s)", settings_path, settings.strategy.value)
    return settings


__all__ = [
    "CacheSettings",
    "ConfigError",
    "ConfigLoadError",
    "load_settings",
]
