"""TTL-cached access to the Replicate provider settings."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from config.replicate import defaults as replicate_defaults
from config.replicate import models as models_config
from core.exceptions import ConfigurationMissingError
from core.utils.config_helpers import parse_bool
from core.utils.env import get_env

from .types import ProviderConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplicateSettings:
    """Raw settings row as stored by the settings collaborator."""

    api_key: str | None = None
    enabled: bool = False
    default_model_key: str | None = None
    webhook_secret: str | None = None


class SettingsSource(Protocol):
    """Read-only collaborator that owns the persisted provider settings."""

    async def read_settings(self) -> ReplicateSettings | None:
        ...


class StaticSettingsSource:
    """Settings source returning a fixed row; useful for scripts and tests."""

    def __init__(self, settings: ReplicateSettings | None = None):
        self.settings = settings
        self.reads = 0

    async def read_settings(self) -> ReplicateSettings | None:
        self.reads += 1
        return self.settings


class EnvSettingsSource:
    """Settings source backed by ``REPLICATE_*`` environment variables."""

    async def read_settings(self) -> ReplicateSettings | None:
        return ReplicateSettings(
            api_key=get_env(replicate_defaults.API_TOKEN_ENV) or None,
            enabled=parse_bool(get_env("REPLICATE_ENABLED")),
            default_model_key=get_env("REPLICATE_DEFAULT_VIDEO_MODEL") or None,
            webhook_secret=get_env("REPLICATE_WEBHOOK_SECRET") or None,
        )


class ReplicateConfigProvider:
    """Caches an immutable :class:`ProviderConfig` snapshot for ``ttl_seconds``.

    Concurrent refreshes are tolerated: each refresh builds a new snapshot and
    swaps the reference, so readers never observe a half-built config.
    """

    def __init__(
        self,
        source: SettingsSource,
        *,
        ttl_seconds: float = replicate_defaults.CONFIG_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._snapshot: Optional[ProviderConfig] = None

    async def get_config(self) -> ProviderConfig:
        snapshot = self._snapshot
        now = self._clock()
        if snapshot is not None and (now - snapshot.fetched_at) < self._ttl_seconds:
            return snapshot

        settings = await self._source.read_settings() or ReplicateSettings()
        fresh = ProviderConfig(
            api_key=settings.api_key or get_env(replicate_defaults.API_TOKEN_ENV) or None,
            enabled=bool(settings.enabled),
            default_model_key=settings.default_model_key or models_config.DEFAULT_VIDEO_MODEL,
            webhook_secret=settings.webhook_secret or None,
            fetched_at=now,
        )
        self._snapshot = fresh
        logger.debug(
            "Replicate config refreshed (enabled=%s, has_api_key=%s, default_model=%s)",
            fresh.enabled,
            bool(fresh.api_key),
            fresh.default_model_key,
        )
        return fresh

    def invalidate(self) -> None:
        """Force the next :meth:`get_config` call to re-read the settings."""

        self._snapshot = None

    async def is_enabled(self) -> bool:
        config = await self.get_config()
        return config.enabled and bool(config.api_key)

    async def require_ready(self) -> ProviderConfig:
        """Return the config or raise when the provider cannot be called."""

        config = await self.get_config()
        if not config.api_key:
            raise ConfigurationMissingError(
                "Replicate API key is not configured", key=replicate_defaults.API_TOKEN_ENV
            )
        if not config.enabled:
            raise ConfigurationMissingError("Replicate is disabled", key="replicate_enabled")
        return config


__all__ = [
    "EnvSettingsSource",
    "ReplicateConfigProvider",
    "ReplicateSettings",
    "SettingsSource",
    "StaticSettingsSource",
]
