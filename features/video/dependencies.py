"""Dependency helpers for the video feature."""

from __future__ import annotations

from functools import lru_cache

from core.providers.replicate import EnvSettingsSource, ReplicateConfigProvider
from features.usage import InMemoryUsageLedger, UsageRecorder

from .service import VideoGenerationService


@lru_cache(maxsize=1)
def get_config_provider() -> ReplicateConfigProvider:
    return ReplicateConfigProvider(EnvSettingsSource())


@lru_cache(maxsize=1)
def get_usage_ledger() -> InMemoryUsageLedger:
    return InMemoryUsageLedger()


@lru_cache(maxsize=1)
def get_video_service() -> VideoGenerationService:
    """Return the process-wide service wired to env settings and the in-memory ledger."""

    return VideoGenerationService(
        get_config_provider(),
        UsageRecorder(get_usage_ledger()),
    )


__all__ = ["get_config_provider", "get_usage_ledger", "get_video_service"]
