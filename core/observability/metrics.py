"""Structured logging helpers for video generation observability."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

_logger = logging.getLogger("observability.video")
_metrics_logger = logging.getLogger("observability.metrics")


def _build_payload(**fields: Any) -> Mapping[str, Any]:
    """Return a payload suitable for structured logging handlers."""

    return {
        "event": fields.pop("event"),
        "video": fields,
    }


def record_generation_success(
    *,
    provider: str,
    model: str,
    prediction_id: str,
    user_id: str | None,
    elapsed_ms: int,
    cost_usd: float,
    metadata: Mapping[str, Any] | None = None,
) -> None:
    """Emit a structured log entry for a completed generation."""

    payload = _build_payload(
        event="video_generation.completed",
        provider=provider,
        model=model,
        prediction_id=prediction_id,
        user_id=user_id,
        elapsed_ms=elapsed_ms,
        cost_usd=cost_usd,
        metadata=dict(metadata or {}),
    )
    _logger.info("video_generation_completed", extra={"observability": payload})
    track_metric("video_generation.completed", tags={"provider": provider, "model": model})


def record_generation_failure(
    *,
    provider: str,
    model: str | None,
    prediction_id: str | None,
    user_id: str | None,
    elapsed_ms: int,
    error: str,
    error_type: str | None = None,
) -> None:
    """Emit a structured log entry for a failed or cancelled generation."""

    payload = _build_payload(
        event="video_generation.failed",
        provider=provider,
        model=model,
        prediction_id=prediction_id,
        user_id=user_id,
        elapsed_ms=elapsed_ms,
        error=error,
        error_type=error_type,
    )
    _logger.error("video_generation_failed", extra={"observability": payload})
    track_metric(
        "video_generation.failed",
        tags={"provider": provider, "model": model, "error_type": error_type},
    )


def track_metric(name: str, value: float = 1.0, *, tags: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a lightweight metric event through structured logging."""

    payload = {
        "event": "metric",
        "metric": name,
        "value": value,
        "tags": dict(tags or {}),
    }
    _metrics_logger.info("metric_event", extra={"observability": payload})


__all__ = [
    "record_generation_failure",
    "record_generation_success",
    "track_metric",
]
