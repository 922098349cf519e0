"""Helper functions for video service operations."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from core.providers.replicate import JobRecord

_PROMPT_PREVIEW_LIMIT = 200


def elapsed_ms(started: float, finished: float) -> int:
    """Convert a pair of clock readings in seconds to whole milliseconds."""

    return max(int((finished - started) * 1000), 0)


def describe_error(exc: BaseException) -> str:
    """Return the message stored in the usage ledger for a failed call."""

    if isinstance(exc, asyncio.CancelledError):
        return "Generation cancelled by caller"
    return str(exc) or exc.__class__.__name__


def build_metadata(
    *,
    model_key: str | None,
    prompt: str | None,
    image_url: Optional[str] = None,
    job: Optional[JobRecord] = None,
) -> Dict[str, Any]:
    """Build the metadata attached to usage entries."""

    metadata: Dict[str, Any] = {"model_key": model_key}
    if prompt:
        metadata["prompt"] = prompt[:_PROMPT_PREVIEW_LIMIT]
    if image_url:
        metadata["image_url"] = image_url
    if job is not None:
        metadata["prediction_id"] = job.id
        if job.predict_time is not None:
            metadata["predict_time"] = job.predict_time
    return metadata


__all__ = ["build_metadata", "describe_error", "elapsed_ms"]
