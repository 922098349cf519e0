"""Data models and enums for the Replicate prediction API."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ModelType(str, Enum):
    """Generation capability declared by a catalog model."""

    TEXT_TO_VIDEO = "text-to-video"
    IMAGE_TO_VIDEO = "image-to-video"
    IMAGE_ANIMATION = "image-animation"


class ModelCategory(str, Enum):
    """Facade entry point a default model is resolved for."""

    TEXT = "text"
    IMAGE = "image"


CATEGORY_MODEL_TYPES: Dict[ModelCategory, frozenset[ModelType]] = {
    ModelCategory.TEXT: frozenset({ModelType.TEXT_TO_VIDEO}),
    ModelCategory.IMAGE: frozenset({ModelType.IMAGE_TO_VIDEO, ModelType.IMAGE_ANIMATION}),
}


class JobStatus(str, Enum):
    """Prediction status values reported by Replicate."""

    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELED})


class ModelDescriptor(BaseModel):
    """Local metadata for a provider model."""

    model_config = ConfigDict(frozen=True)

    key: str
    provider_id: str
    display_name: str
    description: str = ""
    type: ModelType
    cost_per_run: float = Field(..., ge=0)
    avg_duration_seconds: int
    output_format: str
    max_duration_seconds: Optional[int] = None
    supports_prompt_optimizer: bool = False


class JobRecord(BaseModel):
    """Local projection of a provider-side prediction."""

    model_config = ConfigDict(extra="ignore")

    id: str
    status: JobStatus
    output: Optional[Union[str, List[str]]] = None
    error: Optional[str] = None
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def predict_time(self) -> float | None:
        if not self.metrics:
            return None
        return self.metrics.get("predict_time")


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable snapshot of the provider settings."""

    api_key: str | None
    enabled: bool
    default_model_key: str
    webhook_secret: str | None
    fetched_at: float


__all__ = [
    "CATEGORY_MODEL_TYPES",
    "JobRecord",
    "JobStatus",
    "ModelCategory",
    "ModelDescriptor",
    "ModelType",
    "ProviderConfig",
]
