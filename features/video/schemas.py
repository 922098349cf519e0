"""Request and response models for the video HTTP API."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from config.replicate import defaults as replicate_defaults
from core.providers.replicate import JobRecord, ModelDescriptor

GenerationMode = Literal["text-to-video", "image-to-video"]


class VideoGenerateRequest(BaseModel):
    """Payload accepted by ``POST /api/v1/video/generate``.

    ``prompt`` is not length-validated here so that an empty prompt surfaces
    as the service's own validation error with a 400 status.
    """

    prompt: str = ""
    mode: GenerationMode = "text-to-video"
    image_url: Optional[str] = None
    model: Optional[str] = Field(default=None, description="Catalog model key; defaults per mode")
    optimize_prompt: Optional[bool] = None
    webhook_url: Optional[str] = None


class VideoGenerateResult(BaseModel):
    result_url: str
    prediction_id: str
    model: str
    status: str
    predict_time: Optional[float] = None


class VideoModelInfo(BaseModel):
    key: str
    provider_id: str
    display_name: str
    description: str
    type: str
    cost_per_run: float
    avg_duration_seconds: int
    output_format: str
    max_duration_seconds: Optional[int] = None
    supports_prompt_optimizer: bool

    @classmethod
    def from_descriptor(cls, descriptor: ModelDescriptor) -> "VideoModelInfo":
        return cls(**descriptor.model_dump(mode="json"))


class VideoLimits(BaseModel):
    max_prompt_length: int = replicate_defaults.MAX_PROMPT_LENGTH
    max_video_duration_seconds: int = replicate_defaults.MAX_VIDEO_DURATION_SECONDS


class VideoModelList(BaseModel):
    enabled: bool
    default_model: str
    models: List[VideoModelInfo]
    limits: VideoLimits = Field(default_factory=VideoLimits)


class PredictionStatus(BaseModel):
    id: str
    status: str
    output: Optional[Any] = None
    error: Optional[str] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None

    @classmethod
    def from_record(cls, record: JobRecord) -> "PredictionStatus":
        return cls(
            id=record.id,
            status=record.status.value,
            output=record.output,
            error=record.error,
            created_at=record.created_at,
            completed_at=record.completed_at,
            metrics=record.metrics,
        )


__all__ = [
    "GenerationMode",
    "PredictionStatus",
    "VideoGenerateRequest",
    "VideoGenerateResult",
    "VideoLimits",
    "VideoModelInfo",
    "VideoModelList",
]
