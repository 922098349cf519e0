"""Model-type specific input payloads for Replicate predictions."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, Field

from config.replicate import defaults as replicate_defaults
from core.exceptions import ValidationError

from .types import ModelDescriptor, ModelType


class GenerationInput(BaseModel):
    """Caller supplied input before it is shaped for a specific model."""

    prompt: str = ""
    image_url: Optional[str] = None
    prompt_optimizer: Optional[bool] = None


class TextToVideoInput(BaseModel):
    prompt: str = Field(..., min_length=1)
    prompt_optimizer: bool = False


class ImageToVideoInput(BaseModel):
    prompt: str = Field(..., min_length=1)
    first_frame_image: str = Field(..., min_length=1)
    prompt_optimizer: bool = False


class ImageAnimationInput(BaseModel):
    """Image animation ignores the prompt and uses fixed motion parameters."""

    input_image: str = Field(..., min_length=1)
    motion_bucket_id: int = replicate_defaults.ANIMATION_MOTION_BUCKET_ID
    fps: int = replicate_defaults.ANIMATION_FPS
    cond_aug: float = replicate_defaults.ANIMATION_COND_AUG


ModelInput = Union[TextToVideoInput, ImageToVideoInput, ImageAnimationInput]


def _require_prompt(raw: GenerationInput) -> str:
    prompt = (raw.prompt or "").strip()
    if not prompt:
        raise ValidationError("Prompt cannot be empty", field="prompt")
    return prompt


def _require_image(raw: GenerationInput) -> str:
    image_url = (raw.image_url or "").strip()
    if not image_url:
        raise ValidationError("Image URL is required for image-based models", field="image_url")
    return image_url


def _optimizer(model: ModelDescriptor, raw: GenerationInput) -> bool:
    if raw.prompt_optimizer is None:
        return model.supports_prompt_optimizer
    return raw.prompt_optimizer


def _build_text_to_video(model: ModelDescriptor, raw: GenerationInput) -> TextToVideoInput:
    return TextToVideoInput(prompt=_require_prompt(raw), prompt_optimizer=_optimizer(model, raw))


def _build_image_to_video(model: ModelDescriptor, raw: GenerationInput) -> ImageToVideoInput:
    return ImageToVideoInput(
        prompt=_require_prompt(raw),
        first_frame_image=_require_image(raw),
        prompt_optimizer=_optimizer(model, raw),
    )


def _build_image_animation(model: ModelDescriptor, raw: GenerationInput) -> ImageAnimationInput:
    return ImageAnimationInput(input_image=_require_image(raw))


INPUT_BUILDERS: Dict[ModelType, Callable[[ModelDescriptor, GenerationInput], ModelInput]] = {
    ModelType.TEXT_TO_VIDEO: _build_text_to_video,
    ModelType.IMAGE_TO_VIDEO: _build_image_to_video,
    ModelType.IMAGE_ANIMATION: _build_image_animation,
}

_missing = set(ModelType) - set(INPUT_BUILDERS)
if _missing:  # pragma: no cover - import-time guard
    raise RuntimeError(f"No input builder registered for model types: {sorted(m.value for m in _missing)}")


def build_input(model: ModelDescriptor, raw: GenerationInput | Dict[str, Any]) -> ModelInput:
    """Shape ``raw`` into the payload variant required by ``model.type``."""

    if not isinstance(raw, GenerationInput):
        raw = GenerationInput(**raw)
    return INPUT_BUILDERS[model.type](model, raw)


__all__ = [
    "GenerationInput",
    "ImageAnimationInput",
    "ImageToVideoInput",
    "INPUT_BUILDERS",
    "ModelInput",
    "TextToVideoInput",
    "build_input",
]
