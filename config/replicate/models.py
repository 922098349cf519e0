"""Replicate video model mappings.

Provider identifiers must match Replicate exactly (``{owner}/{model-name}``).
"""

from __future__ import annotations

from typing import Any, Dict

VIDEO_MODELS: Dict[str, Dict[str, Any]] = {
    "minimax-video-01": {
        "provider_id": "minimax/video-01",
        "display_name": "Minimax Video-01",
        "description": "High quality text-to-video with prompt optimizer",
        "type": "text-to-video",
        "cost_per_run": 0.25,
        "avg_duration_seconds": 60,
        "output_format": "mp4",
        "max_duration_seconds": 6,
        "supports_prompt_optimizer": True,
    },
    "minimax-video-01-live": {
        "provider_id": "minimax/video-01-live",
        "display_name": "Minimax Video-01 Live",
        "description": "Image-to-video animation",
        "type": "image-to-video",
        "cost_per_run": 0.25,
        "avg_duration_seconds": 60,
        "output_format": "mp4",
        "max_duration_seconds": 6,
        "supports_prompt_optimizer": True,
    },
    "stable-video-diffusion": {
        "provider_id": "stability-ai/stable-video-diffusion",
        "display_name": "Stable Video Diffusion",
        "description": "Low-cost image animation with 25 frames",
        "type": "image-animation",
        "cost_per_run": 0.04,
        "avg_duration_seconds": 30,
        "output_format": "mp4",
        "max_duration_seconds": 4,
        "supports_prompt_optimizer": False,
    },
    "cogvideox": {
        "provider_id": "tencent/cogvideox-5b",
        "display_name": "CogVideoX 5B",
        "description": "Open-source text-to-video model",
        "type": "text-to-video",
        "cost_per_run": 0.20,
        "avg_duration_seconds": 90,
        "output_format": "mp4",
        "max_duration_seconds": 6,
        "supports_prompt_optimizer": False,
    },
    "animatediff": {
        "provider_id": "lucataco/animate-diff",
        "display_name": "AnimateDiff",
        "description": "Image animation with motion control",
        "type": "image-animation",
        "cost_per_run": 0.05,
        "avg_duration_seconds": 45,
        "output_format": "mp4",
        "max_duration_seconds": 3,
        "supports_prompt_optimizer": False,
    },
}

DEFAULT_VIDEO_MODEL = "minimax-video-01"
DEFAULT_TEXT_TO_VIDEO_MODEL = DEFAULT_VIDEO_MODEL
DEFAULT_IMAGE_TO_VIDEO_MODEL = "minimax-video-01-live"

__all__ = [
    "VIDEO_MODELS",
    "DEFAULT_VIDEO_MODEL",
    "DEFAULT_TEXT_TO_VIDEO_MODEL",
    "DEFAULT_IMAGE_TO_VIDEO_MODEL",
]
