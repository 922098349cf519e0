"""Replicate orchestration defaults."""

from __future__ import annotations

from core.utils.config_helpers import env_float, env_int
from core.utils.env import get_env

PROVIDER_NAME = "replicate"
REQUEST_KIND_VIDEO = "video_generation"

# API access
API_BASE_URL = get_env("REPLICATE_API_BASE_URL", "https://api.replicate.com/v1") or "https://api.replicate.com/v1"
API_TOKEN_ENV = "REPLICATE_API_TOKEN"
HTTP_TIMEOUT = env_float("REPLICATE_HTTP_TIMEOUT", 30.0)

# Settings snapshot cache
CONFIG_CACHE_TTL_SECONDS = 5 * 60

# Polling settings
POLL_INTERVAL_MS = env_int("REPLICATE_POLL_INTERVAL_MS", 3000, minimum=1)
MAX_WAIT_MS = env_int("REPLICATE_MAX_WAIT_MS", 600_000, minimum=1)

# Fixed motion parameters for image-animation models
ANIMATION_MOTION_BUCKET_ID = 127
ANIMATION_FPS = 25
ANIMATION_COND_AUG = 0.02

# Limits advertised to clients
MAX_PROMPT_LENGTH = 1000
MAX_VIDEO_DURATION_SECONDS = 10

__all__ = [
    "PROVIDER_NAME",
    "REQUEST_KIND_VIDEO",
    "API_BASE_URL",
    "API_TOKEN_ENV",
    "HTTP_TIMEOUT",
    "CONFIG_CACHE_TTL_SECONDS",
    "POLL_INTERVAL_MS",
    "MAX_WAIT_MS",
    "ANIMATION_MOTION_BUCKET_ID",
    "ANIMATION_FPS",
    "ANIMATION_COND_AUG",
    "MAX_PROMPT_LENGTH",
    "MAX_VIDEO_DURATION_SECONDS",
]
