"""Replicate prediction orchestration primitives."""

from .catalog import ModelCatalog, default_catalog
from .client import ReplicateClient
from .inputs import (
    GenerationInput,
    ImageAnimationInput,
    ImageToVideoInput,
    TextToVideoInput,
    build_input,
)
from .poller import JobPoller
from .results import extract_primary_url
from .settings import (
    EnvSettingsSource,
    ReplicateConfigProvider,
    ReplicateSettings,
    SettingsSource,
    StaticSettingsSource,
)
from .submitter import JobSubmitter
from .types import (
    JobRecord,
    JobStatus,
    ModelCategory,
    ModelDescriptor,
    ModelType,
    ProviderConfig,
)

__all__ = [
    "EnvSettingsSource",
    "GenerationInput",
    "ImageAnimationInput",
    "ImageToVideoInput",
    "JobPoller",
    "JobRecord",
    "JobStatus",
    "JobSubmitter",
    "ModelCatalog",
    "ModelCategory",
    "ModelDescriptor",
    "ModelType",
    "ProviderConfig",
    "ReplicateClient",
    "ReplicateConfigProvider",
    "ReplicateSettings",
    "SettingsSource",
    "StaticSettingsSource",
    "TextToVideoInput",
    "build_input",
    "default_catalog",
    "extract_primary_url",
]
