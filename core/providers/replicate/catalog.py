"""Read-only registry of the Replicate models this backend can run."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Tuple

from config.replicate import models as models_config
from core.exceptions import UnknownModelError

from .types import CATEGORY_MODEL_TYPES, ModelCategory, ModelDescriptor, ModelType

logger = logging.getLogger(__name__)

_CATEGORY_FALLBACKS: Dict[ModelCategory, str] = {
    ModelCategory.TEXT: models_config.DEFAULT_TEXT_TO_VIDEO_MODEL,
    ModelCategory.IMAGE: models_config.DEFAULT_IMAGE_TO_VIDEO_MODEL,
}


class ModelCatalog:
    """Immutable lookup table mapping logical model keys to descriptors.

    Usage:
        catalog = ModelCatalog.from_config()
        model = catalog.lookup_by_key("minimax-video-01")
    """

    def __init__(self, descriptors: Iterable[ModelDescriptor]):
        by_key: Dict[str, ModelDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.key in by_key:
                raise ValueError(f"Duplicate model key in catalog: {descriptor.key}")
            by_key[descriptor.key] = descriptor
        self._by_key: Mapping[str, ModelDescriptor] = by_key
        self._by_provider_id: Mapping[str, ModelDescriptor] = {
            descriptor.provider_id: descriptor for descriptor in by_key.values()
        }

    @classmethod
    def from_mapping(cls, raw_models: Mapping[str, Mapping[str, Any]]) -> "ModelCatalog":
        return cls(ModelDescriptor(key=key, **data) for key, data in raw_models.items())

    @classmethod
    def from_config(cls) -> "ModelCatalog":
        return cls.from_mapping(models_config.VIDEO_MODELS)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)

    def lookup_by_key(self, key: str) -> ModelDescriptor:
        """Return the descriptor for ``key`` or raise :class:`UnknownModelError`."""

        descriptor = self._by_key.get(key)
        if descriptor is None:
            raise UnknownModelError(key)
        return descriptor

    def lookup_by_provider_id(self, provider_id: str) -> ModelDescriptor | None:
        """Reverse lookup used to normalise provider responses."""

        return self._by_provider_id.get(provider_id)

    def list_models(self) -> Tuple[ModelDescriptor, ...]:
        return tuple(self._by_key.values())

    def list_by_type(self, model_type: ModelType | str) -> Tuple[ModelDescriptor, ...]:
        wanted = ModelType(model_type)
        return tuple(descriptor for descriptor in self._by_key.values() if descriptor.type is wanted)

    def resolve_default(self, category: ModelCategory, configured_key: str | None = None) -> ModelDescriptor:
        """Return the default model for a facade category.

        The configured key wins when it is known and its type fits the
        category; otherwise the hard-coded fallback for the category is used.
        """

        accepted = CATEGORY_MODEL_TYPES[category]
        if configured_key:
            descriptor = self._by_key.get(configured_key)
            if descriptor is not None and descriptor.type in accepted:
                return descriptor
            logger.debug(
                "Configured default model %r does not fit category %s; using fallback",
                configured_key,
                category.value,
            )
        return self.lookup_by_key(_CATEGORY_FALLBACKS[category])

    def estimate_cost(self, key: str, quantity: int = 1) -> float:
        """Estimated cost in USD for ``quantity`` runs; 0 for unknown keys."""

        descriptor = self._by_key.get(key)
        if descriptor is None:
            return 0.0
        return descriptor.cost_per_run * quantity

    def pricing(self) -> Dict[str, float]:
        """Provider id to cost-per-run mapping."""

        return {descriptor.provider_id: descriptor.cost_per_run for descriptor in self._by_key.values()}


default_catalog = ModelCatalog.from_config()


__all__ = ["ModelCatalog", "default_catalog"]
