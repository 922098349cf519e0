"""Prediction submission: model resolution, payload shaping, creation request."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .catalog import ModelCatalog, default_catalog
from .client import ReplicateClient
from .inputs import GenerationInput, build_input
from .settings import ReplicateConfigProvider
from .types import JobRecord

logger = logging.getLogger(__name__)


class JobSubmitter:
    """Submit a single prediction for a catalog model.

    The payload variant is chosen from the model's declared type, never from
    what the caller asked for. Errors are raised as-is and never retried.
    """

    def __init__(
        self,
        config_provider: ReplicateConfigProvider,
        client: ReplicateClient | None = None,
        catalog: ModelCatalog | None = None,
    ):
        self.config_provider = config_provider
        self.client = client or ReplicateClient()
        self.catalog = catalog or default_catalog

    async def submit(
        self,
        model_key: str,
        raw_input: GenerationInput | Dict[str, Any],
        *,
        webhook_url: str | None = None,
        webhook_events_filter: List[str] | None = None,
    ) -> JobRecord:
        model = self.catalog.lookup_by_key(model_key)
        payload = build_input(model, raw_input)
        config = await self.config_provider.require_ready()

        logger.info(
            "Submitting %s job (model_key=%s, provider_id=%s)",
            model.type.value,
            model.key,
            model.provider_id,
        )
        return await self.client.create_prediction(
            model.provider_id,
            payload.model_dump(),
            api_key=config.api_key,
            webhook=webhook_url,
            webhook_events_filter=webhook_events_filter,
        )


__all__ = ["JobSubmitter"]
