"""Business logic for video generation."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Tuple

from config.replicate import defaults as replicate_defaults
from core.exceptions import UnsupportedOperationError
from core.observability import record_generation_failure, record_generation_success
from core.providers.replicate import (
    GenerationInput,
    JobPoller,
    JobRecord,
    JobSubmitter,
    ModelCatalog,
    ModelCategory,
    ModelDescriptor,
    ModelType,
    ReplicateConfigProvider,
    default_catalog,
    extract_primary_url,
)
from features.usage import UsageRecorder

from .helpers import build_metadata, describe_error, elapsed_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a completed generation: primary video URL, final job record and model used."""

    result_url: str
    job: JobRecord
    model_key: str


class VideoGenerationService:
    """Coordinate model resolution, submission, polling and usage recording.

    Every call produces exactly one usage entry. Errors, including caller
    cancellation, are recorded as failures and re-raised unchanged.
    """

    def __init__(
        self,
        config_provider: ReplicateConfigProvider,
        usage_recorder: UsageRecorder,
        *,
        submitter: JobSubmitter | None = None,
        poller: JobPoller | None = None,
        catalog: ModelCatalog | None = None,
        max_wait_ms: int = replicate_defaults.MAX_WAIT_MS,
        poll_interval_ms: int = replicate_defaults.POLL_INTERVAL_MS,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.config_provider = config_provider
        self.usage_recorder = usage_recorder
        self.catalog = catalog or default_catalog
        self.submitter = submitter or JobSubmitter(config_provider, catalog=self.catalog)
        self.poller = poller or JobPoller(config_provider)
        self.max_wait_ms = max_wait_ms
        self.poll_interval_ms = poll_interval_ms
        self._clock = clock

    async def generate_from_text(
        self,
        prompt: str,
        *,
        model_key: str | None = None,
        optimize_prompt: bool | None = None,
        user_id: str | None = None,
        subject_type: str = "admin",
        webhook_url: str | None = None,
    ) -> GenerationResult:
        """Generate a video from a text prompt with a text-to-video model."""

        raw_input = GenerationInput(prompt=prompt, prompt_optimizer=optimize_prompt)
        return await self._generate(
            ModelCategory.TEXT,
            raw_input,
            model_key=model_key,
            user_id=user_id,
            subject_type=subject_type,
            webhook_url=webhook_url,
        )

    async def generate_from_image(
        self,
        image_url: str,
        prompt: str = "",
        *,
        model_key: str | None = None,
        optimize_prompt: bool | None = None,
        user_id: str | None = None,
        subject_type: str = "admin",
        webhook_url: str | None = None,
    ) -> GenerationResult:
        """Animate ``image_url`` with an image-to-video or image-animation model.

        Image-animation models ignore ``prompt``; image-to-video models require it.
        """

        raw_input = GenerationInput(prompt=prompt, image_url=image_url, prompt_optimizer=optimize_prompt)
        return await self._generate(
            ModelCategory.IMAGE,
            raw_input,
            model_key=model_key,
            user_id=user_id,
            subject_type=subject_type,
            webhook_url=webhook_url,
        )

    async def _resolve_model(self, category: ModelCategory, model_key: str | None) -> ModelDescriptor:
        if model_key:
            model = self.catalog.lookup_by_key(model_key)
        else:
            config = await self.config_provider.get_config()
            model = self.catalog.resolve_default(category, config.default_model_key)

        if category is ModelCategory.TEXT and model.type is not ModelType.TEXT_TO_VIDEO:
            raise UnsupportedOperationError(
                f"Model {model.key} ({model.type.value}) cannot generate video from text; "
                "use an image-based generation instead",
                model_key=model.key,
            )
        if category is ModelCategory.IMAGE and model.type is ModelType.TEXT_TO_VIDEO:
            raise UnsupportedOperationError(
                f"Model {model.key} is text-to-video only and does not accept an input image",
                model_key=model.key,
            )
        return model

    async def _generate(
        self,
        category: ModelCategory,
        raw_input: GenerationInput,
        *,
        model_key: str | None,
        user_id: str | None,
        subject_type: str,
        webhook_url: str | None,
    ) -> GenerationResult:
        started = self._clock()
        model: ModelDescriptor | None = None
        job: JobRecord | None = None

        try:
            model = await self._resolve_model(category, model_key)
            job = await self.submitter.submit(model.key, raw_input, webhook_url=webhook_url)
            job = await self.poller.await_completion(
                job.id,
                max_wait_ms=self.max_wait_ms,
                poll_interval_ms=self.poll_interval_ms,
            )
            result_url = extract_primary_url(job.output)
        except (Exception, asyncio.CancelledError) as exc:
            duration_ms = elapsed_ms(started, self._clock())
            model_id = model.provider_id if model is not None else (model_key or "unknown")
            message = describe_error(exc)
            logger.error("Video generation failed (model=%s): %s", model_id, message)
            await self.usage_recorder.record_failure(
                model_id=model_id,
                error_message=message,
                response_time_ms=duration_ms,
                user_id=user_id,
                subject_type=subject_type,
                metadata=build_metadata(
                    model_key=model.key if model is not None else model_key,
                    prompt=raw_input.prompt,
                    image_url=raw_input.image_url,
                    job=job,
                ),
            )
            record_generation_failure(
                provider=replicate_defaults.PROVIDER_NAME,
                model=model_id,
                prediction_id=job.id if job is not None else None,
                user_id=user_id,
                elapsed_ms=duration_ms,
                error=message,
                error_type=exc.__class__.__name__,
            )
            raise

        duration_ms = elapsed_ms(started, self._clock())
        metadata = build_metadata(
            model_key=model.key,
            prompt=raw_input.prompt,
            image_url=raw_input.image_url,
            job=job,
        )
        await self.usage_recorder.record_success(
            model_id=model.provider_id,
            cost_usd=model.cost_per_run,
            response_time_ms=duration_ms,
            user_id=user_id,
            subject_type=subject_type,
            metadata=metadata,
        )
        record_generation_success(
            provider=replicate_defaults.PROVIDER_NAME,
            model=model.provider_id,
            prediction_id=job.id,
            user_id=user_id,
            elapsed_ms=duration_ms,
            cost_usd=model.cost_per_run,
            metadata=metadata,
        )
        logger.info("Video generation completed (model=%s, prediction=%s)", model.key, job.id)
        return GenerationResult(result_url=result_url, job=job, model_key=model.key)

    async def get_job(self, job_id: str) -> JobRecord:
        return await self.poller.get(job_id)

    async def cancel_job(self, job_id: str) -> JobRecord:
        return await self.poller.cancel(job_id)

    def list_models(self, model_type: ModelType | str | None = None) -> Tuple[ModelDescriptor, ...]:
        if model_type is None:
            return self.catalog.list_models()
        return self.catalog.list_by_type(model_type)

    async def is_enabled(self) -> bool:
        return await self.config_provider.is_enabled()

    async def default_model_key(self) -> str:
        """Key of the model used when a text request names none."""

        config = await self.config_provider.get_config()
        return self.catalog.resolve_default(ModelCategory.TEXT, config.default_model_key).key


__all__ = ["GenerationResult", "VideoGenerationService"]
