"""Fixed-interval polling of Replicate predictions."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from config.replicate import defaults as replicate_defaults
from core.exceptions import (
    GenerationCanceledError,
    GenerationFailedError,
    GenerationTimeoutError,
)

from .client import ReplicateClient
from .settings import ReplicateConfigProvider
from .types import JobRecord, JobStatus

logger = logging.getLogger(__name__)

_PROVIDER = replicate_defaults.PROVIDER_NAME

_STATUS_RANK = {
    JobStatus.STARTING: 0,
    JobStatus.PROCESSING: 1,
    JobStatus.SUCCEEDED: 2,
    JobStatus.FAILED: 2,
    JobStatus.CANCELED: 2,
}


class JobPoller:
    """Wait for predictions to finish, or cancel them.

    A local timeout never cancels the remote job: it may still complete and
    be billed, so cancelling is left to the caller.
    """

    def __init__(
        self,
        config_provider: ReplicateConfigProvider,
        client: ReplicateClient | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config_provider = config_provider
        self.client = client or ReplicateClient()
        self._sleep = sleep
        self._clock = clock

    async def get(self, job_id: str) -> JobRecord:
        """Fetch the current provider-side record once."""

        config = await self.config_provider.require_ready()
        return await self.client.get_prediction(job_id, api_key=config.api_key)

    async def await_completion(
        self,
        job_id: str,
        *,
        max_wait_ms: int = replicate_defaults.MAX_WAIT_MS,
        poll_interval_ms: int = replicate_defaults.POLL_INTERVAL_MS,
    ) -> JobRecord:
        """Poll until ``job_id`` reaches a terminal state.

        Returns the succeeded record; failed and canceled jobs raise
        :class:`GenerationFailedError` / :class:`GenerationCanceledError`.
        Raises :class:`GenerationTimeoutError` once ``max_wait_ms`` elapses.
        """

        started = self._clock()
        poll_count = 0
        last_status: JobStatus | None = None

        logger.info("Waiting for Replicate prediction %s", job_id)
        while True:
            poll_count += 1
            record = await self.get(job_id)
            elapsed_ms = int((self._clock() - started) * 1000)
            logger.debug(
                "Poll #%d for %s: status=%s elapsed=%dms",
                poll_count,
                job_id,
                record.status.value,
                elapsed_ms,
            )

            if last_status is not None and _STATUS_RANK[record.status] < _STATUS_RANK[last_status]:
                logger.warning(
                    "Prediction %s reported status %s after %s",
                    job_id,
                    record.status.value,
                    last_status.value,
                )
            last_status = record.status

            if record.status is JobStatus.SUCCEEDED:
                logger.info("Prediction %s succeeded after %d polls", job_id, poll_count)
                return record
            if record.status is JobStatus.FAILED:
                message = record.error or "Video generation failed"
                logger.error("Prediction %s failed: %s", job_id, message)
                raise GenerationFailedError(
                    f"Replicate poll failed: {message}",
                    job_id=job_id,
                    provider=_PROVIDER,
                    stage="poll",
                )
            if record.status is JobStatus.CANCELED:
                raise GenerationCanceledError(
                    f"Replicate poll: prediction {job_id} was canceled",
                    job_id=job_id,
                    provider=_PROVIDER,
                    stage="poll",
                )

            await self._sleep(poll_interval_ms / 1000)
            waited_ms = int((self._clock() - started) * 1000)
            if waited_ms >= max_wait_ms:
                logger.warning("Prediction %s timed out after %d polls", job_id, poll_count)
                raise GenerationTimeoutError(
                    f"Replicate poll: prediction {job_id} did not finish within {max_wait_ms / 1000:g}s",
                    job_id=job_id,
                    waited_ms=waited_ms,
                    provider=_PROVIDER,
                    stage="poll",
                )

    async def cancel(self, job_id: str) -> JobRecord:
        """Request cancellation; already-finished jobs are acknowledged as-is."""

        config = await self.config_provider.require_ready()
        response = await self.client.cancel_prediction(job_id, api_key=config.api_key)
        if response.is_success:
            logger.info("Cancellation requested for prediction %s", job_id)
            return self.client.parse_record(response, stage="cancel")

        current = await self.client.get_prediction(job_id, api_key=config.api_key)
        if current.is_terminal:
            logger.info(
                "Prediction %s already %s; cancel is a no-op",
                job_id,
                current.status.value,
            )
            return current

        self.client.raise_for_error(response, stage="cancel")


__all__ = ["JobPoller"]
