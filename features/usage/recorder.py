"""Usage recording for orchestration calls."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from config.replicate import defaults as replicate_defaults

from .repository import UsageLedger
from .schemas import UsageEntry

logger = logging.getLogger(__name__)


class UsageRecorder:
    """Append usage rows to the ledger without ever failing the caller.

    Successful calls are billed at the model's cost per run; failed calls are
    recorded at zero cost with the failing stage's message.
    """

    def __init__(
        self,
        ledger: UsageLedger,
        *,
        provider: str = replicate_defaults.PROVIDER_NAME,
        request_kind: str = replicate_defaults.REQUEST_KIND_VIDEO,
    ):
        self.ledger = ledger
        self.provider = provider
        self.request_kind = request_kind

    async def record(self, entry: UsageEntry) -> None:
        try:
            await self.ledger.append(entry)
        except Exception as exc:  # ledger failures must not mask the generation outcome
            logger.error(
                "Failed to append usage entry (model=%s, success=%s): %s",
                entry.model_id,
                entry.success,
                exc,
                exc_info=True,
            )

    async def record_success(
        self,
        *,
        model_id: str,
        cost_usd: float,
        response_time_ms: int,
        user_id: str | None = None,
        subject_type: str = "admin",
        metadata: Mapping[str, Any] | None = None,
    ) -> UsageEntry:
        entry = UsageEntry(
            user_id=user_id,
            subject_type=subject_type,
            request_kind=self.request_kind,
            model_id=model_id,
            provider=self.provider,
            cost_usd=cost_usd,
            response_time_ms=response_time_ms,
            success=True,
            metadata=dict(metadata or {}),
        )
        await self.record(entry)
        return entry

    async def record_failure(
        self,
        *,
        model_id: str,
        error_message: str,
        response_time_ms: int,
        user_id: str | None = None,
        subject_type: str = "admin",
        metadata: Mapping[str, Any] | None = None,
    ) -> UsageEntry:
        entry = UsageEntry(
            user_id=user_id,
            subject_type=subject_type,
            request_kind=self.request_kind,
            model_id=model_id,
            provider=self.provider,
            cost_usd=0.0,
            response_time_ms=response_time_ms,
            success=False,
            error_message=error_message,
            metadata=dict(metadata or {}),
        )
        await self.record(entry)
        return entry


__all__ = ["UsageRecorder"]
