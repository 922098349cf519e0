"""Opt-in retry wrapper for video generation calls.

The generation facades never retry on their own. Callers that want another
attempt after a transient failure wrap the call here; each attempt is a full
facade call and therefore records its own usage entry.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from core.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_ON: Tuple[Type[BaseException], ...] = (TransportError,)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    retry_on: Tuple[Type[BaseException], ...] = DEFAULT_RETRY_ON,
    wait: wait_base | None = None,
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` is exhausted.

    Only exceptions in ``retry_on`` trigger another attempt; the last error
    is re-raised unchanged.

    Usage:
        result = await with_retry(lambda: service.generate_from_text("a red fox"))
    """

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait or wait_exponential(min=1, max=8),
        retry=retry_if_exception_type(retry_on),
        reraise=True,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise RuntimeError("retry loop exited without a result")  # pragma: no cover


__all__ = ["DEFAULT_RETRY_ON", "with_retry"]
