"""Fixtures wiring the video service to a scripted Replicate transport."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx
import pytest

from core.providers.replicate import (
    JobPoller,
    JobSubmitter,
    ReplicateClient,
    ReplicateConfigProvider,
    ReplicateSettings,
    StaticSettingsSource,
)
from features.usage import InMemoryUsageLedger, UsageRecorder
from features.video.service import VideoGenerationService


class ScriptedReplicate:
    """Answers submit with ``submit_response`` and polls with ``poll_responses`` in order."""

    def __init__(self, submit_response: httpx.Response, poll_responses: List[httpx.Response] | None = None):
        self.submit_response = submit_response
        self.poll_responses = list(poll_responses or [])
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST" and request.url.path.endswith("/predictions"):
            return self.submit_response
        if len(self.poll_responses) > 1:
            return self.poll_responses.pop(0)
        return self.poll_responses[0]


def job(status: str, output: Any = None, error: str | None = None, job_id: str = "pred-1") -> httpx.Response:
    payload: Dict[str, Any] = {"id": job_id, "status": status, "output": output, "error": error}
    if status == "succeeded":
        payload["metrics"] = {"predict_time": 12.5}
    return httpx.Response(200 if status != "starting" else 201, json=payload)


class FakeTime:
    """Shared fake monotonic clock; ``sleep`` advances it instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def job_response() -> Callable[..., httpx.Response]:
    return job


@pytest.fixture
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture
def ledger() -> InMemoryUsageLedger:
    return InMemoryUsageLedger()


@pytest.fixture
def replicate_settings() -> ReplicateSettings:
    return ReplicateSettings(api_key="r8_test", enabled=True)


@pytest.fixture
def build_service(ledger, replicate_settings, fake_time) -> Callable[..., VideoGenerationService]:
    def _build(
        script: ScriptedReplicate,
        *,
        sleep: Callable[[float], Any] | None = None,
        max_wait_ms: int = 60_000,
        ledger_override: Any = None,
        settings: ReplicateSettings | None = None,
    ) -> VideoGenerationService:
        config_provider = ReplicateConfigProvider(StaticSettingsSource(settings or replicate_settings))
        client = ReplicateClient(base_url="https://replicate.test/v1", transport=httpx.MockTransport(script))
        return VideoGenerationService(
            config_provider,
            UsageRecorder(ledger_override or ledger),
            submitter=JobSubmitter(config_provider, client=client),
            poller=JobPoller(config_provider, client=client, sleep=sleep or fake_time.sleep, clock=fake_time.clock),
            max_wait_ms=max_wait_ms,
            poll_interval_ms=1000,
        )

    return _build


@pytest.fixture
def scripted() -> type[ScriptedReplicate]:
    return ScriptedReplicate
