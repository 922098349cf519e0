"""Shared fakes for the Replicate orchestration tests."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from core.providers.replicate import (
    ReplicateClient,
    ReplicateConfigProvider,
    ReplicateSettings,
    StaticSettingsSource,
)

BASE_URL = "https://replicate.test/v1"


class FakeClock:
    """Monotonic clock advanced explicitly by the test (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSleep:
    """Async sleep that records requested delays and advances a fake clock."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.advance(seconds)


class RecordingTransport:
    """``httpx.MockTransport`` handler that records requests and replays responses."""

    def __init__(self, responses: List[httpx.Response] | Callable[[httpx.Request], httpx.Response]):
        self._responses = responses
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self._responses):
            return self._responses(request)
        return self._responses.pop(0)

    def json_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests if request.content]


def _prediction(
    prediction_id: str = "pred-1",
    status: str = "starting",
    output: Any = None,
    error: str | None = None,
    **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": prediction_id,
        "status": status,
        "output": output,
        "error": error,
        "created_at": "2026-01-01T00:00:00Z",
    }
    payload.update(extra)
    return payload


@pytest.fixture
def prediction_payload() -> Callable[..., Dict[str, Any]]:
    return _prediction


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_sleep(fake_clock: FakeClock) -> FakeSleep:
    return FakeSleep(fake_clock)


@pytest.fixture
def ready_settings() -> ReplicateSettings:
    return ReplicateSettings(api_key="r8_test", enabled=True)


@pytest.fixture
def config_provider(ready_settings: ReplicateSettings) -> ReplicateConfigProvider:
    return ReplicateConfigProvider(StaticSettingsSource(ready_settings))


@pytest.fixture
def client_factory() -> Callable[[RecordingTransport], ReplicateClient]:
    def _factory(handler: RecordingTransport) -> ReplicateClient:
        return ReplicateClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))

    return _factory
