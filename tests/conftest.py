"""Test configuration helpers."""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from jose import jwt

# Explicitly opt-in to the async plugins we rely on, even when plugin
# auto-discovery is disabled via ``PYTEST_DISABLE_PLUGIN_AUTOLOAD``.
pytest_plugins = ("anyio", "pytest_asyncio")

# Make ``import core`` and friends work from any working directory.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("MY_AUTH_TOKEN", "test-secret")
os.environ.setdefault("NODE_ENV", "test")


@pytest.fixture
def anyio_backend() -> str:
    """Default AnyIO backend used when tests do not override the fixture."""

    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def suppress_asyncio_debug_logging() -> None:
    """Prevent asyncio debug logs from writing to closed pytest capture streams."""

    logger = logging.getLogger("asyncio")
    if logger.getEffectiveLevel() < logging.INFO:
        logger.setLevel(logging.INFO)


@pytest.fixture(autouse=True)
def clear_replicate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real Replicate credentials out of the test run."""

    for key in (
        "REPLICATE_API_TOKEN",
        "REPLICATE_ENABLED",
        "REPLICATE_DEFAULT_VIDEO_MODEL",
        "REPLICATE_WEBHOOK_SECRET",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(scope="session")
def auth_token_secret() -> str:
    """Return the JWT secret configured for tests."""

    return os.environ["MY_AUTH_TOKEN"]


@pytest.fixture()
def auth_token_factory(auth_token_secret: str) -> Callable[..., str]:
    """Factory producing signed JWTs for authenticated requests."""

    def _factory(
        *,
        subject_id: str | int = 1,
        role: str | None = "admin",
        email: str = "user@example.com",
        expires_delta: timedelta | None = timedelta(hours=1),
        extra_claims: Dict[str, Any] | None = None,
    ) -> str:
        payload: Dict[str, Any] = {"id": subject_id, "email": email}
        if role is not None:
            payload["role"] = role
        if extra_claims:
            payload.update(extra_claims)
        if expires_delta is not None:
            payload["exp"] = datetime.now(timezone.utc) + expires_delta
        return jwt.encode(payload, auth_token_secret, algorithm="HS256")

    return _factory


@pytest.fixture()
def auth_token(auth_token_factory: Callable[..., str]) -> str:
    """Return a default signed JWT for convenience."""

    return auth_token_factory()
