"""HTTP request logging with redaction of credentials and long URLs."""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from fastapi import FastAPI, Request

_PAYLOAD_PREVIEW_LIMIT = 2048
_URL_PREVIEW_LIMIT = 80
_QUIET_PATHS = {"/health"}
_SENSITIVE_KEYS = {
    "api_key",
    "authorization",
    "password",
    "secret",
    "token",
    "webhook_secret",
}
# Data URIs and signed URLs can be very long.
_URL_KEYS = {"image_url", "first_frame_image", "input_image", "webhook_url"}


def _redact(value: Any, *, depth: int = 6) -> Any:
    if depth <= 0:
        return "<max depth reached>"

    if isinstance(value, Mapping):
        redacted: dict[Any, Any] = {}
        for key, item in value.items():
            lowered = str(key).lower()
            if lowered in _SENSITIVE_KEYS:
                redacted[key] = "***"
            elif lowered in _URL_KEYS and isinstance(item, str) and len(item) > _URL_PREVIEW_LIMIT:
                redacted[key] = f"{item[:_URL_PREVIEW_LIMIT]}..."
            else:
                redacted[key] = _redact(item, depth=depth - 1)
        return redacted

    if isinstance(value, (list, tuple)):
        return [_redact(item, depth=depth - 1) for item in value]

    return value


def render_payload_preview(payload: Any) -> str:
    """Return a redacted, length-limited preview for logging."""

    if payload is None:
        return "<none>"

    if isinstance(payload, (bytes, bytearray)):
        if not payload:
            return "<empty>"
        try:
            payload = json.loads(bytes(payload))
        except (UnicodeDecodeError, ValueError):
            return f"<{len(payload)} bytes>"

    if isinstance(payload, str):
        text = payload
    else:
        text = json.dumps(_redact(payload), default=repr, ensure_ascii=False, separators=(",", ":"))

    if len(text) > _PAYLOAD_PREVIEW_LIMIT:
        return f"{text[:_PAYLOAD_PREVIEW_LIMIT]}... ({len(text)} chars)"
    return text


def register_http_request_logging(app: FastAPI, *, logger_name: str = "core.http") -> None:
    """Attach middleware that logs every non-health HTTP request."""

    if getattr(app.state, "_http_request_logging_installed", False):  # pragma: no cover - idempotence
        return

    logger = logging.getLogger(logger_name)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):  # type: ignore[override]
        if request.url.path not in _QUIET_PATHS:
            client = request.client
            client_addr = f"{client.host}:{client.port}" if client else "unknown"
            logger.info("HTTP %s %s from %s", request.method, request.url.path, client_addr)
            if request.method in {"POST", "PUT", "PATCH"}:
                body = await request.body()
                request._body = body  # type: ignore[attr-defined]  # downstream handlers re-read it
                logger.debug("HTTP %s %s body %s", request.method, request.url.path, render_payload_preview(body))

        return await call_next(request)

    app.state._http_request_logging_installed = True


__all__ = ["register_http_request_logging", "render_payload_preview"]
