"""Envelope shared by every JSON response of the HTTP API."""

from __future__ import annotations

from typing import Any, Dict, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")

MessageType = Union[str, Mapping[str, Any]]


class ApiResponse(BaseModel, Generic[T]):
    """``{code, success, message, data, meta}``; ``success`` mirrors ``code < 400``."""

    code: int = Field(..., description="HTTP status mirrored into the body")
    success: bool
    message: MessageType
    data: Optional[T] = None
    meta: Optional[Dict[str, Any]] = None


def api_response(
    *,
    code: int = 200,
    message: MessageType,
    data: Any = None,
    meta: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Build a JSON-ready envelope; datetimes and enums in ``data`` are serialised."""

    envelope = ApiResponse[Any](code=code, success=code < 400, message=message, data=data, meta=meta)
    return envelope.model_dump(mode="json")


def ok(message: str, data: Any = None, meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return api_response(code=200, message=message, data=data, meta=meta)


def error(code: int, message: str, data: Any = None, meta: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Envelope for failures; ``code`` must be an error status."""

    if code < 400:
        raise ValueError("Error responses must use an error HTTP status code (>= 400)")
    return api_response(code=code, message=message, data=data, meta=meta)


__all__ = ["ApiResponse", "api_response", "error", "ok"]
