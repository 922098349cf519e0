"""Utilities for formatting structured HTTP error responses."""

from __future__ import annotations

from typing import Any, Dict

from core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ProviderError,
    ServiceError,
    ValidationError,
)


def _build_error_payload(
    *,
    error: str,
    message: str,
    context: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": error, "message": message}
    if context:
        payload["context"] = context
    return payload


def _present(values: Dict[str, Any]) -> Dict[str, Any] | None:
    kept = {key: value for key, value in values.items() if value is not None}
    return kept or None


def format_validation_error(exc: ValidationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ValidationError`."""

    return _build_error_payload(
        error="validation_error",
        message=str(exc),
        context=_present(
            {
                "field": getattr(exc, "field", None),
                "model": getattr(exc, "model_key", None),
            }
        ),
    )


def format_not_found_error(exc: NotFoundError) -> Dict[str, Any]:
    """Return a standard payload for :class:`NotFoundError`."""

    return _build_error_payload(
        error="not_found",
        message=str(exc),
        context=_present({"resource": getattr(exc, "resource", None)}),
    )


def format_configuration_error(exc: ConfigurationError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ConfigurationError`."""

    return _build_error_payload(
        error="configuration_error",
        message=str(exc),
        context=_present({"key": getattr(exc, "key", None)}),
    )


def format_provider_error(exc: ProviderError) -> Dict[str, Any]:
    """Return a standard payload for :class:`ProviderError`.

    The context names the failing stage, the upstream status and, for job
    level failures, the prediction id.
    """

    return _build_error_payload(
        error="provider_error",
        message=str(exc),
        context=_present(
            {
                "provider": getattr(exc, "provider", None),
                "stage": getattr(exc, "stage", None),
                "status_code": getattr(exc, "status_code", None),
                "job_id": getattr(exc, "job_id", None),
                "detail": getattr(exc, "detail", None),
            }
        ),
    )


def format_service_error(exc: ServiceError) -> Dict[str, Any]:
    """Return a standard payload for generic service errors."""

    return _build_error_payload(
        error="service_error",
        message=str(exc),
    )


__all__ = [
    "format_configuration_error",
    "format_not_found_error",
    "format_provider_error",
    "format_service_error",
    "format_validation_error",
]
