"""Custom Exception Hierarchy for the media orchestration backend.
This module defines a typed exception hierarchy that enables precise error
handling and structured error responses across the application.

Exception Handling Flow:
    1. Provider/service layer raises typed exception
    2. Orchestration facade records usage and re-raises it unchanged
    3. FastAPI route converts it to a structured JSON response
    4. Client receives error envelope with code, message, and context
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class NotFoundError(ServiceError):
    """Raised when a requested resource cannot be located."""

    def __init__(self, message: str, resource: str | None = None):
        self.message = message
        self.resource = resource
        super().__init__(self.message)


class ProviderError(ServiceError):
    """Raised when an external provider (AI API) fails.

    ``status_code`` and ``body`` are set when the provider answered with a
    non-2xx HTTP response; ``stage`` names the orchestration step that failed.
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        original_error: Exception | None = None,
        *,
        status_code: int | None = None,
        body: str | None = None,
        stage: str | None = None,
    ):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        self.status_code = status_code
        self.body = body
        self.stage = stage
        super().__init__(self.message)


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class ConfigurationMissingError(ConfigurationError):
    """Raised when the provider is disabled or has no API key."""


class UnknownModelError(NotFoundError):
    """Raised when a model key is not present in the local catalog."""

    def __init__(self, model_key: str):
        super().__init__(f"Unknown model: {model_key}", resource="model")
        self.model_key = model_key


class UnsupportedOperationError(ValidationError):
    """Raised when a model cannot serve the requested generation mode."""

    def __init__(self, message: str, model_key: str | None = None):
        super().__init__(message, field="model")
        self.model_key = model_key


class ModelNotFoundError(ProviderError):
    """Raised when the provider rejects a locally known model (HTTP 404)."""


class ValidationFailedError(ProviderError):
    """Raised when the provider rejects the input payload (HTTP 422)."""

    def __init__(self, message: str, detail: str, **kwargs):
        super().__init__(message, **kwargs)
        self.detail = detail


class TransportError(ProviderError):
    """Raised when the provider cannot be reached at all."""


class GenerationTimeoutError(ProviderError):
    """Raised when a job does not reach a terminal state within the wait budget."""

    def __init__(self, message: str, job_id: str, waited_ms: int, **kwargs):
        super().__init__(message, **kwargs)
        self.job_id = job_id
        self.waited_ms = waited_ms


class GenerationFailedError(ProviderError):
    """Raised when the provider reports the job as failed."""

    def __init__(self, message: str, job_id: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.job_id = job_id


class GenerationCanceledError(ProviderError):
    """Raised when the provider reports the job as canceled."""

    def __init__(self, message: str, job_id: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.job_id = job_id


class EmptyResultError(ProviderError):
    """Raised when a finished job carries no usable output."""
