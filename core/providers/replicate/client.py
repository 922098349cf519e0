"""HTTP client for the Replicate predictions API."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, NoReturn, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from config.replicate import defaults as replicate_defaults
from core.exceptions import (
    ModelNotFoundError,
    ProviderError,
    TransportError,
    ValidationFailedError,
)

from .types import JobRecord

logger = logging.getLogger(__name__)

_PROVIDER = replicate_defaults.PROVIDER_NAME
_BODY_PREVIEW_LIMIT = 500


def _extract_detail(body: str) -> str:
    """Return the ``detail`` field of a JSON error body, or the raw text."""

    try:
        payload = json.loads(body)
    except ValueError:
        return body
    if isinstance(payload, dict) and payload.get("detail"):
        return str(payload["detail"])
    return body


class ReplicateClient:
    """Thin async wrapper around the three prediction endpoints.

    A fresh ``httpx.AsyncClient`` is opened per request; ``transport`` may be
    supplied to route requests through ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        base_url: str = replicate_defaults.API_BASE_URL,
        timeout: float = replicate_defaults.HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        api_key: str,
        stage: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, url, headers=self._headers(api_key), json=json_data)
        except httpx.RequestError as exc:
            logger.error("Replicate %s request failed: %s", stage, exc)
            raise TransportError(
                f"Replicate {stage} request failed: {exc}",
                provider=_PROVIDER,
                original_error=exc,
                stage=stage,
            ) from exc

    def raise_for_error(self, response: httpx.Response, *, stage: str) -> NoReturn:
        body = response.text
        logger.error("Replicate %s error %s: %s", stage, response.status_code, body[:_BODY_PREVIEW_LIMIT])
        raise ProviderError(
            f"Replicate {stage} failed ({response.status_code}): {body[:_BODY_PREVIEW_LIMIT]}",
            provider=_PROVIDER,
            status_code=response.status_code,
            body=body,
            stage=stage,
        )

    def parse_record(self, response: httpx.Response, *, stage: str) -> JobRecord:
        try:
            return JobRecord.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise ProviderError(
                f"Replicate {stage} returned an unexpected payload: {exc}",
                provider=_PROVIDER,
                original_error=exc,
                status_code=response.status_code,
                body=response.text,
                stage=stage,
            ) from exc

    async def create_prediction(
        self,
        provider_model_id: str,
        model_input: Dict[str, Any],
        *,
        api_key: str,
        webhook: str | None = None,
        webhook_events_filter: List[str] | None = None,
    ) -> JobRecord:
        """Create a prediction via the models endpoint (latest model version)."""

        body: Dict[str, Any] = {"input": model_input}
        if webhook:
            body["webhook"] = webhook
        if webhook_events_filter:
            body["webhook_events_filter"] = list(webhook_events_filter)

        logger.info("Creating Replicate prediction for model %s", provider_model_id)
        logger.debug("Replicate request body: %s", json.dumps(body)[:_BODY_PREVIEW_LIMIT])

        response = await self._request(
            "POST",
            f"/models/{provider_model_id}/predictions",
            api_key=api_key,
            stage="submit",
            json_data=body,
        )

        if response.status_code == 404:
            raise ModelNotFoundError(
                f"Replicate submit failed: model '{provider_model_id}' was not found on Replicate",
                provider=_PROVIDER,
                status_code=404,
                body=response.text,
                stage="submit",
            )
        if response.status_code == 422:
            detail = _extract_detail(response.text)
            raise ValidationFailedError(
                f"Replicate submit validation failed: {detail}",
                detail=detail,
                provider=_PROVIDER,
                status_code=422,
                body=response.text,
                stage="submit",
            )
        if not response.is_success:
            self.raise_for_error(response, stage="submit")

        record = self.parse_record(response, stage="submit")
        logger.info("Replicate prediction created: %s (status=%s)", record.id, record.status.value)
        return record

    async def get_prediction(self, prediction_id: str, *, api_key: str) -> JobRecord:
        response = await self._request("GET", f"/predictions/{prediction_id}", api_key=api_key, stage="poll")
        if not response.is_success:
            self.raise_for_error(response, stage="poll")
        return self.parse_record(response, stage="poll")

    async def cancel_prediction(self, prediction_id: str, *, api_key: str) -> httpx.Response:
        """POST the cancel endpoint and hand back the raw response for the caller to judge."""

        return await self._request("POST", f"/predictions/{prediction_id}/cancel", api_key=api_key, stage="cancel")


__all__ = ["ReplicateClient"]
