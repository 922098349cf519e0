"""Video generation HTTP routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from core.auth import UNSPECIFIED_ROLE, AuthContext, require_auth_context
from core.exceptions import (
    ConfigurationError,
    GenerationTimeoutError,
    NotFoundError,
    ProviderError,
    ServiceError,
    ValidationError,
    ValidationFailedError,
)
from core.http.errors import (
    format_configuration_error,
    format_not_found_error,
    format_provider_error,
    format_service_error,
    format_validation_error,
)
from core.providers.replicate import ModelType
from core.pydantic_schemas import ApiResponse, error as api_error, ok as api_ok
from features.usage import InMemoryUsageLedger
from features.video.dependencies import get_usage_ledger, get_video_service
from features.video.schemas import (
    PredictionStatus,
    VideoGenerateRequest,
    VideoGenerateResult,
    VideoModelInfo,
    VideoModelList,
)
from features.video.service import VideoGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/video", tags=["video"])

_PROMPT_PREVIEW_LIMIT = 120


def _prompt_preview(prompt: str) -> str:
    text = (prompt or "").strip().replace("\n", " ")
    return text[:_PROMPT_PREVIEW_LIMIT] + ("..." if len(text) > _PROMPT_PREVIEW_LIMIT else "")


def _classify(exc: ServiceError) -> tuple[int, str, Dict[str, Any]]:
    """Map the service exception taxonomy to an HTTP status, summary and details."""

    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, "Invalid video request", format_validation_error(exc)
    if isinstance(exc, NotFoundError):
        return status.HTTP_400_BAD_REQUEST, "Unknown video model", format_not_found_error(exc)
    if isinstance(exc, ConfigurationError):
        return (
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Video generation is not available",
            format_configuration_error(exc),
        )
    if isinstance(exc, ValidationFailedError):
        return (
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Provider rejected the video request",
            format_provider_error(exc),
        )
    if isinstance(exc, GenerationTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT, "Video generation timed out", format_provider_error(exc)
    if isinstance(exc, ProviderError):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.stage in {"poll", "cancel"}:
            return status.HTTP_404_NOT_FOUND, "Prediction not found", format_provider_error(exc)
        return status.HTTP_502_BAD_GATEWAY, "Video provider error", format_provider_error(exc)
    return status.HTTP_502_BAD_GATEWAY, "Video service error", format_service_error(exc)


def _error_response(exc: ServiceError, endpoint: str) -> JSONResponse:
    code, message, details = _classify(exc)
    if code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning("%s rejected (%s): %s", endpoint, code, exc)
    else:
        logger.error("%s failed (%s): %s", endpoint, code, exc)
    payload = api_error(code=code, message=message, data=details)
    return JSONResponse(status_code=code, content=payload)


@router.get("/models", summary="List available video models", response_model=ApiResponse)
async def list_video_models_endpoint(
    model_type: Optional[ModelType] = Query(default=None, alias="type"),
    auth_context: AuthContext = Depends(require_auth_context),
    service: VideoGenerationService = Depends(get_video_service),
) -> JSONResponse:
    """Return the catalog, optionally filtered by model type, plus the provider status."""

    models = [VideoModelInfo.from_descriptor(model) for model in service.list_models(model_type)]
    listing = VideoModelList(
        enabled=await service.is_enabled(),
        default_model=await service.default_model_key(),
        models=models,
    )
    payload = api_ok(message="Video models retrieved", data=listing.model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.post("/generate", summary="Generate a video", response_model=ApiResponse)
async def generate_video_endpoint(
    request: VideoGenerateRequest,
    auth_context: AuthContext = Depends(require_auth_context),
    service: VideoGenerationService = Depends(get_video_service),
) -> JSONResponse:
    """Generate a video from a prompt or animate an image, waiting for the result."""

    user_id = auth_context["subject_id"]
    subject_type = auth_context.get("subject_type", UNSPECIFIED_ROLE)
    logger.info(
        "POST /video/generate received (user_id=%s, mode=%s, model=%s, prompt='%s', has_image=%s)",
        user_id,
        request.mode,
        request.model,
        _prompt_preview(request.prompt),
        bool(request.image_url),
    )

    try:
        if request.mode == "image-to-video":
            result = await service.generate_from_image(
                request.image_url or "",
                request.prompt,
                model_key=request.model,
                optimize_prompt=request.optimize_prompt,
                user_id=user_id,
                subject_type=subject_type,
                webhook_url=request.webhook_url,
            )
        else:
            result = await service.generate_from_text(
                request.prompt,
                model_key=request.model,
                optimize_prompt=request.optimize_prompt,
                user_id=user_id,
                subject_type=subject_type,
                webhook_url=request.webhook_url,
            )
    except ServiceError as exc:
        return _error_response(exc, "/video/generate")
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.exception("Unexpected error in /video/generate: %s", exc)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error") from exc

    body = VideoGenerateResult(
        result_url=result.result_url,
        prediction_id=result.job.id,
        model=result.model_key,
        status=result.job.status.value,
        predict_time=result.job.predict_time,
    )
    payload = api_ok(message="Video generated", data=body.model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.get(
    "/predictions/{prediction_id}",
    summary="Fetch a prediction's current status",
    response_model=ApiResponse,
)
async def get_prediction_endpoint(
    prediction_id: str,
    auth_context: AuthContext = Depends(require_auth_context),
    service: VideoGenerationService = Depends(get_video_service),
) -> JSONResponse:
    try:
        record = await service.get_job(prediction_id)
    except ServiceError as exc:
        return _error_response(exc, "/video/predictions")
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.exception("Unexpected error fetching prediction %s: %s", prediction_id, exc)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error") from exc

    payload = api_ok(message="Prediction retrieved", data=PredictionStatus.from_record(record).model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.post(
    "/predictions/{prediction_id}/cancel",
    summary="Cancel a running prediction",
    response_model=ApiResponse,
)
async def cancel_prediction_endpoint(
    prediction_id: str,
    auth_context: AuthContext = Depends(require_auth_context),
    service: VideoGenerationService = Depends(get_video_service),
) -> JSONResponse:
    """Request cancellation; predictions that already finished are returned unchanged."""

    logger.info("Cancel requested for prediction %s by %s", prediction_id, auth_context["subject_id"])
    try:
        record = await service.cancel_job(prediction_id)
    except ServiceError as exc:
        return _error_response(exc, "/video/predictions/cancel")
    except Exception as exc:  # pragma: no cover - defensive logging
        logger.exception("Unexpected error cancelling prediction %s: %s", prediction_id, exc)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error") from exc

    payload = api_ok(message="Prediction cancellation processed", data=PredictionStatus.from_record(record).model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


def _forbidden_unless_admin(auth_context: AuthContext) -> Optional[JSONResponse]:
    if auth_context.get("subject_type") == "admin":
        return None
    logger.warning("Usage statistics denied for %s", auth_context.get("subject_id"))
    payload = api_error(code=status.HTTP_403_FORBIDDEN, message="Usage statistics require an admin token")
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=payload)


@router.get("/usage", summary="Summarise recorded video generation usage", response_model=ApiResponse)
async def usage_summary_endpoint(
    since: Optional[datetime] = Query(default=None),
    until: Optional[datetime] = Query(default=None),
    auth_context: AuthContext = Depends(require_auth_context),
    ledger: InMemoryUsageLedger = Depends(get_usage_ledger),
) -> JSONResponse:
    """Totals and per-model breakdown for the ledger window; admins only."""

    forbidden = _forbidden_unless_admin(auth_context)
    if forbidden is not None:
        return forbidden

    data = {
        "summary": ledger.summarize(since, until).model_dump(),
        "by_model": [usage.model_dump() for usage in ledger.usage_by_model(since, until)],
    }
    payload = api_ok(message="Usage statistics retrieved", data=data)
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.get("/usage/users", summary="Rank callers by generation cost", response_model=ApiResponse)
async def usage_by_user_endpoint(
    since: Optional[datetime] = Query(default=None),
    until: Optional[datetime] = Query(default=None),
    limit: int = Query(default=10, ge=1, le=100),
    auth_context: AuthContext = Depends(require_auth_context),
    ledger: InMemoryUsageLedger = Depends(get_usage_ledger),
) -> JSONResponse:
    forbidden = _forbidden_unless_admin(auth_context)
    if forbidden is not None:
        return forbidden

    data = [usage.model_dump() for usage in ledger.usage_by_user(since, until, limit=limit)]
    payload = api_ok(message="Usage by user retrieved", data=data)
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.get("/usage/daily", summary="Daily generation usage for charts", response_model=ApiResponse)
async def daily_usage_endpoint(
    days: int = Query(default=30, ge=1, le=365),
    auth_context: AuthContext = Depends(require_auth_context),
    ledger: InMemoryUsageLedger = Depends(get_usage_ledger),
) -> JSONResponse:
    forbidden = _forbidden_unless_admin(auth_context)
    if forbidden is not None:
        return forbidden

    data = [day.model_dump() for day in ledger.daily_usage(days)]
    payload = api_ok(message="Daily usage retrieved", data=data)
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


@router.get("/usage/me", summary="Usage recorded for the calling user", response_model=ApiResponse)
async def my_usage_endpoint(
    since: Optional[datetime] = Query(default=None),
    until: Optional[datetime] = Query(default=None),
    auth_context: AuthContext = Depends(require_auth_context),
    ledger: InMemoryUsageLedger = Depends(get_usage_ledger),
) -> JSONResponse:
    """Available to every authenticated caller, limited to their own entries."""

    stats = ledger.user_usage(auth_context["subject_id"], since, until)
    payload = api_ok(message="Usage statistics retrieved", data=stats.model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


__all__ = ["router"]
