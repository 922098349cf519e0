"""Tests for the video generation facades."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from core.exceptions import (
    ConfigurationMissingError,
    EmptyResultError,
    GenerationCanceledError,
    GenerationFailedError,
    GenerationTimeoutError,
    ProviderError,
    UnknownModelError,
    UnsupportedOperationError,
    ValidationError,
    ValidationFailedError,
)
from core.providers.replicate import JobStatus, ReplicateSettings


@pytest.mark.asyncio
async def test_text_generation_success_records_billed_entry(build_service, scripted, job_response, ledger) -> None:
    script = scripted(
        job_response("starting"),
        [job_response("processing"), job_response("succeeded", output=["https://cdn/x.mp4"])],
    )
    service = build_service(script)

    result = await service.generate_from_text("sunset", user_id="7")

    assert result.result_url == "https://cdn/x.mp4"
    assert result.job.status is JobStatus.SUCCEEDED
    assert result.model_key == "minimax-video-01"
    assert [request.method for request in script.requests] == ["POST", "GET", "GET"]

    assert len(ledger.entries) == 1
    entry = ledger.entries[0]
    assert entry.success is True
    assert entry.cost_usd == 0.25
    assert entry.model_id == "minimax/video-01"
    assert entry.user_id == "7"
    assert entry.metadata["prediction_id"] == "pred-1"
    assert entry.metadata["prompt"] == "sunset"
    assert entry.metadata["predict_time"] == 12.5


@pytest.mark.asyncio
async def test_provider_validation_failure_is_recorded_and_reraised(build_service, scripted, ledger) -> None:
    script = scripted(httpx.Response(422, json={"detail": "invalid motion_bucket_id"}))
    service = build_service(script)

    with pytest.raises(ValidationFailedError) as exc:
        await service.generate_from_image("https://img/cat.png", model_key="stable-video-diffusion")

    assert "invalid motion_bucket_id" in str(exc.value)
    assert len(ledger.entries) == 1
    entry = ledger.entries[0]
    assert entry.success is False
    assert entry.cost_usd == 0
    assert "invalid motion_bucket_id" in entry.error_message
    assert entry.model_id == "stability-ai/stable-video-diffusion"


@pytest.mark.asyncio
async def test_image_animation_sends_fixed_motion_parameters(build_service, scripted, job_response) -> None:
    script = scripted(job_response("starting"), [job_response("succeeded", output="https://cdn/a.mp4")])
    service = build_service(script)

    result = await service.generate_from_image("https://img/cat.png", "ignored", model_key="animatediff")

    assert result.result_url == "https://cdn/a.mp4"
    assert script.requests[0].url.path == "/v1/models/lucataco/animate-diff/predictions"
    assert b'"motion_bucket_id":127' in script.requests[0].content.replace(b" ", b"")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("submit", "polls", "expected", "stage"),
    [
        (httpx.Response(500, text="boom"), None, ProviderError, "submit"),
        ("starting", [("failed", None, "GPU fell over")], GenerationFailedError, "poll"),
        ("starting", [("canceled", None, None)], GenerationCanceledError, "poll"),
        ("starting", [("succeeded", [], None)], EmptyResultError, "extract"),
        ("starting", [("processing", None, None)], GenerationTimeoutError, "poll"),
    ],
    ids=["submit-error", "job-failed", "job-canceled", "empty-output", "timeout"],
)
async def test_each_failure_stage_records_exactly_one_entry(
    build_service, scripted, job_response, ledger, submit, polls, expected, stage
) -> None:
    submit_response = job_response(submit) if isinstance(submit, str) else submit
    poll_responses = [job_response(status, output=output, error=error) for status, output, error in polls or []]
    service = build_service(scripted(submit_response, poll_responses), max_wait_ms=5000)

    with pytest.raises(expected) as exc:
        await service.generate_from_text("a fox")

    assert exc.value.stage == stage
    assert stage in str(exc.value)
    assert len(ledger.entries) == 1
    assert ledger.entries[0].success is False
    assert ledger.entries[0].cost_usd == 0
    assert f"Replicate {stage}" in ledger.entries[0].error_message


@pytest.mark.asyncio
async def test_image_model_rejected_for_text_generation_without_network(build_service, scripted, job_response, ledger) -> None:
    script = scripted(job_response("starting"))
    service = build_service(script)

    with pytest.raises(UnsupportedOperationError):
        await service.generate_from_text("a fox", model_key="stable-video-diffusion")

    assert script.requests == []
    assert len(ledger.entries) == 1
    assert ledger.entries[0].model_id == "stability-ai/stable-video-diffusion"


@pytest.mark.asyncio
async def test_text_model_rejected_for_image_generation_without_network(build_service, scripted, job_response, ledger) -> None:
    script = scripted(job_response("starting"))
    service = build_service(script)

    with pytest.raises(UnsupportedOperationError):
        await service.generate_from_image("https://img/cat.png", "wave", model_key="cogvideox")

    assert script.requests == []
    assert len(ledger.entries) == 1


@pytest.mark.asyncio
async def test_unknown_model_is_recorded_under_requested_key(build_service, scripted, job_response, ledger) -> None:
    service = build_service(scripted(job_response("starting")))

    with pytest.raises(UnknownModelError):
        await service.generate_from_text("a fox", model_key="nope")

    assert ledger.entries[0].model_id == "nope"
    assert ledger.entries[0].error_message == "Unknown model: nope"


@pytest.mark.asyncio
async def test_missing_image_fails_validation(build_service, scripted, job_response, ledger) -> None:
    script = scripted(job_response("starting"))
    service = build_service(script)

    with pytest.raises(ValidationError) as exc:
        await service.generate_from_image("", "wave")

    assert exc.value.field == "image_url"
    assert script.requests == []
    assert len(ledger.entries) == 1


@pytest.mark.asyncio
async def test_configured_default_model_is_used_when_it_fits(build_service, scripted, job_response) -> None:
    settings = ReplicateSettings(api_key="r8_test", enabled=True, default_model_key="cogvideox")
    text_script = scripted(job_response("starting"), [job_response("succeeded", output="https://cdn/c.mp4")])
    image_script = scripted(job_response("starting"), [job_response("succeeded", output="https://cdn/i.mp4")])

    text_result = await build_service(text_script, settings=settings).generate_from_text("rain")
    image_result = await build_service(image_script, settings=settings).generate_from_image(
        "https://img/cat.png", "wave"
    )

    assert text_result.model_key == "cogvideox"
    assert text_script.requests[0].url.path == "/v1/models/tencent/cogvideox-5b/predictions"
    assert image_result.model_key == "minimax-video-01-live"


@pytest.mark.asyncio
async def test_default_model_key_reports_the_text_default(build_service, scripted, job_response) -> None:
    script = scripted(job_response("starting"))
    configured = ReplicateSettings(api_key="r8_test", enabled=True, default_model_key="cogvideox")
    image_only = ReplicateSettings(api_key="r8_test", enabled=True, default_model_key="animatediff")

    assert await build_service(script, settings=configured).default_model_key() == "cogvideox"
    assert await build_service(script, settings=image_only).default_model_key() == "minimax-video-01"
    assert script.requests == []


@pytest.mark.asyncio
async def test_disabled_provider_fails_before_any_request(build_service, scripted, job_response, ledger) -> None:
    script = scripted(job_response("starting"))
    service = build_service(script, settings=ReplicateSettings(api_key="r8_test", enabled=False))

    with pytest.raises(ConfigurationMissingError):
        await service.generate_from_text("a fox")

    assert script.requests == []
    assert len(ledger.entries) == 1


@pytest.mark.asyncio
async def test_caller_cancellation_is_recorded_once(build_service, scripted, job_response, ledger) -> None:
    sleeping = asyncio.Event()

    async def _park(seconds: float) -> None:
        sleeping.set()
        await asyncio.Event().wait()

    script = scripted(job_response("starting"), [job_response("processing")])
    service = build_service(script, sleep=_park)

    task = asyncio.create_task(service.generate_from_text("a fox"))
    await sleeping.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(ledger.entries) == 1
    assert ledger.entries[0].success is False
    assert ledger.entries[0].error_message == "Generation cancelled by caller"
    assert ledger.entries[0].metadata["prediction_id"] == "pred-1"


@pytest.mark.asyncio
async def test_ledger_failure_does_not_mask_success(build_service, scripted, job_response) -> None:
    broken_ledger = AsyncMock()
    broken_ledger.append.side_effect = RuntimeError("ledger down")
    script = scripted(job_response("starting"), [job_response("succeeded", output="https://cdn/x.mp4")])
    service = build_service(script, ledger_override=broken_ledger)

    result = await service.generate_from_text("sunset")

    assert result.result_url == "https://cdn/x.mp4"
    broken_ledger.append.assert_awaited_once()


@pytest.mark.asyncio
async def test_ledger_failure_does_not_mask_provider_error(build_service, scripted) -> None:
    broken_ledger = AsyncMock()
    broken_ledger.append.side_effect = RuntimeError("ledger down")
    service = build_service(scripted(httpx.Response(500, text="boom")), ledger_override=broken_ledger)

    with pytest.raises(ProviderError) as exc:
        await service.generate_from_text("sunset")

    assert exc.value.status_code == 500
    broken_ledger.append.assert_awaited_once()


def test_list_models_filters_by_type(build_service, scripted, job_response) -> None:
    service = build_service(scripted(job_response("starting")))

    assert len(service.list_models()) == 5
    assert {model.key for model in service.list_models("text-to-video")} == {"minimax-video-01", "cogvideox"}
