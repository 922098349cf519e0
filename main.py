"""Video orchestration backend - FastAPI application entry point.

Entry points:
    - /health - liveness check
    - /api/v1/video/* - model catalog, generation, prediction status/cancel, usage
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.auth import AuthenticationError
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from core.observability import register_http_request_logging
from core.pydantic_schemas import error as api_error
from core.utils.env import is_production
from features.video.routes import router as video_router

APP_VERSION = "1.0.0"

setup_logging()

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory returning a configured FastAPI instance."""

    app = FastAPI(
        title="Video Orchestration Backend",
        description="Submits, polls and bills generative video jobs on Replicate",
        version=APP_VERSION,
    )

    if is_production():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        # Any localhost port in development
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        """Return a structured 401 envelope for authentication failures."""

        payload = api_error(
            code=exc.code,
            message=exc.message,
            data={"reason": exc.reason} if exc.reason else None,
        )
        return JSONResponse(
            status_code=exc.code,
            content=payload,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        """Configuration problems outside the video routes surface as 503."""

        payload = api_error(
            code=status.HTTP_503_SERVICE_UNAVAILABLE,
            message=str(exc),
            data={"key": exc.key} if getattr(exc, "key", None) else None,
        )
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=payload)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "version": APP_VERSION}

    register_http_request_logging(app)
    app.include_router(video_router)

    logger.info("Application created with video router")
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
