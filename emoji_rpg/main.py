"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException

from .config.dependencies import build_orchestrator
from .config.settings import settings
from .controllers import game, voice
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .pipelines.voice import build_default_table

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _rotating_handler(path_value: str, max_bytes: int, fmt: str) -> RotatingFileHandler:
    log_path = Path(path_value)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _configure_logging() -> None:
    """Route app logs to stdout and file, pipeline and transcripts to their own files."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(_rotating_handler(settings.log_file, 1_000_000, _FORMAT))
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("emoji_rpg.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    pipeline_logger = logging.getLogger("emoji_rpg.pipeline")
    pipeline_logger.handlers.clear()
    pipeline_logger.addHandler(
        _rotating_handler(settings.pipeline_log_file, 500_000, "%(asctime)s | %(levelname)s | %(message)s")
    )
    pipeline_logger.setLevel(logging.INFO)

    transcript_logger = logging.getLogger("emoji_rpg.logs.transcript")
    transcript_logger.handlers.clear()
    transcript_logger.addHandler(
        _rotating_handler(settings.transcript_log_file, 500_000, "%(asctime)s | %(levelname)s | %(message)s")
    )
    transcript_logger.setLevel(logging.INFO)

    noisy_loggers = [
        "botocore",
        "boto3",
        "urllib3",
        "awscrt",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location or 'body'}: {error.get('msg')}")
    return "; ".join(parts)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Voice-controlled emoji RPG backend",
    )
    app.state.fallback_table = build_default_table()

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(voice.router)
    app.include_router(game.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"🎮 {settings.app_name} is running!",
            "version": settings.app_version,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "OK",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request body",
                "details": _format_validation_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        app.state.orchestrator = build_orchestrator(
            settings,
            fallback_table=app.state.fallback_table,
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "emoji_rpg.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
