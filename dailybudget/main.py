"""FastAPI application factory."""
from __future__ import annotations

from pathlib import Path
from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from dailybudget.api.v1 import api_router
from dailybudget.config import settings
from dailybudget.utils.exceptions import register_exception_handlers
from dailybudget.utils.logging_config import configure_logging

STATIC_DIR = Path(__file__).resolve().parent / "static"

tags_metadata: List[dict[str, str]] = [
    {"name": "push", "description": "Register push subscriptions and manage reminders."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    configure_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Push reminders for the Daily Budget app.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors(), "message": "Validation failed"},
        )

    register_exception_handlers(app)

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/sw.js", include_in_schema=False)
    def service_worker() -> FileResponse:
        # Served from the root so the worker's scope covers the whole app.
        return FileResponse(
            STATIC_DIR / "sw.js",
            media_type="application/javascript",
            headers={"Cache-Control": "no-cache", "Service-Worker-Allowed": "/"},
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
