"""
Main FastAPI application.

This is the entry point for the API server:
    uvicorn hiring.main:app --reload
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from hiring.core.config import settings
from hiring.core.logging_config import configure_logging
from hiring.db.session import engine
from hiring.errors import AppError, app_error_handler, request_validation_error_handler
from hiring.routers import candidates, health, imports, referrers, sources

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup; dispose of pooled connections on shutdown."""
    logger.info("Starting %s (api prefix %s)", settings.APP_NAME, settings.API_PREFIX)

    yield

    await engine.dispose()
    logger.info("Shutting down %s", settings.APP_NAME)


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        description="Recruitment pipeline API: candidates, sources, referrers and analytics",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(AppError, app_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_error_handler)

    if settings.DEBUG:

        @application.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response

    # Include routers (API endpoints)
    application.include_router(health.router, tags=["Health"])
    application.include_router(candidates.router, prefix=settings.API_PREFIX)
    application.include_router(sources.router, prefix=settings.API_PREFIX)
    application.include_router(referrers.router, prefix=settings.API_PREFIX)
    application.include_router(imports.router, prefix=settings.API_PREFIX)

    return application


app = create_app()
