"""FastAPI application factory for CineCache.

This module creates and configures the FastAPI application with:
- Lifespan management (logging setup, TMDB client shutdown)
- Middleware configuration (CORS, request ID, access logging)
- Exception handlers mapping CineCacheError to the error envelope
- API routers
"""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinecache.catalog import Catalog, build_catalog
from cinecache.config import Settings, get_settings
from cinecache.core.exceptions import CineCacheError
from cinecache.core.logging import (
    bind_request_id,
    clear_request_context,
    configure_logging,
    get_logger,
)
from cinecache.schemas.common import HealthCheckResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging on startup and release the TMDB client on shutdown.

    The catalog itself is built in ``create_app`` so that it exists even when
    the app is driven without lifespan events (e.g. ASGITransport in tests).
    """
    settings: Settings = app.state.settings
    catalog: Catalog = app.state.catalog

    configure_logging(settings)
    startup_logger = get_logger(__name__)

    if not settings.tmdb_api_key.get_secret_value():
        startup_logger.warning("tmdb_api_key_missing")

    startup_logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.app_env.value,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )

    yield

    await catalog.close()
    startup_logger.info(
        "application_shutting_down",
        app_name=settings.app_name,
        cached_entries=len(catalog.cache),
    )


def create_app(
    settings: Settings | None = None, catalog: Catalog | None = None
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing
        catalog: Optional pre-built catalog (tests pass one over a mock transport)

    Returns:
        FastAPI: Configured application instance
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Cached TMDB catalog backend for a movie browser. Carousel lists, "
            "movie details and incrementally loaded reviews, with concurrent "
            "identical requests collapsed into one upstream call."
        ),
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.catalog = catalog if catalog is not None else build_catalog(settings)

    configure_middleware(app, settings)
    configure_exception_handlers(app)
    configure_routes(app)

    return app


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware.

    Args:
        app: The FastAPI application instance
        settings: Application settings
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next: Any) -> Any:
        """Tag every log line of a request with its ID and time the request."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_request_id(request_id)

        request_logger = get_logger("cinecache.request")
        start_time = time.perf_counter()
        request_logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            query=str(request.query_params) or None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            request_logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(exc),
            )
            raise
        else:
            request_logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Args:
        app: The FastAPI application instance
    """
    exception_logger = get_logger("cinecache.exceptions")

    @app.exception_handler(CineCacheError)
    async def cinecache_exception_handler(
        request: Request, exc: CineCacheError
    ) -> JSONResponse:
        """Render a CineCacheError as the standard error envelope."""
        request_id = getattr(request.state, "request_id", None)
        log = (
            exception_logger.error
            if exc.status_code >= 500
            else exception_logger.warning
        )
        log(
            "application_error" if exc.status_code >= 500 else "client_error",
            error_code=exc.code,
            error_message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(request_id=request_id),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions with a consistent error response."""
        request_id = getattr(request.state, "request_id", None)
        exception_logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "request_id": request_id,
                }
            },
        )


def configure_routes(app: FastAPI) -> None:
    """Configure application routes.

    Args:
        app: The FastAPI application instance
    """

    @app.get(
        "/health/live",
        tags=["Health"],
        summary="Liveness probe",
        description="Returns OK if the service is running",
    )
    async def liveness() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(
        "/health/ready",
        response_model=HealthCheckResponse,
        tags=["Health"],
        summary="Readiness probe",
        description="Degraded when no TMDB credential is configured",
    )
    async def readiness(request: Request) -> HealthCheckResponse:
        settings: Settings = request.app.state.settings
        catalog: Catalog = request.app.state.catalog
        has_key = bool(settings.tmdb_api_key.get_secret_value())

        return HealthCheckResponse(
            status="ok" if has_key else "degraded",
            checks={
                "tmdb_credential": "ok" if has_key else "missing",
                "cache_entries": len(catalog.cache),
                "in_flight": catalog.coordinator.in_flight_count(),
            },
        )

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Returns API information",
    )
    async def root(request: Request) -> dict[str, str]:
        settings: Settings = request.app.state.settings
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health/live",
        }

    from cinecache.api.v1.router import router as v1_router

    app.include_router(v1_router, prefix="/api/v1")


# Create the application instance
app = create_app()


def cli() -> None:
    """CLI entry point for running the application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cinecache.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    cli()
