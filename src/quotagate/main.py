"""
Main FastAPI application entry point.

This module sets up the FastAPI app with all middleware, routes, and lifecycle events.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.quotagate.api import healthz_router, images_router, keys_router, metrics_router
from src.quotagate.config import get_settings, Settings
from src.quotagate.core.exceptions import QuotaGateException, Unauthenticated
from src.quotagate.core.gateway import build_gateway
from src.quotagate.core.metrics import MetricsCollector


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured logging for the application."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
    )

    # Silence the verbose watchfiles logger
    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def create_lifespan_handler(settings: Settings) -> Any:
    """Create a lifespan handler with access to settings."""
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        FastAPI lifespan context manager.

        Builds the metrics collector and the gateway once per process.
        """
        logger = structlog.get_logger(__name__)
        logger.info("Starting QuotaGate service", version=app.version)

        missing = settings.missing_backend_settings()
        if missing:
            logger.warning("Backend settings missing, requests will fail", missing=missing)

        metrics_collector = MetricsCollector()
        app.state.metrics = metrics_collector
        app.state.gateway = build_gateway(settings, metrics_collector)

        try:
            logger.info("QuotaGate service started successfully")
            yield
        finally:
            logger.info("QuotaGate service shutdown complete")

    return lifespan


async def quotagate_exception_handler(request: Request, exc: QuotaGateException) -> JSONResponse:
    """Handle custom QuotaGate exceptions."""
    logger = structlog.get_logger(__name__)
    # A session without a key is a normal first visit
    log = logger.info if isinstance(exc, Unauthenticated) else logger.error
    log(
        "QuotaGate exception occurred",
        error=str(exc),
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": str(exc),
            "details": exc.details,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors in the standard error shape."""
    logger = structlog.get_logger(__name__)
    errors = jsonable_encoder(exc.errors())
    logger.info(
        "Request validation failed",
        path=request.url.path,
        method=request.method,
        error_count=len(errors),
    )

    return JSONResponse(
        status_code=422,
        content={
            "error": "invalid_request",
            "message": "Request body is invalid",
            "details": {"errors": errors},
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger = structlog.get_logger(__name__)
    logger.error(
        "Unexpected exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
        },
    )


async def record_request_metrics(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Record request count and latency per matched route."""
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        metrics = getattr(request.app.state, "metrics", None)
        if metrics is not None:
            route = request.scope.get("route")
            metrics.record_request(
                method=request.method,
                endpoint=getattr(route, "path", "unmatched"),
                status_code=status_code,
                duration_seconds=time.perf_counter() - start,
            )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    This factory function ensures all configuration is applied
    whether running via FastAPI CLI or direct execution.
    """
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)

    app = FastAPI(
        title="QuotaGate",
        description="Quota-gated image generation gateway",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=create_lifespan_handler(settings),
    )
    app.state.settings = settings

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    app.middleware("http")(record_request_metrics)

    app.add_exception_handler(QuotaGateException, quotagate_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(keys_router, tags=["keys"])
    app.include_router(images_router, tags=["images"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(healthz_router, tags=["health"])

    @app.get("/", include_in_schema=False)
    async def root() -> Dict[str, str]:
        """Root endpoint with service information."""
        return {
            "service": "QuotaGate",
            "version": app.version,
            "description": "Quota-gated image generation gateway",
            "docs": "/docs",
        }

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.quotagate.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )
