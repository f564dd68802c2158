"""
FastAPI Application Entry Point

PPR form relay application with:
- CORS middleware for the separately hosted front-end
- Request logging and Prometheus metrics
- Error handling mapped to the relay's error taxonomy
- Structured logging
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from ppr_relay import __version__
from ppr_relay.api.router import api_router
from ppr_relay.config import Settings, get_settings
from ppr_relay.core.exceptions import MalformedBodyError, RelayException
from ppr_relay.core.logging import get_logger, get_struct_logger, setup_logging
from ppr_relay.core.metrics import active_requests, requests_duration, requests_total
from ppr_relay.mail import Mailer, create_mailer

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Logs startup details and releases the mail transport on shutdown.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Backend server listening on {settings.HOST}:{settings.PORT}")
    logger.info(f"Environment: {settings.APP_ENV}")

    yield

    # Shutdown
    logger.info("Shutting down PPR form relay")
    await app.state.mailer.close()


def create_app(settings: Settings, mailer: Optional[Mailer] = None) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings loaded once at process start
        mailer: Mail transport; built from ``settings`` when omitted

    Returns:
        FastAPI: Configured application
    """
    app = FastAPI(
        title="PPR Form Relay API",
        description="Relays PPR form submissions to a fixed address by email",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.mailer = mailer if mailer is not None else create_mailer(settings)

    # Keep serving health checks even when credentials are missing
    if not settings.is_complete:
        logger.warning(
            "FATAL ERROR: Email environment variables are not set. "
            f"Please set {', '.join(settings.missing_required)}. "
            "Submissions will be refused until they are configured."
        )

    logger.info(f"Mail transport: {app.state.mailer.name}")

    # ===================================
    # Middleware Configuration
    # ===================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    logger.info(f"CORS enabled for origins: {settings.CORS_ORIGINS}")

    if settings.ENABLE_METRICS:
        @app.middleware("http")
        async def metrics_middleware(request: Request, call_next):
            """
            Collect Prometheus metrics for all requests.

            Metrics:
            - requests_total: Total number of requests
            - requests_duration: Request duration histogram
            - active_requests: Number of active requests
            """
            method = request.method

            active_requests.inc()
            start_time = time.perf_counter()
            status_code = 500

            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                duration = time.perf_counter() - start_time
                # Route template, so arbitrary client paths cannot add label sets
                route = request.scope.get("route")
                endpoint = getattr(route, "path", "unmatched")
                requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
                requests_duration.labels(method=method, endpoint=endpoint).observe(duration)
                active_requests.dec()

            return response

    if settings.ENABLE_REQUEST_LOGGING:
        request_logger = get_struct_logger("ppr_relay.requests")

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            """
            Log method, path, status and duration of every request.
            """
            start_time = time.perf_counter()
            response = await call_next(request)
            request_logger.info(
                "request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return response

    # ===================================
    # Exception Handlers
    # ===================================

    @app.exception_handler(RelayException)
    async def relay_exception_handler(request: Request, exc: RelayException):
        """
        Handle relay exceptions.

        Invalid JSON is answered in plain text; everything else as JSON.
        ``exc.detail`` is logged but never returned.
        """
        logger.warning(
            f"Relay exception: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "detail": exc.detail,
                "path": request.url.path,
                "method": request.method,
            }
        )

        if isinstance(exc, MalformedBodyError):
            return PlainTextResponse(exc.message, status_code=exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handle HTTP exceptions.
        """
        logger.warning(
            f"HTTP exception: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "http_error",
                "message": exc.detail,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.
        """
        logger.error(
            f"Unexpected exception: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
            }
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "Internal server error",
            },
        )

    # ===================================
    # Routes
    # ===================================

    app.include_router(api_router)

    if settings.ENABLE_METRICS:
        app.mount("/metrics", make_asgi_app())

    return app


# Settings are read from the environment exactly once, here
settings = get_settings()
setup_logging(settings)
app = create_app(settings)


def run():
    """Console entry point: serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,  # Use our custom logging
    )


if __name__ == "__main__":
    run()
