"""
Health Check API Endpoints

Provides health and readiness endpoints for:
- Load balancer / hosting platform health checks
- Monitoring systems
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ppr_relay import __version__
from ppr_relay.config import Settings
from ppr_relay.dependencies import get_app_settings
from ppr_relay.schemas.common import ReadinessResponse

router = APIRouter()


@router.get(
    "/health",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="""
    Liveness check for the hosting platform.

    Always returns HTTP 200 with body `OK` while the process is running,
    whether or not mail credentials are configured.
    """,
)
async def health_check():
    """
    Report that the process is alive.

    Returns:
        str: ``OK``
    """
    return "OK"


@router.get(
    "/readiness",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="""
    Returns HTTP 200 when the service can relay submissions and
    HTTP 503 when required configuration is missing.
    """,
    responses={
        200: {"description": "Ready to relay submissions"},
        503: {"description": "Configuration incomplete"},
    }
)
async def readiness_check(settings: Settings = Depends(get_app_settings)):
    """
    Check if the service can relay submissions.

    Returns:
        ReadinessResponse: Readiness status
    """
    ready = settings.is_complete
    body = ReadinessResponse(
        status="ready" if ready else "not_ready",
        version=__version__,
        environment=settings.APP_ENV,
        components={
            "configuration": "complete" if ready else "incomplete",
            "mail_transport": settings.MAIL_TRANSPORT,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )
