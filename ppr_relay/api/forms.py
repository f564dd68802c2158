"""
Form Submission API Endpoints

Receives PPR form submissions and relays them by email.
"""

from fastapi import APIRouter, Depends, Request

from ppr_relay.config import Settings
from ppr_relay.core.exceptions import RelayException
from ppr_relay.core.logging import get_logger
from ppr_relay.core.metrics import record_submission
from ppr_relay.dependencies import get_app_settings, get_relay_service, read_submission
from ppr_relay.schemas.common import ErrorResponse, MessageResponse
from ppr_relay.services.relay_service import RelayService

logger = get_logger(__name__)
router = APIRouter()

# error_code -> submission outcome label
OUTCOMES = {
    "no_data": "empty",
    "invalid_json": "invalid",
    "payload_too_large": "too_large",
    "configuration_error": "misconfigured",
    "delivery_error": "failed",
}


@router.post(
    "/send-ppr-form",
    response_model=MessageResponse,
    summary="Relay a PPR form submission",
    description="""
    Accepts a JSON object or a URL-encoded / multipart form, renders every
    field into an HTML table, and emails it to the configured destination.

    Exactly one delivery attempt is made per accepted request; failures
    are reported to the caller and never retried.
    """,
    responses={
        200: {"description": "Email sent"},
        400: {"model": ErrorResponse, "description": "Empty submission or invalid JSON"},
        413: {"model": ErrorResponse, "description": "Body too large"},
        500: {"model": ErrorResponse, "description": "Configuration or delivery error"},
    }
)
async def send_ppr_form(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    relay_service: RelayService = Depends(get_relay_service),
):
    """
    Relay one form submission.

    Args:
        request: Incoming request carrying the form body
        settings: Application settings
        relay_service: Relay service instance

    Returns:
        MessageResponse: Success acknowledgment
    """
    logger.info("Received PPR form submission")

    try:
        submission = await read_submission(request, settings.max_body_size_bytes)
        await relay_service.relay(submission)
    except RelayException as e:
        record_submission(OUTCOMES.get(e.error_code, "failed"))
        raise

    record_submission("sent")
    return MessageResponse(message="Email sent successfully.")
