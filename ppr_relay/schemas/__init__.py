"""
Pydantic Schemas

Request and response models for API validation.
"""

from ppr_relay.schemas.mail import (
    Submission,
    OutboundMessage,
    MailResult,
)
from ppr_relay.schemas.common import (
    MessageResponse,
    ErrorResponse,
    ReadinessResponse,
)

__all__ = [
    "Submission",
    "OutboundMessage",
    "MailResult",
    "MessageResponse",
    "ErrorResponse",
    "ReadinessResponse",
]
