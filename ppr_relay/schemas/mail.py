"""
Mail-related Pydantic schemas.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


# Field name -> value, or values for repeated fields such as checkboxes.
# Insertion order is the order fields are rendered in.
Submission = Dict[str, Union[str, List[str]]]


class OutboundMessage(BaseModel):
    """Email built from one submission."""

    from_address: str = Field(..., description="Sender, including display name")
    to_address: str = Field(..., description="Recipient address")
    subject: str = Field(..., description="Email subject")
    html: str = Field(..., description="HTML body")

    model_config = {"frozen": True}


class MailResult(BaseModel):
    """Outcome of one mail-send call."""

    success: bool = Field(..., description="Whether the provider accepted the message")
    message_id: Optional[str] = Field(None, description="Provider message ID")
    error: Optional[str] = Field(None, description="Provider error detail")
