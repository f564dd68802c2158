"""
Common Pydantic schemas used across the application.
"""

from typing import Dict
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Acknowledgment returned by the submission endpoint."""

    message: str = Field(..., description="Human readable outcome")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: str = Field(..., description="ready or not_ready")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment (development/production)")
    components: Dict[str, str] = Field(default_factory=dict, description="Component status")
