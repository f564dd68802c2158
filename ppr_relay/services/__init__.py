"""
Services Module

Business logic layer for the application.
"""

from ppr_relay.services.relay_service import RelayService
from ppr_relay.services.sanitization_service import SanitizationService

__all__ = [
    "RelayService",
    "SanitizationService",
]
