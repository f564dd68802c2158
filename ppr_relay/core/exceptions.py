"""
Custom Exceptions

Application-specific exceptions with HTTP status codes and error codes.
Every exception is terminal for the request that raised it.
"""

from typing import Optional, Any


class RelayException(Exception):
    """
    Base exception for all relay errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        detail: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        super().__init__(self.message)


class ConfigurationError(RelayException):
    """
    Raised when a credential or address needed for delivery is missing.

    The caller only ever sees a generic message; ``detail`` carries the
    missing variable names for the server log.
    """

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(
            message="Server configuration error.",
            status_code=500,
            error_code="configuration_error",
            detail=detail,
        )


class ClientInputError(RelayException):
    """
    Raised when the request body cannot be turned into a submission.
    """

    def __init__(self, message: str, status_code: int = 400, error_code: str = "invalid_input", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code=error_code,
            detail=detail,
        )


class EmptySubmissionError(ClientInputError):
    """
    Raised when the parsed submission has no fields.
    """

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(
            message="No data received",
            error_code="no_data",
            detail=detail,
        )


class MalformedBodyError(ClientInputError):
    """
    Raised when a JSON body does not parse into an object.
    """

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(
            message="Invalid JSON format",
            error_code="invalid_json",
            detail=detail,
        )


class PayloadTooLargeError(ClientInputError):
    """
    Raised when the request body exceeds the configured size limit.
    """

    def __init__(self, limit: int, detail: Optional[Any] = None):
        super().__init__(
            message="Payload too large",
            status_code=413,
            error_code="payload_too_large",
            detail={"limit_bytes": limit, **(detail or {})},
        )


class DeliveryError(RelayException):
    """
    Raised when the mail provider rejects the message, fails, or times out.

    Provider detail stays server-side.
    """

    def __init__(self, detail: Optional[Any] = None):
        super().__init__(
            message="Error sending email.",
            status_code=500,
            error_code="delivery_error",
            detail=detail,
        )
