"""
Dependency Injection

FastAPI dependencies for settings, the mail transport, service
instances, and submission parsing. Settings and mailer live on
``app.state`` so tests can build an app around fakes.
"""

import json
from typing import Any, Dict, List

from fastapi import Depends, Request

from ppr_relay.config import Settings
from ppr_relay.core.exceptions import MalformedBodyError, PayloadTooLargeError
from ppr_relay.mail import Mailer
from ppr_relay.schemas.mail import Submission
from ppr_relay.services.relay_service import RelayService
from ppr_relay.services.sanitization_service import SanitizationService


# ===================================
# Application State Dependencies
# ===================================

def get_app_settings(request: Request) -> Settings:
    """
    Get the settings the application was created with.

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    """
    Get the application's mail transport.

    Returns:
        Mailer: Mail transport
    """
    return request.app.state.mailer


# ===================================
# Service Dependencies
# ===================================

def get_sanitization_service() -> SanitizationService:
    """
    Get sanitization service instance.

    Returns:
        SanitizationService: Sanitization service
    """
    return SanitizationService()


def get_relay_service(
    settings: Settings = Depends(get_app_settings),
    mailer: Mailer = Depends(get_mailer),
    sanitization: SanitizationService = Depends(get_sanitization_service),
) -> RelayService:
    """
    Get relay service instance.

    Args:
        settings: Application settings
        mailer: Mail transport
        sanitization: Sanitization service

    Returns:
        RelayService: Relay service
    """
    return RelayService(settings, mailer, sanitization)


# ===================================
# Submission Parsing
# ===================================

def _as_text(value: Any) -> str:
    """Render a JSON scalar (or nested structure) as cell text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _normalize(data: Dict[str, Any]) -> Submission:
    """Coerce parsed JSON values to text or lists of text."""
    submission: Submission = {}
    for key, value in data.items():
        if isinstance(value, list):
            submission[key] = [_as_text(item) for item in value]
        else:
            submission[key] = _as_text(value)
    return submission


def _group(pairs) -> Submission:
    """Collapse repeated form keys into lists, keeping first-seen order."""
    grouped: Dict[str, List[str]] = {}
    for key, value in pairs:
        grouped.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else values for key, values in grouped.items()}


def _limit_body(request: Request, max_bytes: int) -> Request:
    """
    Wrap ``request`` so reading its body stops once ``max_bytes`` is passed.

    The check runs per received chunk, so chunked uploads without a
    Content-Length are rejected before they are buffered in full.
    """
    received = 0

    async def receive():
        nonlocal received
        message = await request.receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                raise PayloadTooLargeError(max_bytes)
        return message

    return Request(request.scope, receive)


async def read_submission(request: Request, max_bytes: int) -> Submission:
    """
    Parse the request body into a submission.

    JSON bodies must hold an object; URL-encoded and multipart bodies
    may repeat keys, which become lists. Any other content type, or an
    empty body, yields an empty submission.

    Args:
        request: Incoming request
        max_bytes: Largest accepted body

    Returns:
        Submission: Field name to value(s), in body order

    Raises:
        PayloadTooLargeError: If the body exceeds ``max_bytes``
        MalformedBodyError: If a JSON body does not parse into an object
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        raise PayloadTooLargeError(max_bytes)

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    limited = _limit_body(request, max_bytes)

    if content_type == "application/json" or content_type.endswith("+json"):
        body = await limited.body()
        if not body.strip():
            return {}
        try:
            data = await limited.json()
        except ValueError as e:
            raise MalformedBodyError(detail={"error": str(e)})
        if not isinstance(data, dict):
            raise MalformedBodyError(detail={"error": f"expected an object, got {type(data).__name__}"})
        return _normalize(data)

    if content_type in ("application/x-www-form-urlencoded", "multipart/form-data"):
        form = await limited.form()
        pairs = [
            (key, value if isinstance(value, str) else (value.filename or ""))
            for key, value in form.multi_items()
        ]
        await form.close()
        return _group(pairs)

    return {}
