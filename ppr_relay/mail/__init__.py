"""
Mail Module

Mail-sending collaborators. Every transport exposes the same contract:
an async ``send(message) -> MailResult`` that reports delivery failures
in the result instead of raising, and an async ``close()``.
"""

from typing import Protocol, runtime_checkable

from ppr_relay.config import Settings
from ppr_relay.mail.resend import ResendMailer
from ppr_relay.mail.smtp import SMTPMailer
from ppr_relay.schemas.mail import MailResult, OutboundMessage


@runtime_checkable
class Mailer(Protocol):
    """Interface implemented by every mail transport."""

    name: str

    async def send(self, message: OutboundMessage) -> MailResult:
        ...

    async def close(self) -> None:
        ...


def create_mailer(settings: Settings) -> Mailer:
    """
    Build the mailer selected by ``MAIL_TRANSPORT``.

    Args:
        settings: Application settings

    Returns:
        Mailer: Resend or SMTP transport
    """
    if settings.MAIL_TRANSPORT == "smtp":
        return SMTPMailer(
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.EMAIL_USER or "",
            password=settings.EMAIL_PASS or "",
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.MAIL_TIMEOUT_SECONDS,
        )

    return ResendMailer(
        api_key=settings.RESEND_API_KEY or "",
        api_url=settings.RESEND_API_URL,
        timeout=settings.MAIL_TIMEOUT_SECONDS,
    )


__all__ = [
    "Mailer",
    "ResendMailer",
    "SMTPMailer",
    "create_mailer",
]
