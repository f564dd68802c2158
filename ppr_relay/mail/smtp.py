"""
SMTP Transport

Delivers outbound messages through an authenticated SMTP relay
(Gmail with an app password by default) using aiosmtplib.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import aiosmtplib

from ppr_relay.core.logging import get_logger
from ppr_relay.schemas.mail import MailResult, OutboundMessage

logger = get_logger(__name__)


class SMTPMailer:
    """Mailer backed by an SMTP relay."""

    name = "smtp"

    def __init__(
        self,
        hostname: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool = True,
        timeout: float = 15.0,
    ):
        self.hostname = hostname
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_mime(self, message: OutboundMessage) -> MIMEMultipart:
        """
        Convert an outbound message into a MIME document.

        Args:
            message: Message to convert

        Returns:
            MIMEMultipart: alternative part holding the HTML body
        """
        mime = MIMEMultipart("alternative")
        mime["From"] = message.from_address
        mime["To"] = message.to_address
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid()
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    async def send(self, message: OutboundMessage) -> MailResult:
        """
        Send one message.

        Returns:
            MailResult: success with the Message-ID header, or the error
        """
        mime = self.build_mime(message)

        try:
            await aiosmtplib.send(
                mime,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                start_tls=not self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            return MailResult(success=False, error=f"{type(e).__name__}: {e}")

        logger.debug(f"SMTP relay {self.hostname} accepted message {mime['Message-ID']}")
        return MailResult(success=True, message_id=mime["Message-ID"])

    async def close(self):
        """Nothing to release; each send opens its own connection."""
        return None
