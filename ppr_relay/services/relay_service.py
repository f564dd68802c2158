"""
Relay Service

Business logic for relaying a form submission:
- Submission and configuration checks
- Rendering the submission into an HTML table
- One bounded call to the mail transport
"""

import asyncio
import time
from email.utils import formataddr
from typing import List, Union

from ppr_relay.config import Settings
from ppr_relay.core.exceptions import ConfigurationError, DeliveryError, EmptySubmissionError
from ppr_relay.core.logging import get_logger
from ppr_relay.core.metrics import record_mail_send
from ppr_relay.mail import Mailer
from ppr_relay.schemas.mail import MailResult, OutboundMessage, Submission
from ppr_relay.services.sanitization_service import SanitizationService

logger = get_logger(__name__)

FIRST_NAME_FIELD = "Pilot First Name"
LAST_NAME_FIELD = "Pilot Last Name"
SUBJECT_PREFIX = "New PPR Submission:"
MULTI_VALUE_SEPARATOR = ", "


def format_value(value: Union[str, List[str]]) -> str:
    """Join multi-value fields; pass single values through."""
    if isinstance(value, list):
        return MULTI_VALUE_SEPARATOR.join(value)
    return value


class RelayService:
    """Service turning submissions into emails and handing them to a mailer."""

    def __init__(self, settings: Settings, mailer: Mailer, sanitization: SanitizationService):
        self.settings = settings
        self.mailer = mailer
        self.sanitization = sanitization

    def build_subject(self, submission: Submission) -> str:
        """
        Build the subject line from the pilot's first and last name.

        Missing name parts are left out.
        """
        names = [
            format_value(submission.get(field, ""))
            for field in (FIRST_NAME_FIELD, LAST_NAME_FIELD)
        ]
        return " ".join([SUBJECT_PREFIX] + [name for name in names if name])

    def render_html(self, submission: Submission) -> str:
        """
        Render the submission as an HTML table, one row per field.

        Rows follow the submission's insertion order.
        """
        rows = []
        for key, value in submission.items():
            rows.append(
                "<tr><td><strong>{}</strong></td><td>{}</td></tr>".format(
                    self.sanitization.escape_text(key),
                    self.sanitization.escape_text(format_value(value)),
                )
            )

        return (
            "<h1>New PPR Form Submission</h1>"
            '<table border="1" cellpadding="5" cellspacing="0">'
            + "".join(rows)
            + "</table>"
        )

    def build_message(self, submission: Submission) -> OutboundMessage:
        """
        Build the outbound message for a submission.

        Args:
            submission: Parsed form fields

        Returns:
            OutboundMessage: Message addressed to the destination address
        """
        return OutboundMessage(
            from_address=formataddr((self.settings.SENDER_NAME, self.settings.EMAIL_USER)),
            to_address=self.settings.DESTINATION_EMAIL,
            subject=self.build_subject(submission),
            html=self.render_html(submission),
        )

    async def relay(self, submission: Submission) -> MailResult:
        """
        Relay one submission by email.

        Args:
            submission: Parsed form fields

        Returns:
            MailResult: The successful delivery result

        Raises:
            EmptySubmissionError: If the submission has no fields
            ConfigurationError: If a required credential is missing
            DeliveryError: If the mailer fails or exceeds the timeout
        """
        if not submission:
            logger.warning("Received empty submission")
            raise EmptySubmissionError()

        if not self.settings.is_complete:
            logger.error(
                "Refusing submission: server configuration is incomplete",
                extra={"missing": self.settings.missing_required},
            )
            raise ConfigurationError(detail={"missing": self.settings.missing_required})

        message = self.build_message(submission)

        start_time = time.monotonic()
        try:
            result = await asyncio.wait_for(
                self.mailer.send(message),
                timeout=self.settings.MAIL_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            result = MailResult(
                success=False,
                error=f"Timed out after {self.settings.MAIL_TIMEOUT_SECONDS}s",
            )
        except Exception as e:
            # A transport that raises instead of returning a result is still a failed delivery
            result = MailResult(success=False, error=f"{type(e).__name__}: {e}")
        finally:
            record_mail_send(self.mailer.name, time.monotonic() - start_time)

        if not result.success:
            logger.error(
                f"Error sending email via {self.mailer.name}: {result.error}",
                extra={"subject": message.subject},
            )
            raise DeliveryError(detail={"transport": self.mailer.name, "error": result.error})

        logger.info(
            f"Email sent successfully: {message.subject}",
            extra={"message_id": result.message_id, "fields": len(submission)},
        )
        return result
