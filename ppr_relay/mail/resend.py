"""
Resend Transport

Delivers outbound messages through the Resend HTTP API using a shared
httpx client. Failures are returned as ``MailResult`` values, never raised.
"""

from typing import Optional

import httpx

from ppr_relay.core.logging import get_logger
from ppr_relay.schemas.mail import MailResult, OutboundMessage

logger = get_logger(__name__)


class ResendMailer:
    """Mailer backed by the Resend emails endpoint."""

    name = "resend"

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(self, message: OutboundMessage) -> MailResult:
        """
        Send one message.

        Args:
            message: Message to deliver

        Returns:
            MailResult: success with the provider's message ID, or the error
        """
        payload = {
            "from": message.from_address,
            "to": [message.to_address],
            "subject": message.subject,
            "html": message.html,
        }

        try:
            response = await self._get_client().post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            return MailResult(success=False, error=f"{type(e).__name__}: {e}")

        if response.status_code >= 400:
            return MailResult(
                success=False,
                error=f"HTTP {response.status_code}: {response.text}",
            )

        # The provider has accepted the message; a malformed reply only loses the ID
        try:
            data = response.json()
        except ValueError:
            data = None
        message_id = data.get("id") if isinstance(data, dict) else None

        logger.debug(f"Resend accepted message {message_id}")
        return MailResult(success=True, message_id=message_id)
