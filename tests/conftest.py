import asyncio

import pytest
from fastapi.testclient import TestClient

from ppr_relay.config import Settings
from ppr_relay.main import create_app
from ppr_relay.schemas.mail import MailResult


COMPLETE_CONFIG = {
    "EMAIL_USER": "sender@example.com",
    "EMAIL_PASS": "app-password",
    "DESTINATION_EMAIL": "ppr@example.com",
    "RESEND_API_KEY": "re_test_key",
}


class FakeMailer:
    """Records every message and answers with a canned result."""

    name = "fake"

    def __init__(self, result=None, delay=0.0, error=None):
        self.result = result or MailResult(success=True, message_id="msg_123")
        self.delay = delay
        self.error = error
        self.sent = []
        self.closed = False

    async def send(self, message):
        self.sent.append(message)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self):
        self.closed = True


def make_settings(**overrides) -> Settings:
    """Settings independent of the process environment and any .env file."""
    values = {**COMPLETE_CONFIG, "LOG_FORMAT": "text", **overrides}
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(settings, mailer):
    with TestClient(create_app(settings, mailer)) as test_client:
        yield test_client
