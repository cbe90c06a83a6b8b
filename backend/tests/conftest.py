import pytest
from fastapi.testclient import TestClient

from contact_relay.core.errors import DeliveryError
from contact_relay.core.mailer import MessageSender
from contact_relay.core.settings import Settings
from contact_relay.dependencies import get_sender
from contact_relay.main import create_app


class FakeSender(MessageSender):
    """In-memory stand-in for SmtpSender."""

    def __init__(self, message_id="<fake-1@test>", send_error=None, verify_error=None):
        self.message_id = message_id
        self.send_error = send_error
        self.verify_error = verify_error
        self.sent = []
        self.verify_calls = 0

    def verify(self):
        self.verify_calls += 1
        if self.verify_error:
            raise DeliveryError(self.verify_error)

    def send(self, message):
        self.sent.append(message)
        if self.send_error:
            raise self.send_error
        return self.message_id


def make_settings(**overrides):
    values = dict(
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_user="relay@example.com",
        smtp_pass="app-password",
        contact_to="owner@example.com",
        cors_origin="https://site.example.com",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_client(settings, sender, **kwargs):
    app = create_app(settings)
    app.dependency_overrides[get_sender] = lambda: sender
    return TestClient(app, **kwargs)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def client(settings, fake_sender):
    return make_client(settings, fake_sender)
