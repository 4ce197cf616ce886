"""Tests for the demo and live delivery strategies."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from meeting_summarizer.core.config import SmtpSettings
from meeting_summarizer.core.errors import DeliveryError
from meeting_summarizer.core.models import DeliveryMode, EmailEnvelope
from meeting_summarizer.transport import (
    DemoDeliveryClient,
    OutgoingMessage,
    SmtpDeliveryClient,
    SmtpError,
    build_delivery_client,
)

LIVE_SETTINGS = SmtpSettings(
    host="smtp.test",
    username="bot",
    password="secret",
    from_address="bot@example.com",
)


def _envelope(*recipients: str) -> EmailEnvelope:
    return EmailEnvelope(
        to=recipients,
        subject="Meeting Summary",
        text_body="Body",
        html_body="Body",
    )


class FakeSmtpClient:
    """Context-managed stand-in for :class:`SmtpClient`."""

    instances: list[FakeSmtpClient] = []

    def __init__(
        self,
        settings: SmtpSettings,
        *,
        refused: Mapping[str, tuple[int, bytes]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.settings = settings
        self.refused = dict(refused or {})
        self.error = error
        self.sent: list[OutgoingMessage] = []
        self.closed = False
        FakeSmtpClient.instances.append(self)

    def __enter__(self) -> FakeSmtpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.closed = True

    def send(self, message: OutgoingMessage) -> dict[str, tuple[int, bytes]]:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        return self.refused


@pytest.fixture(autouse=True)
def reset_fake_clients() -> None:
    FakeSmtpClient.instances.clear()


def test_demo_client_returns_preview_without_sending() -> None:
    envelope = _envelope("a@example.com", "b@example.com")

    result = DemoDeliveryClient().send(envelope)

    assert result.demo
    assert result.preview is envelope
    assert result.recipients == ("a@example.com", "b@example.com")
    assert result.message == "Demo Mode: Email preview generated for 2 recipients"


def test_demo_message_uses_singular_for_one_recipient() -> None:
    result = DemoDeliveryClient().send(_envelope("a@example.com"))

    assert result.message == "Demo Mode: Email preview generated for 1 recipient"


def test_live_client_sends_once_and_counts_accepted() -> None:
    client = SmtpDeliveryClient(
        LIVE_SETTINGS,
        client_factory=lambda settings: FakeSmtpClient(
            settings, refused={"b@example.com": (550, b"unknown")}
        ),
    )

    result = client.send(_envelope("a@example.com", "b@example.com"))

    assert result.mode is DeliveryMode.LIVE
    assert not result.demo
    assert result.preview is None
    assert result.accepted == 1
    assert result.recipients == ("a@example.com",)
    assert result.message == "Summary shared with 1 recipient."
    (fake,) = FakeSmtpClient.instances
    assert fake.closed
    assert len(fake.sent) == 1
    assert fake.sent[0].html_body == "Body"


def test_live_failure_becomes_delivery_error() -> None:
    client = SmtpDeliveryClient(
        LIVE_SETTINGS,
        client_factory=lambda settings: FakeSmtpClient(
            settings, error=SmtpError("Sender refused")
        ),
    )

    with pytest.raises(DeliveryError, match="Sender refused"):
        client.send(_envelope("a@example.com"))
    assert len(FakeSmtpClient.instances) == 1


def test_build_delivery_client_selects_mode_from_settings() -> None:
    assert isinstance(build_delivery_client(SmtpSettings()), DemoDeliveryClient)
    assert isinstance(
        build_delivery_client(SmtpSettings(host="smtp.test")), DemoDeliveryClient
    )
    assert isinstance(build_delivery_client(LIVE_SETTINGS), SmtpDeliveryClient)
