"""Delivery strategies for composed summary emails."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from meeting_summarizer.core.config import SmtpSettings
from meeting_summarizer.core.errors import DeliveryError
from meeting_summarizer.core.models import (
    DeliveryMode,
    DeliveryResult,
    EmailEnvelope,
)

from .smtp_client import OutgoingMessage, SmtpClient, SmtpError

LOGGER = logging.getLogger(__name__)


class EmailDeliveryClient(Protocol):
    """Send an envelope and report the outcome."""

    @property
    def mode(self) -> DeliveryMode:
        """The delivery mode this client implements."""
        raise NotImplementedError

    def send(self, envelope: EmailEnvelope) -> DeliveryResult:
        """Deliver ``envelope``; raise :class:`DeliveryError` on failure."""
        raise NotImplementedError


def _plural(count: int) -> str:
    return "recipient" if count == 1 else "recipients"


class DemoDeliveryClient:
    """Return a preview instead of sending anything."""

    mode = DeliveryMode.DEMO

    def send(self, envelope: EmailEnvelope) -> DeliveryResult:
        count = len(envelope.to)
        LOGGER.info("Demo mode: email preview generated for %d recipient(s)", count)
        return DeliveryResult(
            mode=self.mode,
            message=(
                f"Demo Mode: Email preview generated for {count} {_plural(count)}"
            ),
            recipients=envelope.to,
            accepted=count,
            preview=envelope,
        )


class SmtpDeliveryClient:
    """Submit envelopes to the configured SMTP relay, once, without retry."""

    mode = DeliveryMode.LIVE

    def __init__(
        self,
        settings: SmtpSettings,
        *,
        client_factory: Callable[[SmtpSettings], SmtpClient] = SmtpClient,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory

    def send(self, envelope: EmailEnvelope) -> DeliveryResult:
        message = OutgoingMessage(
            to=envelope.to,
            subject=envelope.subject,
            text_body=envelope.text_body,
            html_body=envelope.html_body,
        )
        try:
            with self._client_factory(self._settings) as client:
                refused = client.send(message)
        except SmtpError as exc:
            raise DeliveryError(str(exc)) from exc

        accepted = tuple(address for address in envelope.to if address not in refused)
        count = len(accepted)
        return DeliveryResult(
            mode=self.mode,
            message=f"Summary shared with {count} {_plural(count)}.",
            recipients=accepted,
            accepted=count,
        )


def build_delivery_client(settings: SmtpSettings) -> EmailDeliveryClient:
    """Pick live delivery when the relay is fully configured, else demo."""
    if settings.is_configured:
        LOGGER.info("Email delivery via SMTP relay %s", settings.host)
        return SmtpDeliveryClient(settings)
    LOGGER.info("SMTP relay not configured; email sharing runs in demo mode")
    return DemoDeliveryClient()


__all__ = [
    "DemoDeliveryClient",
    "EmailDeliveryClient",
    "SmtpDeliveryClient",
    "build_delivery_client",
]
