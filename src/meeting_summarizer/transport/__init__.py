"""Transport adapters for outbound email."""

from .delivery import (
    DemoDeliveryClient,
    EmailDeliveryClient,
    SmtpDeliveryClient,
    build_delivery_client,
)
from .smtp_client import OutgoingMessage, SmtpClient, SmtpError

__all__ = [
    "DemoDeliveryClient",
    "EmailDeliveryClient",
    "OutgoingMessage",
    "SmtpClient",
    "SmtpDeliveryClient",
    "SmtpError",
    "build_delivery_client",
]
