"""SMTP client for sending summary emails through a relay."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meeting_summarizer.core import SmtpSettings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutgoingMessage:
    """Outgoing email with plain and HTML alternatives.

    Attributes:
        to: Recipient email addresses
        subject: Email subject line
        text_body: Plain text body
        html_body: Optional HTML rendering of the same content
    """

    to: tuple[str, ...]
    subject: str
    text_body: str
    html_body: str | None = None


class SmtpError(Exception):
    """Base exception for SMTP operations.

    Raised when SMTP connection, authentication, or sending fails.
    """


class SmtpClient:
    """SMTP client for sending emails.

    Provides context manager interface for automatic connection management.
    Supports implicit TLS (``use_ssl``) and STARTTLS upgrades.

    Example:
        >>> settings = SmtpSettings(host="smtp.example.com", ...)
        >>> with SmtpClient(settings) as client:
        ...     message = OutgoingMessage(to=("user@example.com",), ...)
        ...     refused = client.send(message)
    """

    def __init__(self, settings: SmtpSettings) -> None:
        """Initialize SMTP client with configuration.

        Args:
            settings: SMTP configuration settings
        """
        self._settings = settings
        self._connection: smtplib.SMTP | None = None

    def __enter__(self) -> SmtpClient:
        """Enter context manager, establishing connection."""
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager, closing connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish SMTP connection and authenticate.

        Raises:
            SmtpError: If connection or authentication fails
        """
        if not self._settings.host:
            raise SmtpError("SMTP host not configured")

        LOGGER.info(
            "Attempting SMTP connection to %s:%d",
            self._settings.host,
            self._settings.port,
        )

        try:
            if self._settings.use_ssl:
                LOGGER.debug("Using implicit TLS for SMTP connection")
                self._connection = smtplib.SMTP_SSL(
                    self._settings.host,
                    self._settings.port,
                    timeout=self._settings.timeout_seconds,
                )
            else:
                self._connection = smtplib.SMTP(
                    self._settings.host,
                    self._settings.port,
                    timeout=self._settings.timeout_seconds,
                )
                self._connection.ehlo()
                if self._connection.has_extn("starttls"):
                    LOGGER.debug("Upgrading SMTP connection with STARTTLS")
                    self._connection.starttls()
                    self._connection.ehlo()
                elif self._settings.username and self._settings.password:
                    LOGGER.error(
                        "SMTP server %s does not offer STARTTLS", self._settings.host
                    )
                    self._abort()
                    raise SmtpError("SMTP server does not support STARTTLS")

            if self._settings.username and self._settings.password:
                LOGGER.debug("Authenticating as %s", self._settings.username)
                self._connection.login(
                    self._settings.username,
                    self._settings.password,
                )
                LOGGER.info("SMTP authentication successful")

            LOGGER.info("Connected to SMTP server: %s", self._settings.host)

        except smtplib.SMTPAuthenticationError as exc:
            LOGGER.error("SMTP authentication failed: %s", exc)
            self._abort()
            raise SmtpError(f"SMTP authentication failed: {exc}") from exc
        except smtplib.SMTPConnectError as exc:
            LOGGER.error("SMTP connection failed: %s", exc)
            self._abort()
            raise SmtpError(f"Failed to connect to SMTP server: {exc}") from exc
        except smtplib.SMTPException as exc:
            LOGGER.error("SMTP error: %s", exc)
            self._abort()
            raise SmtpError(f"SMTP error: {exc}") from exc
        except OSError as exc:
            LOGGER.error("Network error connecting to SMTP server: %s", exc)
            self._abort()
            raise SmtpError(f"Network error: {exc}") from exc

    def disconnect(self) -> None:
        """Close SMTP connection gracefully."""
        if self._connection:
            try:
                self._connection.quit()
                LOGGER.debug("SMTP connection closed")
            except (smtplib.SMTPException, OSError) as exc:
                LOGGER.warning("Error closing SMTP connection: %s", exc)
            finally:
                self._connection = None

    def send(self, message: OutgoingMessage) -> dict[str, tuple[int, bytes]]:
        """Send an email message.

        Args:
            message: The email message to send

        Returns:
            Recipients the relay refused, keyed by address. Empty when every
            recipient was accepted.

        Raises:
            SmtpError: If sending fails, every recipient is refused, or the
                client is not connected
        """
        if not self._connection:
            raise SmtpError("Not connected to SMTP server")

        LOGGER.info(
            "Sending email to %d recipient(s): %s", len(message.to), message.subject
        )

        try:
            mime_message = self._build_mime_message(message)
            LOGGER.debug("Email headers: %s", dict(mime_message.items()))
            refused = self._connection.send_message(
                mime_message,
                from_addr=self._settings.from_address,
                to_addrs=list(message.to),
            )
        except smtplib.SMTPRecipientsRefused as exc:
            LOGGER.error("All recipients refused: %s", exc.recipients)
            raise SmtpError(f"All recipients refused: {exc.recipients}") from exc
        except smtplib.SMTPSenderRefused as exc:
            LOGGER.error("Sender refused: %s", exc)
            raise SmtpError(f"Sender refused: {exc}") from exc
        except smtplib.SMTPDataError as exc:
            LOGGER.error("SMTP data error: %s", exc)
            raise SmtpError(f"SMTP data error: {exc}") from exc
        except smtplib.SMTPException as exc:
            LOGGER.error("Failed to send email: %s", exc)
            raise SmtpError(f"Failed to send email: {exc}") from exc
        except OSError as exc:
            LOGGER.error("Network error while sending email: %s", exc)
            raise SmtpError(f"Network error: {exc}") from exc

        if refused:
            LOGGER.warning("Some recipients were refused: %s", sorted(refused))
        return dict(refused)

    def _abort(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None

    def _build_mime_message(self, message: OutgoingMessage) -> MIMEMultipart:
        """Build a multipart/alternative MIME message."""
        mime_msg = MIMEMultipart("alternative")

        from_address = self._settings.from_address or self._settings.username or ""
        if self._settings.from_name:
            from_address = formataddr((self._settings.from_name, from_address))

        mime_msg["From"] = from_address
        mime_msg["To"] = ", ".join(message.to)
        mime_msg["Subject"] = message.subject

        # Plain part first so clients prefer the HTML alternative when present.
        mime_msg.attach(MIMEText(message.text_body, "plain", "utf-8"))
        if message.html_body is not None:
            mime_msg.attach(MIMEText(message.html_body, "html", "utf-8"))

        LOGGER.debug(
            "Built MIME message: From=%s, plain=%d chars, html=%s",
            from_address,
            len(message.text_body),
            "yes" if message.html_body is not None else "no",
        )
        return mime_msg


__all__ = ["OutgoingMessage", "SmtpClient", "SmtpError"]
