"""Exception hierarchy shared by every layer of the summarizer.

Callers branch on the exception type, never on its message:

* :class:`ValidationError` - bad input the user can correct (HTTP 400).
* :class:`UpstreamError` - the summarization provider failed (HTTP 502).
* :class:`DeliveryError` - the SMTP relay failed (HTTP 500).
* :class:`SessionError` - an operation was invoked in the wrong state.
"""

from __future__ import annotations

from collections.abc import Sequence


class SummarizerError(RuntimeError):
    """Base class for all application errors."""


class ValidationError(SummarizerError):
    """Raised when user supplied input is malformed or incomplete."""


class InvalidFileType(ValidationError):
    """Raised when an upload is not declared as plain text."""

    def __init__(self, declared_type: str | None) -> None:
        super().__init__("Please upload a .txt file")
        self.declared_type = declared_type


class ReadError(ValidationError):
    """Raised when transcript content cannot be read or decoded."""


class EmptyTranscript(ValidationError):
    """Raised when a transcript holds nothing but whitespace."""

    def __init__(self) -> None:
        super().__init__("Transcript is required")


class NoRecipients(ValidationError):
    """Raised when a share request names no recipients at all."""

    def __init__(self) -> None:
        super().__init__("Recipients are required")


class InvalidAddresses(ValidationError):
    """Raised when none of the supplied recipients is a usable address."""

    def __init__(self, rejected: Sequence[str]) -> None:
        super().__init__("No valid email addresses provided")
        self.rejected = tuple(rejected)


class MissingSubject(ValidationError):
    """Raised when the email subject is blank."""

    def __init__(self) -> None:
        super().__init__("Subject is required")


class MissingSummary(ValidationError):
    """Raised when there is no summary text to share."""

    def __init__(self) -> None:
        super().__init__("Summary is required")


class UpstreamError(SummarizerError):
    """Raised when the summarization provider fails."""


class DeliveryError(SummarizerError):
    """Raised when the SMTP relay refuses or cannot be reached."""


class SessionError(SummarizerError):
    """Raised for operations that are invalid in the current session state."""


class InvalidTransition(SessionError):
    """Raised when an operation is not allowed from the current state."""

    def __init__(self, operation: str, state: object) -> None:
        label = getattr(state, "value", state)
        super().__init__(f"Cannot {operation} while {label}")
        self.operation = operation
        self.state = state


class ConfirmationRequired(SessionError):
    """Raised when discarding unsaved changes needs a decision from the user."""

    def __init__(self) -> None:
        super().__init__("You have unsaved changes. Confirm before cancelling.")


class InvalidCancelToken(SessionError):
    """Raised when a cancel confirmation token is unknown or stale."""

    def __init__(self) -> None:
        super().__init__("Cancel request expired; request it again")


class SessionReset(SessionError):
    """Raised when the session was reset while a request was in flight."""

    def __init__(self) -> None:
        super().__init__("Session was reset; result discarded")


__all__ = [
    "ConfirmationRequired",
    "DeliveryError",
    "EmptyTranscript",
    "InvalidAddresses",
    "InvalidCancelToken",
    "InvalidFileType",
    "InvalidTransition",
    "MissingSubject",
    "MissingSummary",
    "NoRecipients",
    "ReadError",
    "SessionError",
    "SessionReset",
    "SummarizerError",
    "UpstreamError",
    "ValidationError",
]
