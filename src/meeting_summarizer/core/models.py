"""Core domain models used across the application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

DEFAULT_INSTRUCTIONS = (
    "Summarize this meeting transcript in a clear, structured format with key "
    "points, decisions made, and action items."
)


@dataclass(frozen=True, slots=True)
class Transcript:
    """Meeting transcript text as ingested from an upload or a paste."""

    text: str
    source_name: str | None = None

    @property
    def length(self) -> int:
        """Exact character count of the transcript."""
        return len(self.text)


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    """A single summarization request."""

    transcript: Transcript
    custom_prompt: str | None = None

    @property
    def instructions(self) -> str:
        """Custom instructions when provided, otherwise the default ones."""
        if self.custom_prompt and self.custom_prompt.strip():
            return self.custom_prompt.strip()
        return DEFAULT_INSTRUCTIONS


@dataclass(slots=True)
class Summary:
    """Summary text plus the snapshot used for undo and cancel.

    ``is_dirty`` and ``word_count`` are computed on read from the two text
    values and cannot be assigned.
    """

    current_text: str
    original_text: str
    last_saved_at: datetime | None = None

    @classmethod
    def generated(cls, text: str) -> Summary:
        """Return a clean summary for freshly generated ``text``."""
        return cls(current_text=text, original_text=text)

    @property
    def is_dirty(self) -> bool:
        return self.current_text != self.original_text

    @property
    def word_count(self) -> int:
        return count_words(self.current_text)


@dataclass(frozen=True, slots=True)
class EmailDraft:
    """User supplied fields of a share request."""

    recipients: tuple[str, ...]
    subject: str
    message: str = ""


@dataclass(frozen=True, slots=True)
class EmailEnvelope:
    """Fully assembled outbound message."""

    to: tuple[str, ...]
    subject: str
    text_body: str
    html_body: str


class DeliveryMode(str, Enum):
    """How composed emails leave the system."""

    DEMO = "demo"
    LIVE = "live"


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Outcome of handing an envelope to a delivery client."""

    mode: DeliveryMode
    message: str
    recipients: tuple[str, ...]
    accepted: int
    preview: EmailEnvelope | None = field(default=None)

    @property
    def demo(self) -> bool:
        return self.mode is DeliveryMode.DEMO


def count_words(text: str) -> int:
    """Count whitespace-delimited non-empty tokens in ``text``."""
    return len(text.split())


__all__ = [
    "DEFAULT_INSTRUCTIONS",
    "DeliveryMode",
    "DeliveryResult",
    "EmailDraft",
    "EmailEnvelope",
    "Summary",
    "SummaryRequest",
    "Transcript",
    "count_words",
]
