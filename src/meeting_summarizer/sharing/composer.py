"""Validate share requests and assemble outbound summary emails."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from meeting_summarizer.core.errors import (
    InvalidAddresses,
    MissingSubject,
    MissingSummary,
    NoRecipients,
)
from meeting_summarizer.core.models import (
    EmailDraft,
    EmailEnvelope,
    Summary,
    Transcript,
)

LOGGER = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SEPARATOR = "---"
HEADING = "MEETING SUMMARY"
FOOTER = "This summary was generated using AI Meeting Summarizer."
HTML_LINE_BREAK = "<br>"


def is_valid_address(candidate: str) -> bool:
    """Return ``True`` for addresses shaped like ``local@domain.tld``."""
    return EMAIL_PATTERN.fullmatch(candidate) is not None


def filter_recipients(candidates: Iterable[str]) -> tuple[str, ...]:
    """Keep valid addresses in their original order, dropping duplicates."""
    accepted: list[str] = []
    for candidate in candidates:
        if not is_valid_address(candidate):
            LOGGER.debug("Dropping invalid recipient %r", candidate)
            continue
        if candidate not in accepted:
            accepted.append(candidate)
    return tuple(accepted)


def render_text_body(
    message: str,
    summary_text: str,
    transcript_length: int,
    custom_prompt: str | None = None,
) -> str:
    """Assemble the plain-text body in its fixed section order."""
    instructions_line = ""
    if custom_prompt and custom_prompt.strip():
        instructions_line = f"\nSummary Instructions: {custom_prompt}"
    body = (
        f"{message}\n"
        "\n"
        f"{SEPARATOR}\n"
        "\n"
        f"{HEADING}\n"
        f"{instructions_line}\n"
        f"Generated from {transcript_length} character transcript\n"
        "\n"
        f"{summary_text}\n"
        "\n"
        f"{SEPARATOR}\n"
        "\n"
        f"{FOOTER}"
    )
    return body.strip()


def render_html_body(text_body: str) -> str:
    """Convert a text body to HTML by turning newlines into line breaks."""
    return text_body.replace("\n", HTML_LINE_BREAK)


def compose_envelope(
    draft: EmailDraft,
    summary_text: str,
    transcript_length: int,
    custom_prompt: str | None = None,
) -> EmailEnvelope:
    """Validate ``draft`` and build the envelope to deliver.

    Checks run in a fixed order: recipients present, subject, summary text,
    then address filtering.

    Raises:
        NoRecipients: ``draft.recipients`` is empty.
        MissingSubject: the subject is blank.
        MissingSummary: the summary text is blank.
        InvalidAddresses: no recipient survives address validation.
    """
    if not draft.recipients:
        raise NoRecipients()
    if not draft.subject.strip():
        raise MissingSubject()
    if not summary_text.strip():
        raise MissingSummary()

    recipients = filter_recipients(draft.recipients)
    if not recipients:
        raise InvalidAddresses(draft.recipients)

    text_body = render_text_body(
        draft.message, summary_text, transcript_length, custom_prompt
    )
    LOGGER.debug(
        "Composed email for %d of %d recipient(s) (%d chars)",
        len(recipients),
        len(draft.recipients),
        len(text_body),
    )
    return EmailEnvelope(
        to=recipients,
        subject=draft.subject.strip(),
        text_body=text_body,
        html_body=render_html_body(text_body),
    )


class EmailComposer:
    """Build envelopes from session objects."""

    def compose(
        self,
        draft: EmailDraft,
        summary: Summary,
        transcript: Transcript,
        custom_prompt: str | None = None,
    ) -> EmailEnvelope:
        """Compose an envelope for the summary's current text."""
        return compose_envelope(
            draft, summary.current_text, transcript.length, custom_prompt
        )


__all__ = [
    "EMAIL_PATTERN",
    "EmailComposer",
    "compose_envelope",
    "filter_recipients",
    "is_valid_address",
    "render_html_body",
    "render_text_body",
]
