"""Tests for email composition and recipient validation."""

from __future__ import annotations

import pytest

from meeting_summarizer.core.errors import (
    InvalidAddresses,
    MissingSubject,
    MissingSummary,
    NoRecipients,
)
from meeting_summarizer.core.models import EmailDraft, Summary, Transcript
from meeting_summarizer.sharing.composer import (
    EmailComposer,
    compose_envelope,
    filter_recipients,
    is_valid_address,
)

TRANSCRIPT = Transcript("Alice: Let's ship Friday. Bob: I'll write tests.")


@pytest.mark.parametrize(
    ("address", "expected"),
    [
        ("a@b.com", True),
        ("first.last+tag@sub.example.org", True),
        ("bad", False),
        ("no-tld@example", False),
        ("two@@example.com", False),
        ("a@b@c.com", False),
        ("spaced name@example.com", False),
        ("a@b.com\n", False),
        ("", False),
    ],
)
def test_is_valid_address(address: str, expected: bool) -> None:
    assert is_valid_address(address) is expected


def test_filter_recipients_preserves_order_and_drops_invalid() -> None:
    candidates = ["z@example.com", "bad", "a@example.com", "", "m@example.com"]

    assert filter_recipients(candidates) == (
        "z@example.com",
        "a@example.com",
        "m@example.com",
    )


def test_filter_recipients_collapses_duplicates() -> None:
    assert filter_recipients(["a@b.com", "c@d.com", "a@b.com"]) == (
        "a@b.com",
        "c@d.com",
    )


def test_compose_scenario_body_layout() -> None:
    draft = EmailDraft(
        recipients=("a@b.com", "bad"), subject="Meeting Summary", message="See below"
    )
    summary = Summary.generated("- Ship on Friday\n- Bob writes tests")

    envelope = EmailComposer().compose(draft, summary, TRANSCRIPT)

    assert envelope.to == ("a@b.com",)
    assert envelope.subject == "Meeting Summary"
    assert f"Generated from {len(TRANSCRIPT.text)} character transcript" in (
        envelope.text_body.splitlines()
    )
    assert envelope.text_body == (
        "See below\n"
        "\n"
        "---\n"
        "\n"
        "MEETING SUMMARY\n"
        "\n"
        f"Generated from {TRANSCRIPT.length} character transcript\n"
        "\n"
        "- Ship on Friday\n"
        "- Bob writes tests\n"
        "\n"
        "---\n"
        "\n"
        "This summary was generated using AI Meeting Summarizer."
    )


def test_compose_includes_custom_instructions() -> None:
    draft = EmailDraft(recipients=("a@b.com",), subject="Notes", message="Hi team")

    envelope = compose_envelope(draft, "Summary body", 120, "Focus on risks")

    assert "MEETING SUMMARY\n\nSummary Instructions: Focus on risks\n" in (
        envelope.text_body
    )
    assert "Generated from 120 character transcript" in envelope.text_body


def test_compose_keeps_custom_instructions_as_entered() -> None:
    draft = EmailDraft(recipients=("a@b.com",), subject="Notes", message="Hi team")

    envelope = compose_envelope(draft, "Summary body", 120, "  Focus on risks ")
    assert "Summary Instructions:   Focus on risks \n" in envelope.text_body

    blank = compose_envelope(draft, "Summary body", 120, "   ")
    assert "Summary Instructions" not in blank.text_body


def test_compose_uses_current_text_of_edited_summary() -> None:
    summary = Summary(current_text="Edited text", original_text="Generated text")
    draft = EmailDraft(recipients=("a@b.com",), subject="Notes")

    envelope = EmailComposer().compose(draft, summary, TRANSCRIPT)

    assert "Edited text" in envelope.text_body
    assert "Generated text" not in envelope.text_body
    assert envelope.text_body.startswith("---")


def test_html_body_round_trips_to_text_body() -> None:
    draft = EmailDraft(
        recipients=("a@b.com",), subject="Notes", message="Line one\nLine two"
    )

    envelope = compose_envelope(draft, "Point A\n\nPoint B", 42, "Be brief")

    assert "\n" not in envelope.html_body
    assert envelope.html_body.replace("<br>", "\n") == envelope.text_body


def test_empty_recipient_list_fails_first() -> None:
    draft = EmailDraft(recipients=(), subject="", message="")

    with pytest.raises(NoRecipients):
        compose_envelope(draft, "", 0)


def test_all_invalid_recipients_fail() -> None:
    draft = EmailDraft(recipients=("bad", "also bad@x.com"), subject="Notes")

    with pytest.raises(InvalidAddresses) as excinfo:
        compose_envelope(draft, "Summary", 10)
    assert excinfo.value.rejected == ("bad", "also bad@x.com")


def test_blank_subject_is_rejected_before_address_filtering() -> None:
    draft = EmailDraft(recipients=("bad",), subject="   ")

    with pytest.raises(MissingSubject):
        compose_envelope(draft, "Summary", 10)


def test_blank_summary_is_rejected() -> None:
    draft = EmailDraft(recipients=("a@b.com",), subject="Notes")

    with pytest.raises(MissingSummary):
        compose_envelope(draft, "  \n", 10)
