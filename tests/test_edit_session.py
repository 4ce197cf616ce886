"""Tests for the summary edit session state machine."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from meeting_summarizer.core.errors import (
    ConfirmationRequired,
    InvalidCancelToken,
    InvalidTransition,
)
from meeting_summarizer.core.models import Summary
from meeting_summarizer.session.editor import CancelToken, EditSession, EditState

SAVED_AT = datetime(2025, 10, 26, 12, 0, tzinfo=timezone.utc)


def _session(text: str = "Generated summary") -> EditSession:
    return EditSession(Summary.generated(text), clock=lambda: SAVED_AT)


def _assert_dirty_consistent(session: EditSession) -> None:
    assert session.is_dirty == (session.current_text != session.original_text)


def test_new_session_is_clean_and_viewing() -> None:
    session = _session("one two  three\n four")

    assert session.state is EditState.VIEWING
    assert not session.is_dirty
    assert session.word_count == 4
    assert session.last_saved_at is None


def test_update_text_tracks_dirty_and_word_count() -> None:
    session = _session()
    session.begin_edit()

    session.update_text("  Completely   new text  ")

    assert session.is_dirty
    assert session.word_count == 3
    session.update_text("Generated summary")
    assert not session.is_dirty


def test_save_commits_text_and_returns_to_viewing() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("Edited")

    saved_at = session.save()

    assert saved_at == SAVED_AT
    assert session.last_saved_at == SAVED_AT
    assert session.state is EditState.VIEWING
    assert session.original_text == "Edited"
    assert not session.is_dirty


def test_undo_restores_text_from_latest_edit_cycle() -> None:
    session = _session("v0")
    session.begin_edit()
    session.update_text("v1")
    session.save()

    session.begin_edit()
    session.update_text("v2")
    session.update_text("v3")
    session.undo()

    assert session.current_text == "v1"
    assert session.state is EditState.EDITING
    assert not session.is_dirty


def test_cancel_without_changes_needs_no_confirmation() -> None:
    session = _session()
    session.begin_edit()

    def confirm() -> bool:
        raise AssertionError("confirmation should not be requested")

    assert session.cancel(confirm) is True
    assert session.state is EditState.VIEWING


def test_cancel_declined_keeps_editing_with_unchanged_text() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("Unsaved work")

    assert session.cancel(lambda: False) is False

    assert session.state is EditState.EDITING
    assert session.current_text == "Unsaved work"
    assert session.is_dirty


def test_cancel_confirmed_reverts_changes() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("Unsaved work")

    assert session.cancel(lambda: True) is True

    assert session.state is EditState.VIEWING
    assert session.current_text == "Generated summary"
    assert not session.is_dirty


def test_cancel_with_changes_requires_a_decision() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("Unsaved work")

    with pytest.raises(ConfirmationRequired):
        session.cancel()
    assert session.state is EditState.EDITING


def test_two_phase_cancel() -> None:
    session = _session()
    session.begin_edit()
    assert session.request_cancel() is None
    assert session.state is EditState.VIEWING

    session.begin_edit()
    session.update_text("Unsaved work")
    token = session.request_cancel()
    assert token is not None
    assert session.state is EditState.EDITING

    session.confirm_cancel(token)
    assert session.state is EditState.VIEWING
    assert session.current_text == "Generated summary"


def test_cancel_token_is_invalidated_by_further_edits() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("first")
    token = session.request_cancel()
    assert token is not None

    session.update_text("second")

    with pytest.raises(InvalidCancelToken):
        session.confirm_cancel(token)
    with pytest.raises(InvalidCancelToken):
        session.confirm_cancel(CancelToken("forged"))
    assert session.current_text == "second"


def test_dismissed_cancel_token_cannot_be_confirmed() -> None:
    session = _session()
    session.begin_edit()
    session.update_text("first")
    token = session.request_cancel()
    assert token is not None

    session.dismiss_cancel(token)

    with pytest.raises(InvalidCancelToken):
        session.confirm_cancel(token)
    assert session.is_editing


@pytest.mark.parametrize("operation", ["undo", "save", "cancel", "request_cancel"])
def test_editing_operations_rejected_while_viewing(operation: str) -> None:
    session = _session()

    with pytest.raises(InvalidTransition):
        getattr(session, operation)()


def test_update_text_rejected_while_viewing() -> None:
    session = _session()

    with pytest.raises(InvalidTransition):
        session.update_text("nope")
    assert session.current_text == "Generated summary"


def test_begin_edit_rejected_while_editing() -> None:
    session = _session()
    session.begin_edit()

    with pytest.raises(InvalidTransition):
        session.begin_edit()


def test_dirty_flag_consistent_across_transitions() -> None:
    session = _session("base")
    steps = [
        session.begin_edit,
        lambda: session.update_text("a"),
        lambda: session.update_text("base"),
        lambda: session.update_text("b"),
        session.undo,
        lambda: session.update_text("c"),
        session.save,
        session.begin_edit,
        lambda: session.update_text("d"),
        lambda: session.cancel(lambda: True),
    ]
    for step in steps:
        step()
        _assert_dirty_consistent(session)
    assert session.current_text == "c"


def test_derived_fields_are_read_only() -> None:
    session = _session()

    with pytest.raises(AttributeError):
        session.is_dirty = True  # type: ignore[misc]
    with pytest.raises(AttributeError):
        session.summary.word_count = 10  # type: ignore[misc]
