"""Edit/save/undo state machine for a generated summary."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from meeting_summarizer.core.errors import (
    ConfirmationRequired,
    InvalidCancelToken,
    InvalidTransition,
)
from meeting_summarizer.core.models import Summary

LOGGER = logging.getLogger(__name__)


class EditState(str, Enum):
    """Whether the summary is being displayed or edited."""

    VIEWING = "viewing"
    EDITING = "editing"


@dataclass(frozen=True, slots=True)
class CancelToken:
    """Opaque handle for a pending cancel that needs confirmation."""

    value: str


class EditSession:
    """Own a :class:`Summary` and apply edit transitions to it.

    The session starts in ``VIEWING``. ``begin_edit`` snapshots the current
    text so that ``undo`` and ``cancel`` roll back to the text present when
    editing began, not to the first generated text.

    Example:
        >>> session = EditSession(Summary.generated("Draft"))
        >>> session.begin_edit()
        >>> session.update_text("Final")
        >>> session.is_dirty
        True
        >>> _ = session.save()
    """

    def __init__(
        self,
        summary: Summary,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Wrap ``summary``; ``clock`` supplies save timestamps."""
        self._summary = summary
        self._state = EditState.VIEWING
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._pending_cancel: str | None = None

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return self._state is EditState.EDITING

    @property
    def summary(self) -> Summary:
        return self._summary

    @property
    def current_text(self) -> str:
        return self._summary.current_text

    @property
    def original_text(self) -> str:
        return self._summary.original_text

    @property
    def is_dirty(self) -> bool:
        return self._summary.is_dirty

    @property
    def word_count(self) -> int:
        return self._summary.word_count

    @property
    def last_saved_at(self) -> datetime | None:
        return self._summary.last_saved_at

    def begin_edit(self) -> None:
        """Enter editing mode, snapshotting the current text."""
        self._require(EditState.VIEWING, "begin editing")
        self._summary.original_text = self._summary.current_text
        self._state = EditState.EDITING
        LOGGER.debug("Editing started (%d words)", self.word_count)

    def update_text(self, new_text: str) -> None:
        """Replace the working text."""
        self._require(EditState.EDITING, "update text")
        self._pending_cancel = None
        self._summary.current_text = new_text

    def undo(self) -> None:
        """Discard unsaved changes but keep editing."""
        self._require(EditState.EDITING, "undo")
        self._pending_cancel = None
        self._summary.current_text = self._summary.original_text

    def save(self) -> datetime:
        """Commit the working text and leave editing mode."""
        self._require(EditState.EDITING, "save")
        self._pending_cancel = None
        saved_at = self._clock()
        self._summary.original_text = self._summary.current_text
        self._summary.last_saved_at = saved_at
        self._state = EditState.VIEWING
        LOGGER.info("Summary saved (%d words)", self.word_count)
        return saved_at

    def cancel(self, confirm: Callable[[], bool] | None = None) -> bool:
        """Leave editing mode, reverting unsaved changes if confirmed.

        Returns ``True`` when the session left editing mode. With unsaved
        changes ``confirm`` is asked first; a ``False`` answer changes
        nothing.

        Raises:
            ConfirmationRequired: there are unsaved changes and no ``confirm``.
        """
        self._require(EditState.EDITING, "cancel")
        if not self.is_dirty:
            self._finish_cancel()
            return True
        if confirm is None:
            raise ConfirmationRequired()
        if not confirm():
            LOGGER.debug("Cancel declined; keeping unsaved changes")
            return False
        self._finish_cancel()
        return True

    def request_cancel(self) -> CancelToken | None:
        """First half of a two-step cancel.

        Cancels immediately and returns ``None`` when nothing is unsaved;
        otherwise returns a token to pass to :meth:`confirm_cancel`.
        """
        self._require(EditState.EDITING, "cancel")
        if not self.is_dirty:
            self._finish_cancel()
            return None
        token = secrets.token_urlsafe(16)
        self._pending_cancel = token
        return CancelToken(token)

    def confirm_cancel(self, token: CancelToken) -> None:
        """Revert unsaved changes for a token issued by :meth:`request_cancel`."""
        self._require(EditState.EDITING, "cancel")
        self._check_token(token)
        self._finish_cancel()

    def dismiss_cancel(self, token: CancelToken) -> None:
        """Drop a pending cancel request and keep editing."""
        self._check_token(token)
        self._pending_cancel = None

    def _check_token(self, token: CancelToken) -> None:
        pending = self._pending_cancel
        if pending is None or not secrets.compare_digest(pending, token.value):
            raise InvalidCancelToken()

    def _finish_cancel(self) -> None:
        self._pending_cancel = None
        self._summary.current_text = self._summary.original_text
        self._state = EditState.VIEWING
        LOGGER.debug("Editing cancelled")

    def _require(self, expected: EditState, operation: str) -> None:
        if self._state is not expected:
            raise InvalidTransition(operation, self._state)


__all__ = ["CancelToken", "EditSession", "EditState"]
