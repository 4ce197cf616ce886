"""Top-level orchestration of a single summarization session."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from meeting_summarizer.core.errors import InvalidTransition, SessionReset
from meeting_summarizer.core.models import (
    DeliveryResult,
    EmailDraft,
    Summary,
    Transcript,
)
from meeting_summarizer.ingestion import TranscriptSource
from meeting_summarizer.intelligence import SummarizationService
from meeting_summarizer.sharing import EmailComposer
from meeting_summarizer.transport import EmailDeliveryClient

from .editor import EditSession

LOGGER = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    """User-visible stage of the workflow."""

    IDLE = "idle"
    LOADED = "loaded"
    PROCESSING = "processing"
    SUMMARIZED = "summarized"
    SHARED = "shared"


class SessionController:
    """Wire ingestion, summarization, editing and sharing together.

    One controller owns one session's transcript, summary and edit state.
    ``reset`` returns to ``IDLE`` from any phase; a summary request that
    completes after a reset is discarded.
    """

    def __init__(
        self,
        summarizer: SummarizationService,
        delivery_client: EmailDeliveryClient,
        *,
        source: TranscriptSource | None = None,
        composer: EmailComposer | None = None,
    ) -> None:
        self._summarizer = summarizer
        self._delivery_client = delivery_client
        self._source = source or TranscriptSource()
        self._composer = composer or EmailComposer()
        self._transcript: Transcript | None = None
        self._editor: EditSession | None = None
        self._custom_prompt: str | None = None
        self._processing = False
        self._shared = False
        self._epoch = 0

    @property
    def phase(self) -> SessionPhase:
        if self._editor is not None:
            return SessionPhase.SHARED if self._shared else SessionPhase.SUMMARIZED
        if self._processing:
            return SessionPhase.PROCESSING
        if self._transcript is not None:
            return SessionPhase.LOADED
        return SessionPhase.IDLE

    @property
    def transcript(self) -> Transcript | None:
        return self._transcript

    @property
    def custom_prompt(self) -> str | None:
        return self._custom_prompt

    @property
    def editor(self) -> EditSession:
        """The active edit session."""
        if self._editor is None:
            raise InvalidTransition("edit the summary", self.phase)
        return self._editor

    def load_text(self, text: str, source_name: str | None = None) -> Transcript:
        """Use pasted ``text`` as the session transcript."""
        self._require_loadable()
        return self._set_transcript(self._source.from_text(text, source_name))

    def load_file(
        self,
        raw: bytes | str,
        declared_type: str | None,
        source_name: str | None = None,
    ) -> Transcript:
        """Use an uploaded file as the session transcript."""
        self._require_loadable()
        transcript = self._source.load(raw, declared_type, source_name)
        return self._set_transcript(transcript)

    def generate(self, custom_prompt: str | None = None) -> Summary:
        """Summarize the loaded transcript and open an edit session.

        On failure the session stays ``LOADED`` and the error propagates.

        Raises:
            SessionReset: :meth:`reset` ran while the request was in flight.
        """
        if self.phase is not SessionPhase.LOADED or self._transcript is None:
            raise InvalidTransition("generate a summary", self.phase)

        epoch = self._epoch
        transcript = self._transcript
        self._processing = True
        try:
            summary = self._summarizer.generate(transcript, custom_prompt)
        finally:
            if epoch == self._epoch:
                self._processing = False

        if epoch != self._epoch:
            LOGGER.info("Discarding summary for a session that was reset")
            raise SessionReset()

        self._custom_prompt = custom_prompt
        self._editor = EditSession(summary)
        self._shared = False
        LOGGER.info("Summary ready (%d words)", summary.word_count)
        return summary

    def begin_edit(self) -> None:
        """Start editing the summary."""
        self.editor.begin_edit()
        self._shared = False

    def share(
        self,
        recipients: Sequence[str],
        subject: str,
        message: str = "",
    ) -> DeliveryResult:
        """Email the summary's current text to ``recipients``."""
        if self._editor is None or self._transcript is None:
            raise InvalidTransition("share the summary", self.phase)

        draft = EmailDraft(
            recipients=tuple(recipients), subject=subject, message=message.strip()
        )
        envelope = self._composer.compose(
            draft, self._editor.summary, self._transcript, self._custom_prompt
        )
        result = self._delivery_client.send(envelope)
        self._shared = True
        return result

    def reset(self) -> None:
        """Discard the transcript, summary and any in-flight request."""
        self._epoch += 1
        self._transcript = None
        self._editor = None
        self._custom_prompt = None
        self._processing = False
        self._shared = False
        LOGGER.debug("Session reset")

    def _require_loadable(self) -> None:
        if self.phase not in (SessionPhase.IDLE, SessionPhase.LOADED):
            raise InvalidTransition("load a transcript", self.phase)

    def _set_transcript(self, transcript: Transcript) -> Transcript:
        self._transcript = transcript
        LOGGER.info("Transcript loaded (%d chars)", transcript.length)
        return transcript


__all__ = ["SessionController", "SessionPhase"]
