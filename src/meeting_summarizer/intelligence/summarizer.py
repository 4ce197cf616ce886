"""Service that turns a transcript into an editable summary."""

from __future__ import annotations

import logging

from meeting_summarizer.core.errors import EmptyTranscript, UpstreamError
from meeting_summarizer.core.models import Summary, SummaryRequest, Transcript

from .llm import LLMClient, LLMError
from .prompts import SYSTEM_PROMPT, build_summary_prompt

LOGGER = logging.getLogger(__name__)


class SummarizationService:
    """Generate meeting summaries with a single LLM call."""

    def __init__(self, llm_client: LLMClient | None) -> None:
        """Prepare the service; ``None`` means no provider is configured."""
        self._llm_client = llm_client

    @property
    def provider_id(self) -> str:
        if self._llm_client is None:
            return "none"
        return self._llm_client.provider_id

    def generate(
        self, transcript: Transcript, custom_prompt: str | None = None
    ) -> Summary:
        """Return a clean :class:`Summary` of ``transcript``.

        Raises:
            EmptyTranscript: the transcript is blank; no request is made.
            UpstreamError: the provider failed or returned nothing.
        """
        if not transcript.text.strip():
            raise EmptyTranscript()
        if self._llm_client is None:
            raise UpstreamError("Summarization provider is not configured")

        request = SummaryRequest(transcript=transcript, custom_prompt=custom_prompt)
        prompt = build_summary_prompt(request)
        LOGGER.info(
            "Requesting summary from %s for %d character transcript",
            self._llm_client.provider_id,
            transcript.length,
        )
        try:
            text = self._llm_client.generate(prompt, system=SYSTEM_PROMPT)
        except LLMError as exc:
            LOGGER.error("Summary generation failed: %s", exc)
            raise UpstreamError(str(exc)) from exc

        if not text.strip():
            raise UpstreamError("Summarization provider returned an empty summary")

        LOGGER.debug("Received summary (%d chars)", len(text))
        return Summary.generated(text)


__all__ = ["SummarizationService"]
