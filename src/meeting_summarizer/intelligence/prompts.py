"""Prompt templates for LLM-driven meeting summaries."""

from __future__ import annotations

from textwrap import dedent

from meeting_summarizer.core.models import SummaryRequest

SYSTEM_PROMPT = (
    "You are an expert meeting summarizer. Your task is to analyze meeting "
    "transcripts and create clear, actionable summaries. Always structure your "
    "response in a professional format that's easy to read and understand."
)


def build_summary_prompt(request: SummaryRequest) -> str:
    """Compose the user prompt for ``request``."""
    template = """
    {instructions}

    Meeting Transcript:
    {transcript}

    Please provide a comprehensive summary based on the instructions above.
    """
    # The transcript is substituted after dedent so its own indentation survives.
    return (
        dedent(template)
        .strip()
        .format(
            instructions=request.instructions,
            transcript=request.transcript.text,
        )
    )


__all__ = ["SYSTEM_PROMPT", "build_summary_prompt"]
