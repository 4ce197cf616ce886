"""Transcript ingestion components."""

from .transcript import PLAIN_TEXT, TranscriptSource

__all__ = ["PLAIN_TEXT", "TranscriptSource"]
