"""Utilities for turning uploads and pasted text into transcripts."""

from __future__ import annotations

import codecs
import logging
import mimetypes
from pathlib import Path

from ..core.errors import InvalidFileType, ReadError
from ..core.models import Transcript

LOGGER = logging.getLogger(__name__)

PLAIN_TEXT = "text/plain"
_DEFAULT_CHARSET = "utf-8"


class TranscriptSource:
    """Validate and decode transcript content."""

    def load(
        self,
        raw: bytes | str,
        declared_type: str | None,
        source_name: str | None = None,
    ) -> Transcript:
        """Return a :class:`Transcript` for plain-text ``raw`` content.

        Raises:
            InvalidFileType: ``declared_type`` is not ``text/plain``.
            ReadError: the bytes cannot be decoded.
        """
        media_type, charset = _parse_content_type(declared_type)
        if media_type != PLAIN_TEXT:
            LOGGER.info("Rejected transcript upload of type %r", declared_type)
            raise InvalidFileType(declared_type)

        if isinstance(raw, str):
            text = raw
        else:
            text = _decode(raw, charset or _DEFAULT_CHARSET)

        transcript = Transcript(text=text, source_name=source_name)
        LOGGER.debug(
            "Loaded transcript %s (%d chars)",
            source_name or "<upload>",
            transcript.length,
        )
        return transcript

    def from_text(self, text: str, source_name: str | None = None) -> Transcript:
        """Wrap pasted text as a transcript."""
        return Transcript(text=text, source_name=source_name)

    def load_path(self, path: Path) -> Transcript:
        """Read a transcript file from disk."""
        if path.suffix.lower() != ".txt":
            raise InvalidFileType(mimetypes.guess_type(path.name)[0])
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise ReadError(f"Failed to read file: {exc}") from exc
        return self.load(payload, PLAIN_TEXT, source_name=path.name)


def _parse_content_type(declared_type: str | None) -> tuple[str, str | None]:
    if not declared_type:
        return "", None
    media_type, _, params = declared_type.partition(";")
    charset: str | None = None
    for param in params.split(";"):
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            charset = value.strip().strip('"')
    return media_type.strip().lower(), charset


def _decode(raw: bytes, charset: str) -> str:
    try:
        codec = codecs.lookup(charset)
    except LookupError as exc:
        raise ReadError(f"Unsupported charset: {charset}") from exc

    if codec.name == "utf-8":
        codec = codecs.lookup("utf-8-sig")
    try:
        return raw.decode(codec.name)
    except UnicodeDecodeError as exc:
        raise ReadError("Failed to read file: content is not valid text") from exc


__all__ = ["PLAIN_TEXT", "TranscriptSource"]
