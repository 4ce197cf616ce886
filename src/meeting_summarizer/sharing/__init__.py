"""Email composition for sharing summaries."""

from .composer import (
    EmailComposer,
    compose_envelope,
    filter_recipients,
    is_valid_address,
)

__all__ = [
    "EmailComposer",
    "compose_envelope",
    "filter_recipients",
    "is_valid_address",
]
