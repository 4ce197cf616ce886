"""Session state: the summary editor and the workflow controller."""

from .controller import SessionController, SessionPhase
from .editor import CancelToken, EditSession, EditState

__all__ = [
    "CancelToken",
    "EditSession",
    "EditState",
    "SessionController",
    "SessionPhase",
]
