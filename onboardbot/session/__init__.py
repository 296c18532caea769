"""Chat session backends."""

from .base import (
    BackendError,
    BackendUnavailable,
    BoundedSession,
    Session,
    SessionError,
    SessionOutcome,
    SessionReady,
    SessionReply,
    SessionTimeout,
    with_timeout,
)
from .copilot import CopilotSession, open_copilot_session
from .demo import DemoSession

__all__ = [
    "BackendError",
    "BackendUnavailable",
    "BoundedSession",
    "CopilotSession",
    "DemoSession",
    "Session",
    "SessionError",
    "SessionOutcome",
    "SessionReady",
    "SessionReply",
    "SessionTimeout",
    "open_copilot_session",
    "with_timeout",
]
