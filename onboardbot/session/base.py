"""Session contract shared by the live and offline backends."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable


class SessionError(RuntimeError):
    """Raised when the chat backend fails to answer a prompt."""


class SessionTimeout(SessionError):
    """Raised when a prompt does not complete within the configured timeout."""


@dataclass(frozen=True)
class SessionReply:
    """Single reply to a prompt."""

    message: str


@runtime_checkable
class Session(Protocol):
    """Request/response channel to the language model and its MCP servers."""

    async def send_and_wait(self, prompt: str) -> SessionReply:
        """Send ``prompt`` and return the complete reply."""

    async def close(self) -> None:
        """Release backend resources."""


class BoundedSession:
    """Applies a per-call timeout to a session that answers prompts without queueing."""

    def __init__(self, inner: Session, timeout: float) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.inner = inner
        self.timeout = timeout

    async def send_and_wait(self, prompt: str) -> SessionReply:
        try:
            return await asyncio.wait_for(self.inner.send_and_wait(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise SessionTimeout(f"No reply within {self.timeout:g}s") from exc

    async def close(self) -> None:
        await self.inner.close()


def with_timeout(session: Session, timeout: Optional[float]) -> Session:
    """Wrap ``session`` in a :class:`BoundedSession` when a timeout is set."""
    if not timeout:
        return session
    return BoundedSession(session, timeout)


# Construction outcomes. The caller decides what to do with each one.


@dataclass(frozen=True)
class SessionReady:
    session: Session


@dataclass(frozen=True)
class BackendUnavailable:
    """The backend library is not installed."""

    reason: str


@dataclass(frozen=True)
class BackendError:
    """The backend library is present but the session could not be created."""

    error: Exception


SessionOutcome = Union[SessionReady, BackendUnavailable, BackendError]


__all__ = [
    "BackendError",
    "BackendUnavailable",
    "BoundedSession",
    "Session",
    "SessionError",
    "SessionOutcome",
    "SessionReady",
    "SessionReply",
    "SessionTimeout",
    "with_timeout",
]
