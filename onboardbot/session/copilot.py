"""GitHub Copilot SDK backend for the session contract."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from .base import (
    BackendError,
    BackendUnavailable,
    SessionError,
    SessionOutcome,
    SessionReady,
    SessionReply,
    SessionTimeout,
)

_logger = get_logger("session.copilot")

# Seconds to wait for a timed-out prompt to go idle before the next prompt is sent.
DRAIN_TIMEOUT = 30.0


class CopilotSession:
    """Adapts an event-driven Copilot SDK session to ``send_and_wait``.

    Each prompt registers an event handler, sends the prompt and waits for the
    ``session.idle`` event. The last ``assistant.message`` is the reply; streamed
    deltas are only used when no final message arrives.

    The per-call ``timeout`` starts once the prompt holds the session lock, so
    time spent queued behind other prompts does not count. A prompt that times
    out is aborted and the lock is kept until its ``session.idle`` arrives (or
    ``drain_timeout`` passes), so late events never reach the next prompt.
    """

    def __init__(
        self,
        session: Any,
        client: Any = None,
        *,
        timeout: Optional[float] = None,
        drain_timeout: float = DRAIN_TIMEOUT,
    ) -> None:
        self._session = session
        self._client = client
        self._lock = asyncio.Lock()
        self.timeout = timeout or None
        self.drain_timeout = drain_timeout

    async def send_and_wait(self, prompt: str) -> SessionReply:
        # The SDK delivers events for the whole session, so prompts are serialised.
        async with self._lock:
            return await self._exchange(prompt)

    async def _exchange(self, prompt: str) -> SessionReply:
        messages: List[str] = []
        deltas: List[str] = []
        errors: List[str] = []
        done = asyncio.Event()

        def on_event(event: Any) -> None:
            kind = _event_type(event)
            data = getattr(event, "data", None)
            if kind == "assistant.message":
                content = getattr(data, "content", None)
                if content:
                    messages.append(content)
            elif kind == "assistant.message_delta":
                delta = getattr(data, "delta_content", None)
                if delta:
                    deltas.append(delta)
            elif kind == "session.error":
                errors.append(str(getattr(data, "message", None) or data))
                done.set()
            elif kind == "session.idle":
                done.set()

        unsubscribe = self._session.on(on_event)
        try:
            await self._session.send({"prompt": prompt})
            try:
                await asyncio.wait_for(done.wait(), timeout=self.timeout)
            except asyncio.TimeoutError as exc:
                await self._abandon(done)
                raise SessionTimeout(f"No reply within {self.timeout:g}s") from exc
        finally:
            if callable(unsubscribe):
                unsubscribe()

        if errors:
            raise SessionError(f"Copilot session error: {errors[0]}")
        if messages:
            return SessionReply(message=messages[-1])
        return SessionReply(message="".join(deltas))

    async def _abandon(self, done: asyncio.Event) -> None:
        abort = getattr(self._session, "abort", None)
        if callable(abort):
            try:
                await abort()
            except Exception:
                _logger.debug("Copilot abort failed", exc_info=True)
        try:
            await asyncio.wait_for(done.wait(), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            _logger.warning(
                "Timed-out prompt still busy after %gs; its late reply may be dropped",
                self.drain_timeout,
            )

    async def close(self) -> None:
        try:
            await self._session.destroy()
        finally:
            if self._client is not None:
                await self._client.stop()


def _event_type(event: Any) -> str:
    kind = getattr(event, "type", None)
    value = getattr(kind, "value", kind)
    return value if isinstance(value, str) else ""


async def open_copilot_session(
    *,
    model: str,
    system_message: str,
    mcp_servers: Mapping[str, Mapping[str, Any]],
    streaming: bool = True,
    config_dir: Optional[Path] = None,
    request_timeout: Optional[float] = None,
) -> SessionOutcome:
    """Create a Copilot-backed session.

    ``request_timeout`` bounds each prompt once it is being answered.

    Returns :class:`BackendUnavailable` when the SDK is not installed and
    :class:`BackendError` when it is installed but the session cannot start.
    """
    try:
        from copilot import CopilotClient
    except ModuleNotFoundError as exc:
        return BackendUnavailable(reason=f"GitHub Copilot SDK is not installed ({exc.name})")

    session_config: Dict[str, Any] = {
        "model": model,
        "streaming": streaming,
        "system_message": {"content": system_message},
    }
    if mcp_servers:
        session_config["mcp_servers"] = {name: dict(server) for name, server in mcp_servers.items()}
    copilot_dir = config_dir or Path.home() / ".copilot"
    if copilot_dir.exists():
        session_config["config_dir"] = str(copilot_dir)

    client = CopilotClient()
    try:
        await client.start()
        session = await client.create_session(session_config)
    except Exception as exc:
        _logger.debug("Copilot session construction failed", exc_info=True)
        try:
            await client.stop()
        except Exception:  # pragma: no cover - best effort cleanup
            _logger.debug("Copilot client stop failed", exc_info=True)
        return BackendError(error=exc)

    _logger.info("Copilot session ready (model=%s, %d MCP servers)", model, len(mcp_servers))
    return SessionReady(session=CopilotSession(session, client, timeout=request_timeout))


__all__ = ["CopilotSession", "open_copilot_session"]
