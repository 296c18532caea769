"""Tests for the Copilot SDK adapter using in-memory fakes."""

from __future__ import annotations

import asyncio
import sys
import types
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, List, Optional

import pytest

from onboardbot.session import (
    BackendError,
    BackendUnavailable,
    BoundedSession,
    CopilotSession,
    SessionError,
    SessionReady,
    SessionTimeout,
    open_copilot_session,
    with_timeout,
)
from tests._fixtures.sessions import ScriptedSession, SlowSession


def _event(kind: str, **data: Any) -> SimpleNamespace:
    return SimpleNamespace(type=SimpleNamespace(value=kind), data=SimpleNamespace(**data))


class FakeSdkSession:
    """Emits a scripted list of events for every prompt sent."""

    def __init__(self, events: List[SimpleNamespace]) -> None:
        self.events = events
        self.handler: Optional[Callable[[Any], None]] = None
        self.sent: List[dict] = []
        self.destroyed = False
        self.unsubscribed = 0

    def on(self, handler: Callable[[Any], None]) -> Callable[[], None]:
        self.handler = handler

        def unsubscribe() -> None:
            self.unsubscribed += 1
            self.handler = None

        return unsubscribe

    async def send(self, options: dict) -> str:
        self.sent.append(options)
        events = list(self.events)

        async def emit() -> None:
            for event in events:
                await asyncio.sleep(0)
                if self.handler is not None:
                    self.handler(event)

        asyncio.get_running_loop().create_task(emit())
        return "message-id"

    async def destroy(self) -> None:
        self.destroyed = True


class FakeClient:
    def __init__(self, *, fail_on_create: bool = False) -> None:
        self.fail_on_create = fail_on_create
        self.started = False
        self.stopped = False
        self.session_config: Optional[dict] = None

    async def start(self) -> None:
        self.started = True

    async def create_session(self, config: dict) -> FakeSdkSession:
        if self.fail_on_create:
            raise RuntimeError("not authenticated")
        self.session_config = config
        return FakeSdkSession([_event("assistant.message", content="[]"), _event("session.idle")])

    async def stop(self) -> None:
        self.stopped = True


def test_copilot_session_returns_last_assistant_message() -> None:
    sdk = FakeSdkSession(
        [
            _event("assistant.message_delta", delta_content='["REA'),
            _event("assistant.message", content="draft"),
            _event("assistant.message", content='["README.md"]'),
            _event("session.idle"),
        ]
    )
    session = CopilotSession(sdk)

    reply = asyncio.run(session.send_and_wait("list files"))

    assert reply.message == '["README.md"]'
    assert sdk.sent == [{"prompt": "list files"}]
    assert sdk.unsubscribed == 1


def test_copilot_session_joins_deltas_without_final_message() -> None:
    sdk = FakeSdkSession(
        [
            _event("assistant.message_delta", delta_content='["a",'),
            _event("assistant.message_delta", delta_content=' "b"]'),
            _event("session.idle"),
        ]
    )
    reply = asyncio.run(CopilotSession(sdk).send_and_wait("x"))
    assert reply.message == '["a", "b"]'


def test_copilot_session_raises_on_session_error() -> None:
    sdk = FakeSdkSession([_event("session.error", message="rate limited")])
    with pytest.raises(SessionError, match="rate limited"):
        asyncio.run(CopilotSession(sdk).send_and_wait("x"))


def test_copilot_session_close_destroys_and_stops_client() -> None:
    sdk = FakeSdkSession([])
    client = FakeClient()
    asyncio.run(CopilotSession(sdk, client).close())
    assert sdk.destroyed is True
    assert client.stopped is True


def test_open_copilot_session_reports_missing_sdk(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "copilot", None)
    outcome = asyncio.run(
        open_copilot_session(model="gpt-4.1", system_message="hi", mcp_servers={})
    )
    assert isinstance(outcome, BackendUnavailable)


def _install_fake_sdk(monkeypatch: pytest.MonkeyPatch, client: FakeClient) -> None:
    module = types.ModuleType("copilot")
    module.CopilotClient = lambda: client  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "copilot", module)


def test_open_copilot_session_builds_session_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    client = FakeClient()
    _install_fake_sdk(monkeypatch, client)
    servers = {"github": {"type": "http", "url": "https://api.githubcopilot.com/mcp/"}}

    outcome = asyncio.run(
        open_copilot_session(
            model="gpt-4.1",
            system_message="You are OnboardBot",
            mcp_servers=servers,
            config_dir=tmp_path,
        )
    )

    assert isinstance(outcome, SessionReady)
    assert isinstance(outcome.session, CopilotSession)
    assert client.started is True
    assert client.session_config == {
        "model": "gpt-4.1",
        "streaming": True,
        "system_message": {"content": "You are OnboardBot"},
        "mcp_servers": servers,
        "config_dir": str(tmp_path),
    }


def test_open_copilot_session_reports_construction_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeClient(fail_on_create=True)
    _install_fake_sdk(monkeypatch, client)

    outcome = asyncio.run(open_copilot_session(model="gpt-4.1", system_message="hi", mcp_servers={}))

    assert isinstance(outcome, BackendError)
    assert "not authenticated" in str(outcome.error)
    assert client.stopped is True


def test_bounded_session_times_out() -> None:
    session = BoundedSession(SlowSession(delay=1.0), timeout=0.01)
    with pytest.raises(SessionTimeout):
        asyncio.run(session.send_and_wait("x"))


def test_with_timeout_skips_wrapping_when_disabled() -> None:
    inner = ScriptedSession([])
    assert with_timeout(inner, None) is inner
    assert with_timeout(inner, 0) is inner
    wrapped = with_timeout(inner, 30)
    assert isinstance(wrapped, BoundedSession)
    asyncio.run(wrapped.close())
    assert inner.closed is True


class DelayedSdkSession:
    """Answers each prompt after ``delay`` seconds, broadcasting to every handler."""

    def __init__(self, delay: float, *, supports_abort: bool = False) -> None:
        self.delay = delay
        self.handlers: List[Callable[[Any], None]] = []
        self.aborted = 0
        self._pending: List[asyncio.Task] = []
        if supports_abort:
            self.abort = self._abort

    def on(self, handler: Callable[[Any], None]) -> Callable[[], None]:
        self.handlers.append(handler)
        return lambda: self.handlers.remove(handler)

    async def send(self, options: dict) -> str:
        prompt = options["prompt"]

        async def reply() -> None:
            await asyncio.sleep(self.delay)
            for event in (_event("assistant.message", content=f"reply-for-{prompt}"), _event("session.idle")):
                for handler in list(self.handlers):
                    handler(event)

        self._pending.append(asyncio.get_running_loop().create_task(reply()))
        return f"id-{prompt}"

    async def _abort(self) -> None:
        self.aborted += 1
        for task in self._pending:
            task.cancel()
        for handler in list(self.handlers):
            handler(_event("session.idle"))


def test_timeout_excludes_time_queued_behind_other_prompts() -> None:
    session = CopilotSession(DelayedSdkSession(delay=0.3), timeout=0.5)

    async def run() -> List[Any]:
        return await asyncio.gather(*(session.send_and_wait(f"p{i}") for i in range(3)))

    replies = asyncio.run(run())

    assert [reply.message for reply in replies] == ["reply-for-p0", "reply-for-p1", "reply-for-p2"]


def test_late_reply_of_timed_out_prompt_is_not_returned_to_next_prompt() -> None:
    session = CopilotSession(DelayedSdkSession(delay=0.3), timeout=0.1)

    async def run() -> str:
        with pytest.raises(SessionTimeout, match="0.1s"):
            await session.send_and_wait("A")
        session.timeout = None
        return (await session.send_and_wait("B")).message

    assert asyncio.run(run()) == "reply-for-B"


def test_timed_out_prompt_is_aborted() -> None:
    sdk = DelayedSdkSession(delay=1.0, supports_abort=True)
    session = CopilotSession(sdk, timeout=0.05)

    with pytest.raises(SessionTimeout):
        asyncio.run(session.send_and_wait("A"))

    assert sdk.aborted == 1
    assert sdk.handlers == []


def test_drain_gives_up_when_prompt_never_goes_idle() -> None:
    session = CopilotSession(DelayedSdkSession(delay=5.0), timeout=0.01, drain_timeout=0.01)
    with pytest.raises(SessionTimeout):
        asyncio.run(session.send_and_wait("A"))


def test_open_copilot_session_passes_request_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    _install_fake_sdk(monkeypatch, FakeClient())

    outcome = asyncio.run(
        open_copilot_session(model="gpt-4.1", system_message="hi", mcp_servers={}, request_timeout=45.0)
    )

    assert isinstance(outcome, SessionReady)
    assert outcome.session.timeout == 45.0
