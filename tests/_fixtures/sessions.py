"""Session test doubles."""

from __future__ import annotations

import asyncio
from typing import Callable, Iterable, List, Sequence, Tuple

from onboardbot.session import DemoSession, SessionError, SessionReply

WORKIQ_PREFIX = "Use the WorkIQ MCP tools"


class ScriptedSession:
    """Replies from a list of ``(needle, reply)`` pairs; first match wins."""

    def __init__(self, script: Sequence[Tuple[str, str]], default: str = "[]") -> None:
        self.script = list(script)
        self.default = default
        self.prompts: List[str] = []
        self.closed = False

    async def send_and_wait(self, prompt: str) -> SessionReply:
        self.prompts.append(prompt)
        for needle, reply in self.script:
            if needle in prompt:
                return SessionReply(message=reply)
        return SessionReply(message=self.default)

    async def close(self) -> None:
        self.closed = True


class FailingSession(DemoSession):
    """Demo session that raises for prompts matching ``should_fail``."""

    def __init__(
        self,
        should_fail: Callable[[str], bool] = lambda prompt: prompt.startswith(WORKIQ_PREFIX),
        message: str = "WorkIQ MCP server unavailable",
    ) -> None:
        super().__init__()
        self.should_fail = should_fail
        self.message = message

    async def send_and_wait(self, prompt: str) -> SessionReply:
        if self.should_fail(prompt):
            self.prompts.append(prompt)
            raise SessionError(self.message)
        return await super().send_and_wait(prompt)


class SlowSession:
    """Never answers within a reasonable time."""

    def __init__(self, delay: float = 5.0) -> None:
        self.delay = delay
        self.closed = False

    async def send_and_wait(self, prompt: str) -> SessionReply:
        await asyncio.sleep(self.delay)
        return SessionReply(message="[]")

    async def close(self) -> None:
        self.closed = True


def prompts_matching(prompts: Iterable[str], needle: str) -> List[str]:
    return [prompt for prompt in prompts if needle in prompt]
