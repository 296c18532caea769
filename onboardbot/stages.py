"""Stage runner: awaits one pipeline stage and records exactly one outcome."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from .logging import get_logger
from .models import PipelineRunResult, StageFailure, StepOutcome

T = TypeVar("T")

StageObserver = Callable[[str, str], None]
"""Called with ``(stage, status)`` where status is started, success or failed."""


class StageRunner:
    """Runs stages against a shared :class:`PipelineRunResult`.

    A stage either appends a :class:`StepOutcome` built from its metrics or a
    :class:`StageFailure` carrying the error message. In the failure case the
    caller-supplied fallback is returned so downstream stages always receive a
    usable value.
    """

    def __init__(
        self,
        result: PipelineRunResult,
        observer: Optional[StageObserver] = None,
    ) -> None:
        self.result = result
        self.observer = observer
        self.logger = get_logger("stages")

    async def run(
        self,
        stage: str,
        work: Callable[[], Awaitable[T]],
        fallback: T,
        metrics: Callable[[T], Mapping[str, Any]],
    ) -> T:
        self._notify(stage, "started")
        try:
            value = await work()
            outcome = StepOutcome(step=stage, metrics=dict(metrics(value)))
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            self.logger.error("Stage %s failed: %s", stage, message)
            self.logger.debug("Stage %s traceback", stage, exc_info=True)
            self.result.errors.append(StageFailure(step=stage, error=message))
            self._notify(stage, "failed")
            return fallback

        self.result.steps.append(outcome)
        self.logger.info("Stage %s complete", stage)
        self._notify(stage, "success")
        return value

    def _notify(self, stage: str, status: str) -> None:
        if self.observer is not None:
            self.observer(stage, status)


__all__ = ["StageObserver", "StageRunner"]
