"""Logging setup, secret redaction and stage progress reporting."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable

_LOGGER_NAME = "onboardbot"

_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9_\-\.]+")

_STAGE_LABELS = {
    "repo-analysis": "Analyzing repository",
    "docs-fetch": "Fetching learning resources",
    "team-context": "Gathering team context",
    "guide-generation": "Generating onboarding guide",
}


class RedactingFilter(logging.Filter):
    """Masks bearer tokens, which appear in MCP server headers."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the onboardbot hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the onboardbot logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for existing in list(logger.filters):
        logger.removeFilter(existing)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[onboardbot] %(levelname)s %(message)s"))
    stream_handler.addFilter(RedactingFilter())
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        file_handler.addFilter(RedactingFilter())
        logger.addHandler(file_handler)

    # Web server chatter only matters when troubleshooting.
    for noisy in ("uvicorn.access", "httpx"):
        logging.getLogger(noisy).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger


def stage_progress(logger: logging.Logger | None = None) -> Callable[[str, str], None]:
    """Return a stage observer that reports progress through ``logger``."""
    target = logger or get_logger("progress")

    def observe(stage: str, status: str) -> None:
        label = _STAGE_LABELS.get(stage, stage)
        if status == "started":
            target.info("%s...", label)
        elif status == "success":
            target.info("%s: done", label)
        else:
            target.warning("%s: failed, continuing with defaults", label)

    return observe


__all__ = ["RedactingFilter", "configure_logging", "get_logger", "stage_progress"]
