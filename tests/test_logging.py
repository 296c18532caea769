"""Tests for onboardbot.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from onboardbot.logging import RedactingFilter, configure_logging, get_logger, stage_progress


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger = logging.getLogger("onboardbot")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


def test_get_logger_is_namespaced() -> None:
    assert get_logger().name == "onboardbot"
    assert get_logger("cli").name == "onboardbot.cli"


def test_redacting_filter_masks_bearer_tokens() -> None:
    record = logging.LogRecord(
        "onboardbot", logging.INFO, __file__, 1, "headers: %s", ({"Authorization": "Bearer ghp_abc123"},), None
    )

    assert RedactingFilter().filter(record) is True
    assert record.getMessage() == "headers: {'Authorization': 'Bearer ***'}"


def test_redacting_filter_leaves_plain_messages() -> None:
    record = logging.LogRecord("onboardbot", logging.INFO, __file__, 1, "fetched %d files", (3,), None)
    RedactingFilter().filter(record)
    assert record.args == (3,)
    assert record.getMessage() == "fetched 3 files"


def test_configure_logging_writes_debug_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "onboardbot.log"
    logger = configure_logging(verbose=False, log_file=log_file)
    get_logger("test").debug("token Bearer secret-value")
    for handler in logger.handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "Bearer ***" in text
    assert "secret-value" not in text


def test_configure_logging_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_stage_progress_reports_transitions(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("stage-progress-test")
    observe = stage_progress(logger)

    with caplog.at_level(logging.INFO, logger="stage-progress-test"):
        observe("repo-analysis", "started")
        observe("repo-analysis", "success")
        observe("team-context", "failed")
        observe("custom-step", "started")

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "Analyzing repository...",
        "Analyzing repository: done",
        "Gathering team context: failed, continuing with defaults",
        "custom-step...",
    ]
    assert caplog.records[2].levelno == logging.WARNING
