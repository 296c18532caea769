from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from onboardbot.config import OnboardConfig, load_config
from onboardbot.guide import GuideWriter
from onboardbot.session import DemoSession

FIXED_NOW = datetime(2026, 2, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path: Path) -> OnboardConfig:
    """Default configuration rooted at tmp_path with no environment overrides."""
    return load_config(tmp_path, env={})


@pytest.fixture
def writer(tmp_path: Path) -> GuideWriter:
    """Guide writer with a fixed clock."""
    return GuideWriter(tmp_path / "guides", clock=lambda: FIXED_NOW)


@pytest.fixture
def demo_session() -> DemoSession:
    return DemoSession()
