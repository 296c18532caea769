"""Tests for onboardbot.guide."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path

import yaml

from onboardbot.guide import GENERATED_BY, GuideRequest, GuideWriter, add_guide_header, generate_onboarding_guide
from onboardbot.models import RepositoryAnalysis, TeamContext
from tests._fixtures.sessions import ScriptedSession


def test_writer_path_uses_utc_date(tmp_path: Path) -> None:
    # 23:30 at UTC-5 is already the next day in UTC.
    local = datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    writer = GuideWriter(tmp_path, clock=lambda: local)
    assert writer.path_for("octo", "tool") == tmp_path / "onboarding-octo-tool-2026-03-02.md"


def test_writer_creates_directory_and_overwrites(tmp_path: Path) -> None:
    writer = GuideWriter(tmp_path / "nested" / "guides", clock=lambda: datetime(2026, 1, 5, tzinfo=timezone.utc))
    first = writer.write("octo", "tool", "one")
    second = writer.write("octo", "tool", "two")

    assert first == second
    assert second.read_text(encoding="utf-8") == "two"


def test_add_guide_header_writes_yaml_front_matter() -> None:
    content = add_guide_header(
        "# Welcome",
        owner="octo",
        repo="tool",
        new_hire_name='Jo "JJ" Smith',
        tech_stack=["Go", "Docker"],
        generated_at=datetime(2026, 2, 14, 9, 30, tzinfo=timezone.utc),
    )

    assert content.startswith("---\n")
    _, block, body = content.split("---\n", 2)
    metadata = yaml.safe_load(block)
    assert metadata == {
        "title": "Onboarding Guide - octo/tool",
        "generated_by": GENERATED_BY,
        "generated_at": "2026-02-14T09:30:00+00:00",
        "tech_stack": ["Go", "Docker"],
        "new_hire": 'Jo "JJ" Smith',
    }
    assert body == "\n# Welcome"


def test_generate_onboarding_guide_sends_one_prompt(writer: GuideWriter) -> None:
    session = ScriptedSession([("onboarding specialist", "# Welcome to octo/tool!")])
    guide = asyncio.run(
        generate_onboarding_guide(
            session,
            RepositoryAnalysis(repo_full_name="octo/tool", tech_stack=("Go",)),
            [],
            TeamContext.empty(),
            GuideRequest(owner="octo", repo="tool", new_hire_name="Sam"),
            writer,
        )
    )

    assert len(session.prompts) == 1
    prompt = session.prompts[0]
    assert "**Repository:** octo/tool" in prompt
    assert "**New hire:** Sam" in prompt
    assert "### Detected Tech Stack" in prompt
    assert "## Key People to Connect With" in prompt
    assert guide.content.endswith("# Welcome to octo/tool!")
    assert guide.output_path.name == "onboarding-octo-tool-2026-02-14.md"
    assert guide.output_path.read_text(encoding="utf-8") == guide.content
