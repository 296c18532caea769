"""Tests for onboardbot.templates."""

from __future__ import annotations

from onboardbot.models import (
    Issue,
    LearningResource,
    LearningResourceGroup,
    RepositoryAnalysis,
    TeamContext,
    TeamMember,
)
from onboardbot.prompting.builder import synthesis_payload
from onboardbot.prompting.constants import ARCHITECTURE_CATEGORY, GUIDE_SECTIONS
from onboardbot.templates import render_guide_markdown


def _section_positions(markdown: str) -> list[int]:
    return [markdown.index(f"## {title}\n") for title in GUIDE_SECTIONS]


def test_empty_payload_renders_every_section_with_placeholders() -> None:
    markdown = render_guide_markdown("octo", "tool", "Sam", {})

    positions = _section_positions(markdown)
    assert positions == sorted(positions)
    assert "_To be discovered_" in markdown
    assert "_No recent pull requests found_" in markdown
    assert "| _Not detected_ |" in markdown
    assert markdown.endswith("*Generated by OnboardBot*\n")


def test_collected_data_is_rendered() -> None:
    analysis = RepositoryAnalysis(
        repo_full_name="octo/tool",
        structure=("go.mod", "main.go"),
        tech_stack=("Go",),
        issues=(
            Issue(number=3, title="Refactor", labels=("tech-debt",), summary=""),
            Issue(number=4, title="Add docs", labels=("good first issue",), summary=""),
        ),
    )
    resources = [
        LearningResourceGroup(
            technology="Go",
            resources=(LearningResource(title="Tour of Go", url="https://go.dev/tour", description="Basics"),),
        ),
        LearningResourceGroup(technology=ARCHITECTURE_CATEGORY),
    ]
    team = TeamContext(team_members=(TeamMember(name="Ana", role="Lead | Go", reason="Owns the CLI"),))

    markdown = render_guide_markdown("octo", "tool", "Sam", synthesis_payload(analysis, resources, team))

    assert "├── main.go" in markdown
    assert "| **Go** | [Tour of Go](https://go.dev/tour) |" in markdown
    assert markdown.index("#4 | Add docs") < markdown.index("#3 | Refactor")
    assert "| **Ana** | Lead / Go | Owns the CLI |" in markdown
    assert "_To be discovered_" not in markdown
    assert "- _No resources found_" in markdown
