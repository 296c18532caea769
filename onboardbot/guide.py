"""Synthesis stage: one prompt in, one persisted onboarding guide out."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

import yaml

from .logging import get_logger
from .models import Guide, LearningResourceGroup, RepositoryAnalysis, TeamContext
from .prompting.builder import build_synthesis_prompt
from .prompting.constants import DEFAULT_NEW_HIRE_NAME
from .session import Session

Clock = Callable[[], datetime]

GENERATED_BY = "OnboardBot - AI-Powered Onboarding Accelerator"

_logger = get_logger("guide")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GuideRequest:
    owner: str
    repo: str
    new_hire_name: str = DEFAULT_NEW_HIRE_NAME


class GuideWriter:
    """Persists guides as ``onboarding-{owner}-{repo}-{YYYY-MM-DD}.md``."""

    def __init__(self, output_dir: Path, clock: Clock = _utc_now) -> None:
        self.output_dir = Path(output_dir)
        self.clock = clock

    def now(self) -> datetime:
        return self.clock().astimezone(timezone.utc)

    def path_for(self, owner: str, repo: str) -> Path:
        stamp = self.now().strftime("%Y-%m-%d")
        return self.output_dir / f"onboarding-{owner}-{repo}-{stamp}.md"

    def write(self, owner: str, repo: str, content: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(owner, repo)
        path.write_text(content, encoding="utf-8")
        _logger.debug("Wrote %d characters to %s", len(content), path)
        return path


def add_guide_header(
    content: str,
    *,
    owner: str,
    repo: str,
    new_hire_name: str,
    tech_stack: Sequence[str],
    generated_at: datetime,
) -> str:
    """Prefix ``content`` with a YAML front-matter block."""
    metadata = {
        "title": f"Onboarding Guide - {owner}/{repo}",
        "generated_by": GENERATED_BY,
        "generated_at": generated_at.isoformat(),
        "tech_stack": list(tech_stack),
        "new_hire": new_hire_name,
    }
    front_matter = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    return f"---\n{front_matter}---\n\n{content}"


async def generate_onboarding_guide(
    session: Session,
    analysis: RepositoryAnalysis,
    resources: Sequence[LearningResourceGroup],
    team: TeamContext,
    request: GuideRequest,
    writer: GuideWriter,
) -> Guide:
    """Ask the session for the finished guide, add front matter and save it."""
    prompt = build_synthesis_prompt(
        analysis,
        resources,
        team,
        owner=request.owner,
        repo=request.repo,
        new_hire_name=request.new_hire_name,
    )
    _logger.debug("Synthesis prompt is %d characters", len(prompt))
    reply = await session.send_and_wait(prompt)
    content = add_guide_header(
        reply.message,
        owner=request.owner,
        repo=request.repo,
        new_hire_name=request.new_hire_name,
        tech_stack=analysis.tech_stack,
        generated_at=writer.now(),
    )
    output_path = writer.write(request.owner, request.repo, content)
    return Guide(content=content, output_path=output_path)


__all__ = [
    "GENERATED_BY",
    "GuideRequest",
    "GuideWriter",
    "add_guide_header",
    "generate_onboarding_guide",
]
