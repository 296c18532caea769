"""Pipeline orchestration for the generate and scan flows."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional

from .collectors import analyze_repository, fetch_learning_resources, gather_team_context
from .config import OnboardConfig
from .guide import GuideRequest, GuideWriter, generate_onboarding_guide
from .logging import get_logger
from .models import (
    Guide,
    LearningResourceGroup,
    PipelineRunResult,
    RepositoryAnalysis,
    TeamContext,
)
from .prompting.constants import DEFAULT_NEW_HIRE_NAME
from .session import Session
from .stages import StageObserver, StageRunner

REPO_ANALYSIS = "repo-analysis"
DOCS_FETCH = "docs-fetch"
TEAM_CONTEXT = "team-context"
GUIDE_GENERATION = "guide-generation"


def _repo_metrics(analysis: RepositoryAnalysis) -> Dict[str, Any]:
    return {
        "techStack": list(analysis.tech_stack),
        "filesFound": len(analysis.structure),
        "docsFound": len(analysis.docs),
        "prsFound": len(analysis.pr_activity),
        "issuesFound": len(analysis.issues),
    }


def _resource_metrics(groups: List[LearningResourceGroup]) -> Dict[str, Any]:
    return {"resourceCount": sum(len(group.resources) for group in groups)}


def _team_metrics(context: TeamContext) -> Dict[str, Any]:
    return {
        "discussions": len(context.recent_discussions),
        "people": len(context.team_members),
        "events": len(context.upcoming_events),
        "emails": len(context.email_insights),
        "documents": len(context.related_documents),
    }


class Orchestrator:
    """Coordinates the collectors and the synthesis stage for one session.

    The repository and team collectors start together. The resource collector
    waits for the repository stage because it searches by tech stack. All
    three are joined before synthesis.
    """

    def __init__(
        self,
        session: Session,
        config: OnboardConfig,
        *,
        writer: GuideWriter | None = None,
        observer: Optional[StageObserver] = None,
    ) -> None:
        self.session = session
        self.config = config
        self.writer = writer or GuideWriter(config.output_dir)
        self.observer = observer
        self.logger = get_logger("orchestrator")

    async def run(
        self,
        owner: str,
        repo: str,
        team_name: str | None = None,
        new_hire_name: str = DEFAULT_NEW_HIRE_NAME,
    ) -> PipelineRunResult:
        """Run the full pipeline. Stage failures are recorded, never raised."""
        result = PipelineRunResult()
        runner = StageRunner(result, self.observer)
        full_name = f"{owner}/{repo}"
        self.logger.info("Collecting onboarding data for %s", full_name)
        started = time.monotonic()

        repo_task = asyncio.ensure_future(
            runner.run(
                REPO_ANALYSIS,
                lambda: analyze_repository(self.session, owner, repo, self.config.limits),
                RepositoryAnalysis.empty(full_name),
                _repo_metrics,
            )
        )

        async def docs_chain() -> List[LearningResourceGroup]:
            analysis = await repo_task
            return await runner.run(
                DOCS_FETCH,
                lambda: fetch_learning_resources(self.session, analysis.tech_stack),
                [],
                _resource_metrics,
            )

        team_task = runner.run(
            TEAM_CONTEXT,
            lambda: gather_team_context(self.session, team_name or repo, full_name),
            TeamContext.empty(),
            _team_metrics,
        )

        analysis, resources, team = await asyncio.gather(repo_task, docs_chain(), team_task)
        self.logger.info("Collection finished in %.1fs", time.monotonic() - started)

        self.logger.info("Generating onboarding guide")
        request = GuideRequest(owner=owner, repo=repo, new_hire_name=new_hire_name)
        result.guide = await runner.run(
            GUIDE_GENERATION,
            lambda: generate_onboarding_guide(
                self.session, analysis, resources, team, request, self.writer
            ),
            None,
            _guide_metrics,
        )
        return result

    async def scan(self, owner: str, repo: str) -> RepositoryAnalysis:
        """Run only the repository collector; failures propagate."""
        self.logger.info("Scanning %s/%s", owner, repo)
        return await analyze_repository(self.session, owner, repo, self.config.limits)


def _guide_metrics(guide: Guide) -> Dict[str, Any]:
    return {"outputPath": str(guide.output_path), "contentLength": len(guide.content)}


__all__ = [
    "DOCS_FETCH",
    "GUIDE_GENERATION",
    "Orchestrator",
    "REPO_ANALYSIS",
    "TEAM_CONTEXT",
]
