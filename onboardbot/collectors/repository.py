"""Repository collector: structure, tech stack, docs and activity via GitHub MCP."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence, Tuple

from ..config import LimitsConfig
from ..extraction import extract_array
from ..logging import get_logger
from ..models import (
    Discussion,
    DocSummary,
    Issue,
    PullRequest,
    RepositoryAnalysis,
    records_from,
)
from ..prompting.builder import (
    active_issues_prompt,
    key_documents_prompt,
    recent_prs_prompt,
    repo_discussions_prompt,
    repo_structure_prompt,
)
from ..prompting.constants import ARCHITECTURE_FILES, TECH_PATTERNS
from ..session import Session

_logger = get_logger("collectors.repository")


def detect_tech_stack(
    structure: Iterable[str],
    patterns: Mapping[str, Sequence[str]] = TECH_PATTERNS,
) -> Tuple[str, ...]:
    """Infer technologies from top-level entry names.

    Each pattern is reduced to a plain needle (leading ``*.`` and one ``/``
    removed) and matched case-insensitively against the joined listing.
    Results follow the order of ``patterns``.
    """
    listing = " ".join(structure).lower()
    detected: List[str] = []
    for tech, needles in patterns.items():
        for needle in needles:
            clean = needle.replace("*.", "", 1).replace("/", "", 1).lower()
            if clean and clean in listing:
                if tech not in detected:
                    detected.append(tech)
                break
    return tuple(detected)


def select_doc_targets(
    structure: Sequence[str],
    max_files: int,
    candidates: Sequence[str] = ARCHITECTURE_FILES,
) -> List[str]:
    """Pick the well-known files worth summarising, falling back to README.md.

    A candidate is kept when it and a structure entry (one ``/`` removed from
    each, compared case-insensitively) contain one another.
    """
    entries = [entry.lower().replace("/", "", 1) for entry in structure]
    entries = [entry for entry in entries if entry]
    targets: List[str] = []
    for candidate in candidates:
        probe = candidate.lower().replace("/", "", 1)
        if any(probe in entry or entry in probe for entry in entries):
            targets.append(candidate)
    targets = targets[:max_files]
    return targets or ["README.md"]


async def analyze_repository(
    session: Session,
    owner: str,
    repo: str,
    limits: LimitsConfig | None = None,
) -> RepositoryAnalysis:
    """Run the repository queries in sequence and return the combined record.

    Any session failure propagates; the caller decides the fallback.
    """
    limits = limits or LimitsConfig()
    full_name = f"{owner}/{repo}"

    _logger.debug("Fetching structure for %s", full_name)
    reply = await session.send_and_wait(repo_structure_prompt(owner, repo))
    structure = tuple(str(entry) for entry in extract_array(reply.message) if isinstance(entry, str))
    tech_stack = detect_tech_stack(structure)
    _logger.debug("Detected tech stack for %s: %s", full_name, ", ".join(tech_stack) or "none")

    targets = select_doc_targets(structure, limits.max_files)
    reply = await session.send_and_wait(key_documents_prompt(owner, repo, targets))
    docs = records_from(extract_array(reply.message), DocSummary.from_payload)

    reply = await session.send_and_wait(recent_prs_prompt(owner, repo, limits.max_prs))
    pull_requests = records_from(extract_array(reply.message), PullRequest.from_payload)

    reply = await session.send_and_wait(active_issues_prompt(owner, repo, limits.max_issues))
    issues = records_from(extract_array(reply.message), Issue.from_payload)

    reply = await session.send_and_wait(
        repo_discussions_prompt(owner, repo, limits.max_discussions)
    )
    discussions = records_from(extract_array(reply.message), Discussion.from_payload)

    return RepositoryAnalysis(
        repo_full_name=full_name,
        structure=structure,
        tech_stack=tech_stack,
        docs=docs,
        pr_activity=pull_requests,
        issues=issues,
        discussions=discussions,
    )


__all__ = ["analyze_repository", "detect_tech_stack", "select_doc_targets"]
