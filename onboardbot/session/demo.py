"""Offline session returning canned replies, used when no live backend exists."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Sequence, Tuple

from ..extraction import extract_json
from ..logging import get_logger
from ..prompting.constants import DEFAULT_NEW_HIRE_NAME, SYNTHESIS_BLOCKS
from ..templates import render_guide_markdown
from .base import SessionReply

Responder = Callable[[str], str]

DEMO_STRUCTURE: List[str] = [
    "README.md",
    "src/",
    "package.json",
    "tsconfig.json",
    "docs/",
    ".github/",
    "Dockerfile",
    "docker-compose.yml",
    "tests/",
    ".eslintrc.json",
    "jest.config.js",
]

DEMO_DOCS: List[Dict[str, Any]] = [
    {
        "file": "README.md",
        "summary": "Project overview with setup instructions, architecture diagram, and contributing "
        "guidelines. Uses a microservice architecture with Node.js backend and React frontend.",
    },
    {
        "file": "CONTRIBUTING.md",
        "summary": "Contribution guide: fork, branch, PR workflow. Code review required from 2 "
        "reviewers. Must pass CI checks before merge.",
    },
]

DEMO_PULL_REQUESTS: List[Dict[str, Any]] = [
    {"number": 234, "title": "feat: Add user authentication module", "state": "open", "author": "senior-dev",
     "description": "Implements OAuth2 authentication with Azure AD integration"},
    {"number": 231, "title": "fix: Resolve memory leak in data pipeline", "state": "merged", "author": "tech-lead",
     "description": "Fixed connection pool exhaustion under high load"},
    {"number": 228, "title": "docs: Update API documentation", "state": "merged", "author": "docs-team",
     "description": "Added OpenAPI specs for new endpoints"},
]

DEMO_ISSUES: List[Dict[str, Any]] = [
    {"number": 100, "title": "Implement caching layer", "labels": ["enhancement", "performance"],
     "summary": "Add Redis caching for frequently accessed data"},
    {"number": 95, "title": "Add unit tests for auth module", "labels": ["testing", "good first issue"],
     "summary": "New auth module needs comprehensive test coverage"},
    {"number": 88, "title": "Migrate to Node.js 22", "labels": ["infrastructure", "tech-debt"],
     "summary": "Upgrade runtime for performance improvements"},
]

DEMO_DISCUSSIONS: List[Dict[str, Any]] = [
    {"title": "RFC: New API versioning strategy", "category": "Ideas", "author": "architect",
     "summary": "Proposing URL-based versioning for the public API"},
    {"title": "Team retro: Q4 highlights", "category": "General", "author": "manager",
     "summary": "Celebrating shipped features and lessons learned"},
]

DEMO_TECH_DOCS: List[Dict[str, Any]] = [
    {"title": "Getting started with Node.js on Azure", "url": "https://learn.microsoft.com/en-us/azure/developer/javascript/",
     "description": "Complete guide for building Node.js apps on Azure"},
    {"title": "TypeScript Learning Path",
     "url": "https://learn.microsoft.com/en-us/training/paths/build-javascript-applications-typescript/",
     "description": "Learn TypeScript fundamentals and advanced patterns"},
    {"title": "Docker containers on Azure", "url": "https://learn.microsoft.com/en-us/azure/container-instances/",
     "description": "Deploy containerized applications to Azure"},
]

DEMO_ARCHITECTURE_DOCS: List[Dict[str, Any]] = [
    {"title": "Azure Node.js samples", "url": "https://learn.microsoft.com/en-us/samples/browse/?languages=javascript",
     "description": "Official Azure SDK samples for Node.js", "type": "sample"},
    {"title": "Microservice architecture guide", "url": "https://learn.microsoft.com/en-us/azure/architecture/microservices/",
     "description": "Design patterns for microservice architectures", "type": "doc"},
]

DEMO_TUTORIALS: List[Dict[str, Any]] = [
    {"title": "Build a Node.js web app with Azure",
     "url": "https://learn.microsoft.com/en-us/training/modules/create-nodejs-project-dependencies/",
     "description": "Hands-on tutorial for full-stack Node.js development", "estimatedTime": "45 min"},
    {"title": "Introduction to Docker containers",
     "url": "https://learn.microsoft.com/en-us/training/modules/intro-to-docker-containers/",
     "description": "Learn containerization fundamentals", "estimatedTime": "30 min"},
]

DEMO_TEAM_DISCUSSIONS: List[Dict[str, Any]] = [
    {"topic": "Sprint 24 Planning", "channel": "Engineering",
     "summary": "Team agreed to prioritize auth module and caching layer for next sprint", "date": "2026-02-10",
     "relevance": "Understand current sprint priorities and your potential first tasks"},
    {"topic": "Architecture Decision: Event-Driven", "channel": "Architecture",
     "summary": "Moving to event-driven architecture for real-time features", "date": "2026-02-08",
     "relevance": "Key architectural shift that affects how you'll write new services"},
]

DEMO_PEOPLE: List[Dict[str, Any]] = [
    {"name": "Alex Chen", "role": "Engineering Manager", "reason": "Your direct manager, schedule a 1:1 in your first week"},
    {"name": "Sarah Johnson", "role": "Tech Lead", "reason": "Leads architecture decisions, great for codebase questions"},
    {"name": "Mike Park", "role": "Senior Engineer", "reason": "Most active reviewer, will likely review your first PRs"},
    {"name": "Lisa Wang", "role": "DevOps Lead", "reason": "Owns CI/CD and deployment, reach out for infra questions"},
]

DEMO_EVENTS: List[Dict[str, Any]] = [
    {"event": "Daily Standup", "date": "Every day 9:30 AM", "recurring": True,
     "relevance": "Join from Day 1 to understand daily progress and blockers"},
    {"event": "Sprint Planning", "date": "2026-02-17", "recurring": True,
     "relevance": "Great way to understand upcoming work and volunteer for tasks"},
    {"event": "Architecture Review", "date": "2026-02-19", "recurring": True,
     "relevance": "Learn about system design decisions and propose improvements"},
]

DEMO_NORMS: Dict[str, Any] = {
    "communicationChannels": ["#engineering-general", "#project-alpha", "#code-reviews", "#social"],
    "meetingCadence": "Daily standup at 9:30 AM, sprint planning bi-weekly Monday, retro bi-weekly Friday",
    "codeReviewProcess": "All PRs require 2 approvals. Use conventional commit messages. Link issues in PR description.",
    "deploymentProcess": "CI/CD via GitHub Actions. Staging deploys on PR merge to main. Production deploys weekly on Tuesday.",
    "otherNorms": [
        "Use threads in Teams for focused discussions",
        "Update your standup in the #standup channel by 9:30 AM",
        "Pair programming encouraged, just ask in the channel",
    ],
}

DEMO_EMAILS: List[Dict[str, Any]] = [
    {"subject": "Architecture Review: Moving to Event-Driven", "from": "Sarah Johnson (Tech Lead)", "date": "2026-02-09",
     "summary": "Final decision to adopt event-driven architecture using Azure Service Bus",
     "relevance": "All new services should follow this pattern"},
    {"subject": "Q1 OKRs Finalized", "from": "VP of Engineering", "date": "2026-02-01",
     "summary": "Ship auth module, reduce P95 latency by 30%, reach 90% test coverage on critical paths",
     "relevance": "What the team is measured on this quarter"},
    {"subject": "RE: Database Migration Plan", "from": "Lisa Wang (DevOps Lead)", "date": "2026-02-05",
     "summary": "PostgreSQL to Cosmos DB migration scheduled for March",
     "relevance": "Affects which database APIs to use in new code"},
]

DEMO_DOCUMENTS: List[Dict[str, Any]] = [
    {"title": "System Architecture Overview", "type": "PowerPoint", "location": "Engineering SharePoint > Architecture",
     "lastModified": "2026-02-08", "summary": "System diagram with data flow and service boundaries",
     "relevance": "The single source of truth for system design"},
    {"title": "API Design Guidelines", "type": "Word", "location": "Engineering SharePoint > Standards",
     "lastModified": "2026-01-20", "summary": "REST API conventions, naming standards and error formats",
     "relevance": "Must follow these guidelines when building new endpoints"},
    {"title": "Runbook: Production Incidents", "type": "Wiki", "location": "Engineering SharePoint > Operations",
     "lastModified": "2026-02-03", "summary": "Incident handling, escalation paths and post-mortem template",
     "relevance": "Reference for when you join the on-call rotation"},
]

DEMO_DOC_PAGE = """- Explains the core concepts covered by the page
- Walks through a minimal working example
- Lists prerequisites and links to follow-up modules"""

_REPOSITORY_LINE = re.compile(r"\*\*Repository:\*\* ([^/\s]+)/(\S+)")
_NEW_HIRE_LINE = re.compile(r"\*\*New hire:\*\* (.+)")


def _canned(data: Any) -> Responder:
    text = json.dumps(data, ensure_ascii=False)
    return lambda _prompt: text


def render_demo_guide(prompt: str) -> str:
    """Render a guide from the data blocks embedded in a synthesis prompt."""
    repository = _REPOSITORY_LINE.search(prompt)
    owner, repo = repository.groups() if repository else ("org", "project")
    name_match = _NEW_HIRE_LINE.search(prompt)
    new_hire_name = name_match.group(1).strip() if name_match else DEFAULT_NEW_HIRE_NAME

    payload: Dict[str, Any] = {}
    for key, heading, shape in SYNTHESIS_BLOCKS:
        pattern = re.compile(rf"### {re.escape(heading)}\n```json\n(.*?)\n```", re.DOTALL)
        match = pattern.search(prompt)
        fallback: Any = [] if shape == "array" else {}
        payload[key] = extract_json(match.group(1), shape, fallback) if match else fallback
    return render_guide_markdown(owner, repo, new_hire_name, payload)


# First match wins, so the synthesis prompt, which embeds every other reply,
# is checked before anything else.
DEFAULT_RESPONDERS: Tuple[Tuple[Tuple[str, ...], Responder], ...] = (
    (("onboarding specialist",), render_demo_guide),
    (("repository tree", "top-level files"), _canned(DEMO_STRUCTURE)),
    (("file contents",), _canned(DEMO_DOCS)),
    (("pull requests",), _canned(DEMO_PULL_REQUESTS)),
    (("open issues",), _canned(DEMO_ISSUES)),
    (("recent messages in Teams channels",), _canned(DEMO_TEAM_DISCUSSIONS)),
    (("find key people",), _canned(DEMO_PEOPLE)),
    (("upcoming meetings", "upcoming events"), _canned(DEMO_EVENTS)),
    (("team norms",), _canned(DEMO_NORMS)),
    (("recent emails",), _canned(DEMO_EMAILS)),
    (("documents on SharePoint", "OneDrive"), _canned(DEMO_DOCUMENTS)),
    (("discussions for",), _canned(DEMO_DISCUSSIONS)),
    (("fetch the content of this page",), lambda _prompt: DEMO_DOC_PAGE),
    (("architecture best practices", "code samples"), _canned(DEMO_ARCHITECTURE_DOCS)),
    (("interactive tutorials", "learning paths"), _canned(DEMO_TUTORIALS)),
    (("Microsoft Learn",), _canned(DEMO_TECH_DOCS)),
)


class DemoSession:
    """Pattern-matches prompts against substring predicates to return canned JSON."""

    def __init__(
        self,
        responders: Sequence[Tuple[Tuple[str, ...], Responder]] = DEFAULT_RESPONDERS,
    ) -> None:
        self.responders = tuple(responders)
        self.prompts: List[str] = []
        self.logger = get_logger("session.demo")

    async def send_and_wait(self, prompt: str) -> SessionReply:
        self.prompts.append(prompt)
        return SessionReply(message=self.respond(prompt))

    def respond(self, prompt: str) -> str:
        for needles, responder in self.responders:
            if any(needle in prompt for needle in needles):
                return responder(prompt)
        self.logger.debug("No demo reply matches prompt; returning empty array")
        return "[]"

    async def close(self) -> None:
        return None


__all__ = ["DEFAULT_RESPONDERS", "DemoSession", "render_demo_guide"]
