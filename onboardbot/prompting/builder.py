"""Prompt text for every session round-trip in the pipeline."""

from __future__ import annotations

import json
from typing import Any, Sequence

from ..models import LearningResourceGroup, RepositoryAnalysis, TeamContext, to_payload
from .constants import (
    GUIDE_SECTIONS,
    MAX_DISCUSSIONS_TO_FETCH,
    MAX_ISSUES_TO_FETCH,
    MAX_PRS_TO_FETCH,
    SYNTHESIS_BLOCKS,
)

SYSTEM_MESSAGE = """You are OnboardBot, an AI-powered onboarding specialist. Your job is to help new hires get up to speed quickly by analyzing codebases, finding relevant documentation, and understanding team context.

When using MCP tools:
- Use GitHub MCP tools to analyze repository structure, code, PRs, issues, and discussions
- Use Microsoft Learn MCP tools to find relevant documentation and tutorials
- Use WorkIQ MCP tools to gather team context from Teams, calendar, and people data

Always return structured data when asked. Prefer JSON format for data extraction.
Be thorough but concise. Focus on actionable insights for new team members."""

SCAN_SYSTEM_MESSAGE = "You are a codebase analyzer. Return structured JSON data about repositories."


# ----------------------------------------------------------------------
# Repository (GitHub MCP)


def repo_structure_prompt(owner: str, repo: str) -> str:
    return f"""Use the GitHub MCP tools to get the repository tree/contents for {owner}/{repo}.
List the top-level files and directories. Return ONLY a JSON array of file/directory names, like:
["README.md", "src/", "package.json", "docs/", ".github/"]
Do not include any explanation, just the JSON array."""


def key_documents_prompt(owner: str, repo: str, files: Sequence[str]) -> str:
    listing = "\n".join(f"- {name}" for name in files)
    return f"""Use the GitHub MCP tools to get the file contents of these files from {owner}/{repo}:
{listing}

For each file, return its name and a SUMMARY (not full content) of what it tells a new developer:
- What the project does
- How to set it up
- Key architecture decisions
- Important conventions or patterns

Format as JSON: [{{"file": "name", "summary": "..."}}]"""


def recent_prs_prompt(owner: str, repo: str, limit: int = MAX_PRS_TO_FETCH) -> str:
    return f"""Use the GitHub MCP tools to list the {limit} most recent pull requests for {owner}/{repo}.
Include both open and recently merged PRs.

For each PR, return: number, title, state, author, and a one-line description of the change.
Format as JSON array: [{{"number": 1, "title": "...", "state": "open|merged", "author": "...", "description": "..."}}]"""


def active_issues_prompt(owner: str, repo: str, limit: int = MAX_ISSUES_TO_FETCH) -> str:
    return f"""Use the GitHub MCP tools to list the {limit} most recent open issues for {owner}/{repo}.
Sort by most recently updated.

For each issue, return: number, title, labels (as array), and a one-line summary.
Format as JSON array: [{{"number": 1, "title": "...", "labels": ["bug", "priority"], "summary": "..."}}]"""


def repo_discussions_prompt(
    owner: str, repo: str, limit: int = MAX_DISCUSSIONS_TO_FETCH
) -> str:
    return f"""Use the GitHub MCP tools to list the {limit} most recent discussions for {owner}/{repo}.
If the repo has no discussions enabled, return an empty array.

For each discussion, return: title, category, author, and a one-line summary.
Format as JSON array: [{{"title": "...", "category": "...", "author": "...", "summary": "..."}}]"""


# ----------------------------------------------------------------------
# Learning resources (Microsoft Learn MCP)


def tech_docs_prompt(tech: str) -> str:
    return f"""Use the Microsoft Learn MCP tools to search for "{tech} getting started guide" documentation.

Return the top 5 most relevant results as JSON array:
[{{"title": "...", "url": "...", "description": "One-line description of what the doc covers"}}]

Focus on official getting-started guides, best practices and common pitfalls to avoid."""


def architecture_docs_prompt(tech_stack: Sequence[str]) -> str:
    tech_list = ", ".join(tech_stack) or "general software engineering"
    return f"""Use the Microsoft Learn MCP tools to search for architecture best practices related to: {tech_list}.

Also search for code samples using the microsoft_code_sample_search tool for: {tech_list}

Return the top 5 most relevant results as JSON array:
[{{"title": "...", "url": "...", "description": "...", "type": "doc|sample"}}]

Focus on solution architecture patterns, security and performance guides."""


def tutorials_prompt(tech_stack: Sequence[str]) -> str:
    query = " and ".join(tech_stack[:3]) or "software development fundamentals"
    return f"""Use the Microsoft Learn MCP tools to search for interactive tutorials and learning paths for: {query}.

Return the top 5 results as JSON array:
[{{"title": "...", "url": "...", "description": "...", "estimatedTime": "30 min"}}]

Prioritize hands-on tutorials, training modules and quickstart guides."""


def doc_page_prompt(url: str) -> str:
    return f"""Use the Microsoft Learn MCP tools to fetch the content of this page: {url}
Return a brief markdown summary (3-5 bullet points) of the key takeaways."""


# ----------------------------------------------------------------------
# Team context (WorkIQ MCP)


def team_discussions_prompt(team_name: str) -> str:
    return f"""Use the WorkIQ MCP tools to search for recent messages in Teams channels related to "{team_name}".

Look for recent technical decisions, announcements, current sprint focus areas and recurring themes.

Summarize the top 5 most relevant threads as JSON:
[{{"topic": "...", "channel": "...", "summary": "One-line summary", "date": "approx date", "relevance": "Why a new hire should know this"}}]

If WorkIQ is not available, return an empty array."""


def key_people_prompt(team_name: str, project_context: str) -> str:
    return f"""Use the WorkIQ MCP tools to find key people related to "{team_name}" and the project context: "{project_context}".

Identify the team lead, senior engineers, the most active contributors and subject matter experts.

Return as JSON array:
[{{"name": "...", "role": "Likely role/expertise", "reason": "Why a new hire should connect with them"}}]

Limit to 5-7 key people. If WorkIQ is not available, return an empty array."""


def upcoming_events_prompt(team_name: str) -> str:
    return f"""Use the WorkIQ MCP tools to find upcoming meetings and events related to "{team_name}" in the next 2 weeks.

Look for standups, sprint planning, retrospectives, architecture reviews and onboarding sessions.

Return as JSON array:
[{{"event": "...", "date": "...", "recurring": true, "relevance": "Why attend as a new hire"}}]

Limit to 8 events. If WorkIQ is not available, return an empty array."""


def team_norms_prompt(team_name: str) -> str:
    return f"""Use the WorkIQ MCP tools to search for team norms, processes, and cultural information about "{team_name}".

Search channel descriptions, pinned messages, team wikis and process emails.

Summarize as JSON:
{{
  "communicationChannels": ["List of key channels/groups to join"],
  "meetingCadence": "Description of regular meetings",
  "codeReviewProcess": "How the team does code reviews",
  "deploymentProcess": "How the team deploys",
  "otherNorms": ["Any other important team norms"]
}}

If WorkIQ is not available, return reasonable defaults with "ask your team lead" placeholders."""


def email_insights_prompt(team_name: str, project_context: str) -> str:
    return f"""Use the WorkIQ MCP tools to search recent emails related to "{team_name}" and "{project_context}".

Look for key decisions, leadership announcements, action items and onboarding-related emails.

Summarize the top 5 most relevant email threads as JSON:
[{{"subject": "...", "from": "sender name or role", "date": "approx date", "summary": "Key takeaway", "relevance": "Why a new hire should know this"}}]

If WorkIQ is not available, return an empty array."""


def related_documents_prompt(team_name: str, project_context: str) -> str:
    return f"""Use the WorkIQ MCP tools to search for documents on SharePoint and OneDrive related to "{team_name}" and "{project_context}".

Look for design documents, specifications, team wikis, runbooks and recent slide decks.

Return the top 8 most relevant documents as JSON:
[{{"title": "...", "type": "Word|PowerPoint|Wiki|PDF", "location": "Site or folder", "lastModified": "approx date", "summary": "What it contains", "relevance": "Why a new hire should read this"}}]

If WorkIQ is not available, return an empty array."""


# ----------------------------------------------------------------------
# Synthesis


def synthesis_payload(
    analysis: RepositoryAnalysis,
    resources: Sequence[LearningResourceGroup],
    team: TeamContext,
) -> dict[str, Any]:
    """Flatten the three collected records into the blocks embedded in the prompt."""
    payload: dict[str, Any] = {}
    payload.update(to_payload(analysis))
    payload["learningResources"] = to_payload(list(resources))
    payload.update(to_payload(team))
    return payload


def build_synthesis_prompt(
    analysis: RepositoryAnalysis,
    resources: Sequence[LearningResourceGroup],
    team: TeamContext,
    *,
    owner: str,
    repo: str,
    new_hire_name: str,
) -> str:
    """Return the single prompt asking the model for the finished guide."""
    payload = synthesis_payload(analysis, resources, team)
    blocks = "\n\n".join(
        f"### {heading}\n```json\n{json.dumps(payload.get(key, [] if shape == 'array' else {}), indent=2, ensure_ascii=False)}\n```"
        for key, heading, shape in SYNTHESIS_BLOCKS
    )
    outline = "\n".join(f"## {title}" for title in GUIDE_SECTIONS)
    return f"""You are an expert onboarding specialist. Generate a comprehensive, personalized onboarding guide for a new developer joining the {owner}/{repo} project.

Use ALL of the following data. The guide should be warm, encouraging, and actionable.

**Repository:** {owner}/{repo}
**New hire:** {new_hire_name}

---

## COLLECTED DATA

{blocks}

---

## OUTPUT FORMAT

Start with:

# Welcome to {owner}/{repo}!

## Hello, {new_hire_name}!

Then write these sections, in exactly this order:

{outline}

Make the guide specific to THIS repo, actionable, well-formatted with tables and code blocks, and between 800 and 1500 words."""


__all__ = [
    "SCAN_SYSTEM_MESSAGE",
    "SYSTEM_MESSAGE",
    "active_issues_prompt",
    "architecture_docs_prompt",
    "build_synthesis_prompt",
    "doc_page_prompt",
    "email_insights_prompt",
    "key_documents_prompt",
    "key_people_prompt",
    "recent_prs_prompt",
    "related_documents_prompt",
    "repo_discussions_prompt",
    "repo_structure_prompt",
    "synthesis_payload",
    "team_discussions_prompt",
    "team_norms_prompt",
    "tech_docs_prompt",
    "tutorials_prompt",
    "upcoming_events_prompt",
]
