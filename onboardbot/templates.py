"""Data-driven Markdown rendering of an onboarding guide.

Used by the offline paths (demo session and web demo) where no model writes
the guide. Input is the camelCase payload produced by
:func:`onboardbot.prompting.builder.synthesis_payload`; every field is read
defensively and empty collections render placeholder rows.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .prompting.constants import ARCHITECTURE_CATEGORY, TUTORIALS_CATEGORY

_SETUP_COMMANDS: Dict[str, Sequence[str]] = {
    "Node.js / JavaScript": ("npm install", "npm test"),
    "TypeScript": ("npm run build",),
    "Python": ("python -m venv .venv", "pip install -r requirements.txt", "python -m pytest"),
    "Rust": ("cargo build", "cargo test"),
    "Go": ("go build ./...", "go test ./..."),
    "Java": ("./gradlew build  # or: mvn package",),
    "C# / .NET": ("dotnet restore", "dotnet test"),
    "Docker": ("docker compose up -d",),
    "Terraform": ("terraform init", "terraform plan"),
}


def render_guide_markdown(
    owner: str, repo: str, new_hire_name: str, payload: Mapping[str, Any]
) -> str:
    """Render the full guide, one section per entry of ``GUIDE_SECTIONS``."""
    tech_stack = _strings(payload.get("techStack"))
    structure = _strings(payload.get("structure"))
    docs = _mappings(payload.get("docs"))
    prs = _mappings(payload.get("prActivity"))
    issues = _mappings(payload.get("issues"))
    discussions = _mappings(payload.get("discussions"))
    resources = _mappings(payload.get("learningResources"))
    people = _mappings(payload.get("teamMembers"))
    events = _mappings(payload.get("upcomingEvents"))
    emails = _mappings(payload.get("emailInsights"))
    documents = _mappings(payload.get("relatedDocuments"))
    team_threads = _mappings(payload.get("recentDiscussions"))
    norms = payload.get("teamNorms") if isinstance(payload.get("teamNorms"), Mapping) else {}

    lines: List[str] = [
        f"# Welcome to {owner}/{repo}!",
        "",
        f"## Hello, {new_hire_name}!",
        "",
        f"Welcome to the team! **{repo}** is where a lot of our engineering effort goes, "
        "and this guide collects what you need to get productive quickly.",
        "",
        "## Architecture Overview",
        "",
    ]
    if structure:
        lines.append("```")
        lines.append(f"{repo}/")
        lines.extend(f"├── {entry}" for entry in structure)
        lines.append("```")
    else:
        lines.append("_The repository layout could not be retrieved. Browse the repository root to get oriented._")
    lines.append("")

    lines += ["## Tech Stack", "", "| Technology | Learn More |", "|------------|------------|"]
    if tech_stack:
        links = _first_links(resources)
        for tech in tech_stack:
            lines.append(f"| **{tech}** | {links.get(tech, 'Ask your team for recommended reading')} |")
    else:
        lines.append("| _Not detected_ | Check the build files in the repository root |")
    lines.append("")

    lines += ["## Development Environment Setup", "", "```bash"]
    lines.append(f"git clone https://github.com/{owner}/{repo}.git")
    lines.append(f"cd {repo}")
    for tech in tech_stack:
        lines.extend(_SETUP_COMMANDS.get(tech, ()))
    lines += ["```", ""]

    lines += ["## Essential Reading", ""]
    if docs:
        for doc in docs:
            lines.append(f"- **{_text(doc, 'file')}**: {_text(doc, 'summary')}")
    else:
        lines.append("- **README.md**: start here for the project overview.")
    for thread in discussions:
        lines.append(f"- Discussion: **{_text(thread, 'title')}** ({_text(thread, 'category')})")
    lines.append("")

    lines += ["## Current Work in Progress", "", "| PR | Title | Author | Status |", "|----|-------|--------|--------|"]
    if prs:
        for pr in prs:
            lines.append(
                f"| #{_text(pr, 'number')} | {_text(pr, 'title')} | {_text(pr, 'author')} | {_text(pr, 'state')} |"
            )
    else:
        lines.append("| - | _No recent pull requests found_ | - | - |")
    for thread in team_threads:
        lines.append("")
        lines.append(f"> **{_text(thread, 'topic')}** ({_text(thread, 'channel')}): {_text(thread, 'summary')}")
    lines.append("")

    lines += ["## Good First Issues", "", "| Issue | Title | Labels |", "|-------|-------|--------|"]
    ranked = sorted(issues, key=lambda issue: "good first issue" not in _strings(issue.get("labels")))
    if ranked:
        for issue in ranked:
            labels = ", ".join(f"`{label}`" for label in _strings(issue.get("labels")))
            lines.append(f"| #{_text(issue, 'number')} | {_text(issue, 'title')} | {labels} |")
    else:
        lines.append("| - | _No open issues found; ask your team lead for a starter task_ | - |")
    lines.append("")

    lines += [
        "## Key People to Connect With",
        "",
        "| Person | Role | Why Reach Out |",
        "|--------|------|---------------|",
    ]
    if people:
        for person in people:
            lines.append(f"| **{_text(person, 'name')}** | {_text(person, 'role')} | {_text(person, 'reason')} |")
    else:
        lines.append("| _To be discovered_ | Ask your team lead | They can introduce you to the right people |")
    lines += [
        "",
        f'> Intro template: _"Hi! I\'m {new_hire_name}, I just joined the team. '
        'Could we chat for 15 minutes this week about your area?"_',
        "",
    ]

    lines += [
        "## Your First Two Weeks",
        "",
        "### Week 1: Learn & Setup",
        "- Day 1: Environment setup, read essential docs, introduce yourself",
        "- Day 2-3: Explore the codebase, run the app, read recent PRs",
        "- Day 4-5: Pick a good first issue, attend team meetings",
        "",
        "### Week 2: Contribute & Connect",
        "- Day 6-7: Submit your first PR, respond to review feedback",
        "- Day 8-9: Dive deeper into one component, pair with a teammate",
        "- Day 10: Reflect on your onboarding and share feedback",
        "",
    ]

    lines += ["## Important Meetings & Events", "", "| Event | When | Why Attend |", "|-------|------|------------|"]
    if events:
        for event in events:
            lines.append(f"| **{_text(event, 'event')}** | {_text(event, 'date')} | {_text(event, 'relevance')} |")
    else:
        lines.append("| _None found_ | - | Check your calendar for recurring team meetings |")
    lines.append("")

    lines += ["## Communication Guide", "", "**Channels to join:**"]
    channels = _strings(norms.get("communicationChannels"))
    lines.extend(f"- `{channel}`" for channel in channels or ["Ask your team lead"])
    lines += [
        "",
        f"**Meetings:** {_text(norms, 'meetingCadence') or 'Unknown'}",
        f"**Code review:** {_text(norms, 'codeReviewProcess') or 'Check CONTRIBUTING.md'}",
        f"**Deployment:** {_text(norms, 'deploymentProcess') or 'Check CI/CD workflows'}",
    ]
    lines.extend(f"- {norm}" for norm in _strings(norms.get("otherNorms")))
    lines.append("")

    lines += ["## Recent Decisions from Email", "", "| Subject | From | Date | Summary |", "|---------|------|------|---------|"]
    if emails:
        for email in emails:
            lines.append(
                f"| **{_text(email, 'subject')}** | {_text(email, 'from')} | {_text(email, 'date')} | {_text(email, 'summary')} |"
            )
    else:
        lines.append("| _No email threads found_ | - | - | - |")
    lines.append("")

    lines += [
        "## Key Documents & Resources",
        "",
        "| Document | Type | Location | Why Read It |",
        "|----------|------|----------|-------------|",
    ]
    if documents:
        for document in documents:
            lines.append(
                f"| **{_text(document, 'title')}** | {_text(document, 'type')} | "
                f"{_text(document, 'location')} | {_text(document, 'relevance')} |"
            )
    else:
        lines.append("| _No shared documents found_ | - | - | Ask your team for the team wiki |")
    lines.append("")

    lines += [
        "## 30-60-90 Day Goals",
        "",
        "### 30 Days: Foundation",
        "- [ ] Complete environment setup",
        "- [ ] Merge 2-3 PRs",
        "- [ ] Understand core architecture",
        "",
        "### 60 Days: Contribution",
        "- [ ] Own a feature or component",
        "- [ ] Participate in code reviews",
        "- [ ] Present in a team meeting",
        "",
        "### 90 Days: Ownership",
        "- [ ] Lead a small initiative",
        "- [ ] Mentor the next new hire",
        "- [ ] Contribute to architecture decisions",
        "",
    ]

    lines += ["## Additional Resources", ""]
    if resources:
        for group in resources:
            lines.append(f"**{_text(group, 'technology')}:**")
            entries = _mappings(group.get("resources"))
            if not entries:
                lines.append("- _No resources found_")
            for entry in entries:
                lines.append(f"- [{_text(entry, 'title')}]({_text(entry, 'url')}): {_text(entry, 'description')}")
            lines.append("")
    else:
        lines += ["_No learning resources were collected._", ""]

    lines += ["---", "", "*Generated by OnboardBot*"]
    return "\n".join(lines) + "\n"


def _first_links(groups: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    links: Dict[str, str] = {}
    for group in groups:
        technology = _text(group, "technology")
        if technology in {ARCHITECTURE_CATEGORY, TUTORIALS_CATEGORY}:
            continue
        entries = _mappings(group.get("resources"))
        if entries:
            links[technology] = f"[{_text(entries[0], 'title')}]({_text(entries[0], 'url')})"
    return links


def _text(mapping: Mapping[str, Any], key: str) -> str:
    value = mapping.get(key)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).replace("|", "/").replace("\n", " ").strip()


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float))]


def _mappings(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


__all__ = ["render_guide_markdown"]
