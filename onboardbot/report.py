"""Plain-text summaries of pipeline runs and scans."""

from __future__ import annotations

from typing import List

from .models import PipelineRunResult, RepositoryAnalysis


def format_duration(ms: float) -> str:
    """Render milliseconds as ``850ms``, ``12.3s`` or ``2m 5s``."""
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60000:
        return f"{ms / 1000:.1f}s"
    minutes, remainder = divmod(ms, 60000)
    return f"{int(minutes)}m {round(remainder / 1000)}s"


def format_results(result: PipelineRunResult) -> str:
    lines: List[str] = ["OnboardBot Results", ""]
    lines.append(f"  {len(result.steps)} steps completed successfully")
    if result.errors:
        lines.append(f"  {len(result.errors)} steps had errors")

    if result.guide is not None:
        lines.append("")
        lines.append(f"  Guide saved to: {result.guide.output_path}")
        lines.append(f"  Guide size: {len(result.guide.content) / 1024:.1f} KB")

    lines += ["", "  Pipeline Steps:"]
    for outcome in result.steps:
        line = f"  [ok] {outcome.step}"
        tech_stack = outcome.metrics.get("techStack")
        if tech_stack:
            line += f" ({', '.join(tech_stack)})"
        if outcome.metrics.get("resourceCount"):
            line += f" ({outcome.metrics['resourceCount']} resources)"
        if outcome.metrics.get("people"):
            line += f" ({outcome.metrics['people']} people found)"
        lines.append(line)
    for failure in result.errors:
        lines.append(f"  [failed] {failure.step}: {failure.error}")
    return "\n".join(lines)


def format_scan(analysis: RepositoryAnalysis) -> str:
    lines = [
        f"Repository: {analysis.repo_full_name}",
        f"Tech stack: {', '.join(analysis.tech_stack) or 'Not detected'}",
        f"Top-level entries: {len(analysis.structure)}",
        f"Docs summarised: {len(analysis.docs)}",
        f"Recent pull requests: {len(analysis.pr_activity)}",
        f"Open issues: {len(analysis.issues)}",
        f"Discussions: {len(analysis.discussions)}",
    ]
    for doc in analysis.docs:
        lines.append(f"  - {doc.file}: {doc.summary}")
    return "\n".join(lines)


__all__ = ["format_duration", "format_results", "format_scan"]
