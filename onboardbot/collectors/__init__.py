"""Collectors that gather onboarding data through a chat session."""

from .repository import analyze_repository, detect_tech_stack, select_doc_targets
from .resources import fetch_doc_page, fetch_learning_resources
from .team import gather_team_context

__all__ = [
    "analyze_repository",
    "detect_tech_stack",
    "fetch_doc_page",
    "fetch_learning_resources",
    "gather_team_context",
    "select_doc_targets",
]
