"""Tests for onboardbot.collectors.resources."""

from __future__ import annotations

import asyncio
import json

import pytest

from onboardbot.collectors.resources import fetch_doc_page, fetch_learning_resources
from onboardbot.prompting.constants import ARCHITECTURE_CATEGORY, TUTORIALS_CATEGORY
from onboardbot.session import DemoSession, SessionError
from tests._fixtures.sessions import FailingSession, ScriptedSession


def test_groups_follow_tech_stack_order() -> None:
    session = DemoSession()
    groups = asyncio.run(fetch_learning_resources(session, ["TypeScript", "Docker"]))

    assert [group.technology for group in groups] == [
        "TypeScript",
        "Docker",
        ARCHITECTURE_CATEGORY,
        TUTORIALS_CATEGORY,
    ]
    assert len(session.prompts) == 4
    assert groups[2].resources[0].type == "sample"
    assert groups[3].resources[0].estimated_time == "45 min"


def test_empty_tech_stack_still_searches_categories() -> None:
    session = ScriptedSession([])
    groups = asyncio.run(fetch_learning_resources(session, []))

    assert [group.technology for group in groups] == [ARCHITECTURE_CATEGORY, TUTORIALS_CATEGORY]
    assert all(group.resources == () for group in groups)
    assert "general software engineering" in session.prompts[0]


def test_unparseable_search_keeps_empty_group() -> None:
    session = ScriptedSession(
        [
            ('"Go getting started guide"', "No results, sorry."),
            ("architecture best practices", json.dumps([{"title": "Patterns", "url": "https://example.test"}])),
        ]
    )
    groups = asyncio.run(fetch_learning_resources(session, ["Go"]))

    assert groups[0].technology == "Go"
    assert groups[0].resources == ()
    assert groups[1].resources[0].title == "Patterns"
    assert groups[1].resources[0].description == ""


def test_search_failure_fails_whole_collector() -> None:
    session = FailingSession(should_fail=lambda prompt: "interactive tutorials" in prompt)
    with pytest.raises(SessionError):
        asyncio.run(fetch_learning_resources(session, ["Go"]))


def test_fetch_doc_page_returns_free_text() -> None:
    session = DemoSession()
    summary = asyncio.run(fetch_doc_page(session, "https://learn.microsoft.com/en-us/azure/"))

    assert summary.startswith("- ")
    assert "https://learn.microsoft.com/en-us/azure/" in session.prompts[0]
