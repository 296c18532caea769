"""Team-context collector: the human side of onboarding via WorkIQ MCP."""

from __future__ import annotations

from typing import Mapping

from ..extraction import extract_array, extract_object
from ..logging import get_logger
from ..models import (
    EmailInsight,
    RelatedDocument,
    TeamContext,
    TeamDiscussion,
    TeamEvent,
    TeamMember,
    TeamNorms,
    records_from,
)
from ..prompting.builder import (
    email_insights_prompt,
    key_people_prompt,
    related_documents_prompt,
    team_discussions_prompt,
    team_norms_prompt,
    upcoming_events_prompt,
)
from ..session import Session

_logger = get_logger("collectors.team")


async def gather_team_context(
    session: Session, team_name: str, project_context: str
) -> TeamContext:
    """Query channels, people, calendar, norms, mail and documents in turn."""
    _logger.debug("Querying recent team discussions for %s", team_name)
    reply = await session.send_and_wait(team_discussions_prompt(team_name))
    discussions = records_from(extract_array(reply.message), TeamDiscussion.from_payload)

    _logger.debug("Identifying key people")
    reply = await session.send_and_wait(key_people_prompt(team_name, project_context))
    people = records_from(extract_array(reply.message), TeamMember.from_payload)

    _logger.debug("Checking upcoming events")
    reply = await session.send_and_wait(upcoming_events_prompt(team_name))
    events = records_from(extract_array(reply.message), TeamEvent.from_payload)

    _logger.debug("Finding team norms")
    reply = await session.send_and_wait(team_norms_prompt(team_name))
    placeholder = TeamNorms.placeholder()
    raw_norms = extract_object(reply.message, {})
    norms = (
        TeamNorms.from_payload(raw_norms, placeholder)
        if isinstance(raw_norms, Mapping) and raw_norms
        else placeholder
    )

    _logger.debug("Searching recent emails")
    reply = await session.send_and_wait(email_insights_prompt(team_name, project_context))
    emails = records_from(extract_array(reply.message), EmailInsight.from_payload)

    _logger.debug("Discovering related documents")
    reply = await session.send_and_wait(related_documents_prompt(team_name, project_context))
    documents = records_from(extract_array(reply.message), RelatedDocument.from_payload)

    return TeamContext(
        recent_discussions=discussions,
        team_members=people,
        upcoming_events=events,
        team_norms=norms,
        email_insights=emails,
        related_documents=documents,
    )


__all__ = ["gather_team_context"]
