"""Learning-resource collector backed by Microsoft Learn MCP searches."""

from __future__ import annotations

from typing import List, Sequence

from ..extraction import extract_array
from ..logging import get_logger
from ..models import LearningResource, LearningResourceGroup, records_from
from ..prompting.builder import (
    architecture_docs_prompt,
    doc_page_prompt,
    tech_docs_prompt,
    tutorials_prompt,
)
from ..prompting.constants import ARCHITECTURE_CATEGORY, TUTORIALS_CATEGORY
from ..session import Session

_logger = get_logger("collectors.resources")


async def _search(session: Session, prompt: str) -> tuple[LearningResource, ...]:
    reply = await session.send_and_wait(prompt)
    return records_from(extract_array(reply.message), LearningResource.from_payload)


async def fetch_learning_resources(
    session: Session, tech_stack: Sequence[str]
) -> List[LearningResourceGroup]:
    """Return one group per technology followed by the two synthetic categories.

    Groups keep the order of ``tech_stack``; a search that yields nothing still
    produces an empty group.
    """
    groups: List[LearningResourceGroup] = []
    for tech in tech_stack:
        _logger.debug("Searching learning resources for %s", tech)
        groups.append(
            LearningResourceGroup(technology=tech, resources=await _search(session, tech_docs_prompt(tech)))
        )

    groups.append(
        LearningResourceGroup(
            technology=ARCHITECTURE_CATEGORY,
            resources=await _search(session, architecture_docs_prompt(tech_stack)),
        )
    )
    groups.append(
        LearningResourceGroup(
            technology=TUTORIALS_CATEGORY,
            resources=await _search(session, tutorials_prompt(tech_stack)),
        )
    )
    return groups


async def fetch_doc_page(session: Session, url: str) -> str:
    """Summarise a single documentation page as free-form Markdown."""
    reply = await session.send_and_wait(doc_page_prompt(url))
    return reply.message


__all__ = ["fetch_doc_page", "fetch_learning_resources"]
