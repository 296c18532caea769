"""Core records shared across onboardbot pipeline stages.

Collectors build these from model output, which is untrusted: every
``from_payload`` constructor tolerates missing keys, wrong scalar types and
non-mapping list entries instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

T = TypeVar("T")


def _as_str(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _as_optional_str(value: Any) -> Optional[str]:
    text = _as_str(value)
    return text or None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip().lstrip("#"))
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return False


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in (_as_str(entry) for entry in value) if item)


def records_from(value: Any, factory: Callable[[Mapping[str, Any]], T]) -> Tuple[T, ...]:
    """Convert a decoded JSON array into records, dropping non-mapping entries."""
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(factory(entry) for entry in value if isinstance(entry, Mapping))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def to_payload(value: Any) -> Any:
    """Return a JSON-compatible view of ``value`` using camelCase keys."""
    if is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "as_payload"):
            return value.as_payload()
        payload: Dict[str, Any] = {}
        for item in fields(value):
            raw = getattr(value, item.name)
            if raw is None:
                continue
            key = item.metadata.get("key", _camel(item.name))
            payload[key] = to_payload(raw)
        return payload
    if isinstance(value, (list, tuple)):
        return [to_payload(entry) for entry in value]
    if isinstance(value, Mapping):
        return {str(key): to_payload(entry) for key, entry in value.items()}
    if isinstance(value, Path):
        return str(value)
    return value


# ----------------------------------------------------------------------
# Repository analysis


@dataclass(frozen=True)
class DocSummary:
    """Summary of a documentation file for a newcomer."""

    file: str
    summary: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DocSummary":
        return cls(file=_as_str(payload.get("file")), summary=_as_str(payload.get("summary")))


@dataclass(frozen=True)
class PullRequest:
    number: Optional[int]
    title: str
    state: str
    author: str
    description: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PullRequest":
        return cls(
            number=_as_int(payload.get("number")),
            title=_as_str(payload.get("title")),
            state=_as_str(payload.get("state")),
            author=_as_str(payload.get("author")),
            description=_as_str(payload.get("description")),
        )


@dataclass(frozen=True)
class Issue:
    number: Optional[int]
    title: str
    labels: Tuple[str, ...]
    summary: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Issue":
        return cls(
            number=_as_int(payload.get("number")),
            title=_as_str(payload.get("title")),
            labels=_as_str_tuple(payload.get("labels")),
            summary=_as_str(payload.get("summary")),
        )


@dataclass(frozen=True)
class Discussion:
    title: str
    category: str
    author: str
    summary: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Discussion":
        return cls(
            title=_as_str(payload.get("title")),
            category=_as_str(payload.get("category")),
            author=_as_str(payload.get("author")),
            summary=_as_str(payload.get("summary")),
        )


@dataclass(frozen=True)
class RepositoryAnalysis:
    """Everything the repository collector learned about one repository."""

    repo_full_name: str
    structure: Tuple[str, ...] = ()
    tech_stack: Tuple[str, ...] = ()
    docs: Tuple[DocSummary, ...] = ()
    pr_activity: Tuple[PullRequest, ...] = ()
    issues: Tuple[Issue, ...] = ()
    discussions: Tuple[Discussion, ...] = ()

    @classmethod
    def empty(cls, repo_full_name: str) -> "RepositoryAnalysis":
        return cls(repo_full_name=repo_full_name)


# ----------------------------------------------------------------------
# Learning resources


@dataclass(frozen=True)
class LearningResource:
    title: str
    url: str
    description: str
    type: Optional[str] = None
    estimated_time: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "LearningResource":
        return cls(
            title=_as_str(payload.get("title")),
            url=_as_str(payload.get("url")),
            description=_as_str(payload.get("description")),
            type=_as_optional_str(payload.get("type")),
            estimated_time=_as_optional_str(payload.get("estimatedTime")),
        )


@dataclass(frozen=True)
class LearningResourceGroup:
    """Resources found for one technology or synthetic category."""

    technology: str
    resources: Tuple[LearningResource, ...] = ()


# ----------------------------------------------------------------------
# Team context


@dataclass(frozen=True)
class TeamDiscussion:
    topic: str
    channel: str
    summary: str
    date: str
    relevance: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TeamDiscussion":
        return cls(
            topic=_as_str(payload.get("topic")),
            channel=_as_str(payload.get("channel")),
            summary=_as_str(payload.get("summary")),
            date=_as_str(payload.get("date")),
            relevance=_as_str(payload.get("relevance")),
        )


@dataclass(frozen=True)
class TeamMember:
    name: str
    role: str
    reason: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TeamMember":
        return cls(
            name=_as_str(payload.get("name")),
            role=_as_str(payload.get("role")),
            reason=_as_str(payload.get("reason")),
        )


@dataclass(frozen=True)
class TeamEvent:
    event: str
    date: str
    recurring: bool
    relevance: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TeamEvent":
        return cls(
            event=_as_str(payload.get("event")),
            date=_as_str(payload.get("date")),
            recurring=_as_bool(payload.get("recurring")),
            relevance=_as_str(payload.get("relevance")),
        )


@dataclass(frozen=True)
class TeamNorms:
    """How the team communicates, reviews and ships."""

    communication_channels: Tuple[str, ...]
    meeting_cadence: str
    code_review_process: str
    deployment_process: str
    other_norms: Tuple[str, ...]

    @classmethod
    def placeholder(cls) -> "TeamNorms":
        """Defaults used when the norms reply cannot be parsed."""
        return cls(
            communication_channels=("Ask your team lead for relevant Teams channels",),
            meeting_cadence="Check your calendar for recurring team meetings",
            code_review_process="Check CONTRIBUTING.md in the repo",
            deployment_process="Check CI/CD workflows in .github/workflows/",
            other_norms=("Introduce yourself in the team channel on your first day!",),
        )

    @classmethod
    def unknown(cls) -> "TeamNorms":
        """Defaults used when the whole team-context stage failed."""
        return cls(
            communication_channels=(),
            meeting_cadence="Unknown",
            code_review_process="Check CONTRIBUTING.md",
            deployment_process="Check CI/CD workflows",
            other_norms=(),
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], default: "TeamNorms") -> "TeamNorms":
        channels = _as_str_tuple(payload.get("communicationChannels"))
        others = _as_str_tuple(payload.get("otherNorms"))
        return cls(
            communication_channels=channels or default.communication_channels,
            meeting_cadence=_as_str(payload.get("meetingCadence")) or default.meeting_cadence,
            code_review_process=_as_str(payload.get("codeReviewProcess"))
            or default.code_review_process,
            deployment_process=_as_str(payload.get("deploymentProcess"))
            or default.deployment_process,
            other_norms=others or default.other_norms,
        )


@dataclass(frozen=True)
class EmailInsight:
    subject: str
    sender: str = field(metadata={"key": "from"})
    date: str = ""
    summary: str = ""
    relevance: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EmailInsight":
        return cls(
            subject=_as_str(payload.get("subject")),
            sender=_as_str(payload.get("from")),
            date=_as_str(payload.get("date")),
            summary=_as_str(payload.get("summary")),
            relevance=_as_str(payload.get("relevance")),
        )


@dataclass(frozen=True)
class RelatedDocument:
    title: str
    type: str
    location: str
    last_modified: str
    summary: str
    relevance: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RelatedDocument":
        return cls(
            title=_as_str(payload.get("title")),
            type=_as_str(payload.get("type")),
            location=_as_str(payload.get("location")),
            last_modified=_as_str(payload.get("lastModified")),
            summary=_as_str(payload.get("summary")),
            relevance=_as_str(payload.get("relevance")),
        )


@dataclass(frozen=True)
class TeamContext:
    """The human side of onboarding gathered from Microsoft 365."""

    recent_discussions: Tuple[TeamDiscussion, ...] = ()
    team_members: Tuple[TeamMember, ...] = ()
    upcoming_events: Tuple[TeamEvent, ...] = ()
    team_norms: TeamNorms = field(default_factory=TeamNorms.unknown)
    email_insights: Tuple[EmailInsight, ...] = ()
    related_documents: Tuple[RelatedDocument, ...] = ()

    @classmethod
    def empty(cls) -> "TeamContext":
        return cls()


# ----------------------------------------------------------------------
# Run bookkeeping


@dataclass(frozen=True)
class StepOutcome:
    """A stage that completed, with counts derived from its output."""

    step: str
    metrics: Mapping[str, Any] = field(default_factory=dict)
    status: str = "success"

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"step": self.step, "status": self.status}
        payload.update(to_payload(dict(self.metrics)))
        return payload


@dataclass(frozen=True)
class StageFailure:
    step: str
    error: str


@dataclass(frozen=True)
class Guide:
    content: str
    output_path: Path


@dataclass
class PipelineRunResult:
    """Accumulates stage outcomes for one pipeline run."""

    steps: List[StepOutcome] = field(default_factory=list)
    errors: List[StageFailure] = field(default_factory=list)
    guide: Optional[Guide] = None

    def step_names(self) -> List[str]:
        return [outcome.step for outcome in self.steps]

    def failed_steps(self) -> List[str]:
        return [failure.step for failure in self.errors]


__all__ = [
    "DocSummary",
    "Discussion",
    "EmailInsight",
    "Guide",
    "Issue",
    "LearningResource",
    "LearningResourceGroup",
    "PipelineRunResult",
    "PullRequest",
    "RelatedDocument",
    "RepositoryAnalysis",
    "StageFailure",
    "StepOutcome",
    "TeamContext",
    "TeamDiscussion",
    "TeamEvent",
    "TeamMember",
    "TeamNorms",
    "records_from",
    "to_payload",
]
