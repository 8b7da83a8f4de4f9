"""Data models exchanged between the importer stages.

Input records (Epic, Story) come from the data file. CapabilitySet is computed
once per run from the project's issue type schema and never changes afterwards.
CreatedRecord and LinkOutcome are produced while records are written to Jira.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Epic summary -> Jira issue key. Owned by the orchestrator for one run.
EpicKeyMap = dict[str, str]


@dataclass
class Epic:
    """A top-level grouping record."""

    summary: str
    description: str = ""
    priority: str | None = None
    labels: list[str] = field(default_factory=list)
    component: str | None = None


@dataclass
class Story(Epic):
    """A leaf record, optionally belonging to the epic whose summary is epic_link."""

    epic_link: str | None = None


@dataclass
class ImportData:
    """Entity lists handed to the orchestrator."""

    epics: list[Epic] = field(default_factory=list)
    stories: list[Story] = field(default_factory=list)


@dataclass(frozen=True)
class IssueType:
    """An issue type as reported by the create-metadata endpoint."""

    id: str
    name: str
    subtask: bool = False

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> IssueType:
        return cls(id=str(data["id"]), name=data.get("name") or "", subtask=bool(data.get("subtask")))


@dataclass(frozen=True)
class CapabilitySet:
    """What the target project supports, as discovered by the capability probe."""

    epic_type: IssueType
    story_type: IssueType
    subtask_type: IssueType | None
    hierarchy_supported: bool

    @property
    def epic_type_id(self) -> str:
        return self.epic_type.id

    @property
    def story_type_id(self) -> str:
        return self.story_type.id

    @property
    def subtask_type_id(self) -> str | None:
        return self.subtask_type.id if self.subtask_type else None

    @property
    def can_create_native_children(self) -> bool:
        """True when stories may be created directly under their epic."""
        return self.hierarchy_supported and self.subtask_type is not None


@dataclass
class CreatedRecord:
    """A record that exists in Jira."""

    key: str
    epic_link: str | None = None
    linked_as_native: bool = False
    # None when the input had no description to attach
    description_attached: bool | None = None


@dataclass(frozen=True)
class LinkOutcome:
    """Result of linking one story to its epic after creation."""

    success: bool
    strategy_name: str | None = None
    replacement_key: str | None = None
