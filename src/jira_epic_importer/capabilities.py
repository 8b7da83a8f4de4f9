"""Discover which issue types a project offers and whether sub-tasks take a parent.

Each role (epic, story, sub-task) is resolved with a fixed priority list of
predicates over the project's issue types; the first predicate matching any
type wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from .exceptions import CapabilityProbeError, JiraApiError
from .models import CapabilitySet, IssueType

if TYPE_CHECKING:
    from .protocols import IssueTracker

logger: logging.Logger = logging.getLogger(__name__)

Predicate = Callable[[IssueType], bool]

EPIC_TYPE_PRIORITY: list[Predicate] = [
    lambda t: t.name == "Epic",
    lambda t: "Epic" in t.name,
    lambda t: t.name == "Task",
]

STORY_TYPE_PRIORITY: list[Predicate] = [
    lambda t: t.name == "Story",
    lambda t: "Story" in t.name,
    lambda t: t.name == "Task" and not t.subtask,
    lambda t: not t.subtask,
]

SUBTASK_TYPE_PRIORITY: list[Predicate] = [
    lambda t: t.name == "Sub-task",
    lambda t: "Subtask" in t.name,
    lambda t: t.subtask,
]


def _first_match(issue_types: Sequence[IssueType], priority: Sequence[Predicate]) -> IssueType | None:
    for predicate in priority:
        for issue_type in issue_types:
            if predicate(issue_type):
                return issue_type
    return None


def select_epic_type(issue_types: Sequence[IssueType]) -> IssueType:
    """Epic, then any *Epic*, then Task, then the first type."""
    return _first_match(issue_types, EPIC_TYPE_PRIORITY) or issue_types[0]


def select_story_type(issue_types: Sequence[IssueType]) -> IssueType:
    """Story, then any *Story*, then a non-sub-task Task, then any non-sub-task, then the first type."""
    return _first_match(issue_types, STORY_TYPE_PRIORITY) or issue_types[0]


def select_subtask_type(issue_types: Sequence[IssueType]) -> IssueType | None:
    """Sub-task, then any *Subtask*, then any type flagged as sub-task; None if there is none."""
    return _first_match(issue_types, SUBTASK_TYPE_PRIORITY)


def has_settable_parent(fields: dict[str, Any]) -> bool:
    """Check whether a create-metadata field map exposes a parent field that can be set."""
    parent = fields.get("parent")
    if not parent:
        return False
    operations = parent.get("operations") if isinstance(parent, dict) else None
    # Older instances omit the operations list; presence alone counts there.
    return operations is None or "set" in operations


def fetch_issue_types(client: IssueTracker, project_key: str) -> list[IssueType]:
    """Return the project's issue types (without field expansion)."""
    return [IssueType.from_json(data) for data in client.get_create_meta(project_key)]


def _probe_hierarchy(client: IssueTracker, project_key: str, subtask_type: IssueType) -> bool:
    try:
        scoped = client.get_create_meta(project_key, issue_type_ids=[subtask_type.id], expand_fields=True)
    except JiraApiError as e:
        logger.warning(f"Could not determine if hierarchy is supported: {e}")
        return False

    fields: dict[str, Any] = (scoped[0].get("fields") or {}) if scoped else {}
    return has_settable_parent(fields)


def probe_capabilities(client: IssueTracker, project_key: str) -> CapabilitySet:
    """Classify the project's issue types for epics, stories and sub-tasks.

    Args:
        client: Jira client
        project_key: Key of the project records will be created in

    Returns:
        The CapabilitySet used for the rest of the run

    Raises:
        CapabilityProbeError: If the schema cannot be read or the project has no issue types
    """
    try:
        raw_types = client.get_create_meta(project_key, expand_fields=True)
    except JiraApiError as e:
        msg = f"Failed to read issue types for project {project_key}: {e}"
        raise CapabilityProbeError(msg) from e

    if not raw_types:
        msg = f"No issue types found for project {project_key}"
        raise CapabilityProbeError(msg)

    issue_types = [IssueType.from_json(data) for data in raw_types]
    logger.info(f"Available issue types: {', '.join(t.name for t in issue_types)}")

    epic_type = select_epic_type(issue_types)
    story_type = select_story_type(issue_types)
    subtask_type = select_subtask_type(issue_types)

    hierarchy_supported = False
    if subtask_type is not None:
        hierarchy_supported = _probe_hierarchy(client, project_key, subtask_type)
        if hierarchy_supported:
            logger.info(f"Hierarchy supported: {subtask_type.name} issues can have parents")

    capabilities = CapabilitySet(
        epic_type=epic_type,
        story_type=story_type,
        subtask_type=subtask_type,
        hierarchy_supported=hierarchy_supported,
    )
    logger.info(
        f"Will use {epic_type.name} for epics, {story_type.name} for stories"
        + (f", and {subtask_type.name} for sub-tasks" if subtask_type else "")
    )
    return capabilities
