"""Protocols defining the contracts the importer depends on.

The import architecture separates concerns into three parts:

1. ImportSource: yields the epics and stories to import (loaded from a file)
2. IssueTracker: the request/response surface of the Jira instance
3. ImportOrchestrator: sequences the stages and owns the epic key mapping

Keeping the tracker behind a protocol lets every stage be tested with a mock
and keeps Jira payload details inside jira_client.py and the stage modules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import Epic, Story


class ImportSource(Protocol):
    """Entity lists to import."""

    epics: list[Epic]
    stories: list[Story]


class IssueTracker(Protocol):
    """Protocol for the Jira instance records are written to.

    Every method raises JiraApiError when the request fails. Calls are
    synchronous and never overlap.
    """

    host: str

    def get_myself(self) -> dict[str, Any]:
        """Return the authenticated user (accountId, displayName, ...)."""
        ...

    def get_project(self, key: str) -> dict[str, Any] | None:
        """Return the project with this key, or None if it does not exist."""
        ...

    def create_project(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a project and return it (at least its key)."""
        ...

    def get_project_types(self) -> list[dict[str, Any]]:
        """Return the project type descriptors available to the user."""
        ...

    def get_create_meta(
        self,
        project_key: str,
        *,
        issue_type_ids: list[str] | None = None,
        expand_fields: bool = False,
    ) -> list[dict[str, Any]]:
        """Return the issue types of a project, optionally limited to some ids.

        With expand_fields, each issue type carries a "fields" mapping of the
        fields that can be set when creating an issue of that type.
        """
        ...

    def create_issue(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Create an issue and return the response (key, id)."""
        ...

    def get_issue(self, key: str, fields: list[str] | None = None) -> dict[str, Any]:
        """Return an issue with its fields."""
        ...

    def update_issue(self, key: str, payload: dict[str, Any]) -> None:
        """Edit an issue with a raw fields/update payload."""
        ...

    def create_component(self, name: str, project_key: str, description: str = "") -> dict[str, Any]:
        """Create a component in a project."""
        ...

    def create_issue_link(self, link_type: str, inward_key: str, outward_key: str) -> None:
        """Link two issues with the named link type."""
        ...

    def get_fields(self) -> list[dict[str, Any]]:
        """Return every system and custom field."""
        ...
