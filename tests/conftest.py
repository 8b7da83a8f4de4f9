"""
Pytest configuration and fixtures.

Every test drives the importer against a Mock of JiraClient; nothing talks to
a real Jira instance. Pacing is disabled so tests never sleep.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest

from jira_epic_importer.jira_client import JiraClient
from jira_epic_importer.models import CapabilitySet, IssueType
from jira_epic_importer.utils import Pacing

EPIC_TYPE = IssueType(id="10000", name="Epic")
STORY_TYPE = IssueType(id="10001", name="Story")
TASK_TYPE = IssueType(id="10002", name="Task")
SUBTASK_TYPE = IssueType(id="10003", name="Sub-task", subtask=True)


def issue_type_json(issue_type: IssueType, fields: dict[str, Any] | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {"id": issue_type.id, "name": issue_type.name, "subtask": issue_type.subtask}
    if fields is not None:
        data["fields"] = fields
    return data


@pytest.fixture
def jira() -> Mock:
    """Mock Jira client with the JiraClient interface."""
    client = Mock(spec=JiraClient)
    client.host = "https://example.atlassian.net"
    return client


@pytest.fixture
def no_pacing() -> Pacing:
    return Pacing.disabled()


@pytest.fixture
def hierarchy_capabilities() -> CapabilitySet:
    return CapabilitySet(
        epic_type=EPIC_TYPE, story_type=STORY_TYPE, subtask_type=SUBTASK_TYPE, hierarchy_supported=True
    )


@pytest.fixture
def flat_capabilities() -> CapabilitySet:
    return CapabilitySet(
        epic_type=EPIC_TYPE, story_type=STORY_TYPE, subtask_type=SUBTASK_TYPE, hierarchy_supported=False
    )
