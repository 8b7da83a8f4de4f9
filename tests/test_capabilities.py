"""Tests for issue type classification and hierarchy detection."""

from unittest.mock import Mock

import pytest

from jira_epic_importer.capabilities import (
    has_settable_parent,
    probe_capabilities,
    select_epic_type,
    select_story_type,
    select_subtask_type,
)
from jira_epic_importer.exceptions import CapabilityProbeError, JiraApiError
from jira_epic_importer.models import IssueType

from .conftest import EPIC_TYPE, STORY_TYPE, SUBTASK_TYPE, TASK_TYPE, issue_type_json


@pytest.mark.unit
class TestSelectEpicType:
    def test_exact_name_wins(self) -> None:
        types = [TASK_TYPE, IssueType("1", "Big Epic"), EPIC_TYPE]
        assert select_epic_type(types) == EPIC_TYPE

    def test_name_containing_epic(self) -> None:
        big_epic = IssueType("1", "Big Epic")
        assert select_epic_type([TASK_TYPE, big_epic]) == big_epic

    def test_task_before_first(self) -> None:
        assert select_epic_type([STORY_TYPE, TASK_TYPE]) == TASK_TYPE

    def test_falls_back_to_first(self) -> None:
        bug = IssueType("7", "Bug")
        assert select_epic_type([bug, STORY_TYPE]) == bug


@pytest.mark.unit
class TestSelectStoryType:
    def test_exact_name_wins(self) -> None:
        assert select_story_type([TASK_TYPE, IssueType("1", "User Story"), STORY_TYPE]) == STORY_TYPE

    def test_name_containing_story(self) -> None:
        user_story = IssueType("1", "User Story")
        assert select_story_type([TASK_TYPE, user_story]) == user_story

    def test_task_must_not_be_subtask(self) -> None:
        subtask_task = IssueType("1", "Task", subtask=True)
        assert select_story_type([subtask_task, TASK_TYPE]) == TASK_TYPE

    def test_any_non_subtask(self) -> None:
        bug = IssueType("7", "Bug")
        assert select_story_type([SUBTASK_TYPE, bug]) == bug

    def test_falls_back_to_first(self) -> None:
        assert select_story_type([SUBTASK_TYPE]) == SUBTASK_TYPE


@pytest.mark.unit
class TestSelectSubtaskType:
    def test_exact_name_wins(self) -> None:
        flagged = IssueType("9", "Child", subtask=True)
        assert select_subtask_type([flagged, SUBTASK_TYPE]) == SUBTASK_TYPE

    def test_name_containing_subtask(self) -> None:
        named = IssueType("9", "Subtask")
        assert select_subtask_type([TASK_TYPE, named]) == named

    def test_flagged_type(self) -> None:
        flagged = IssueType("9", "Child", subtask=True)
        assert select_subtask_type([TASK_TYPE, flagged]) == flagged

    def test_none_when_absent(self) -> None:
        assert select_subtask_type([EPIC_TYPE, STORY_TYPE, TASK_TYPE]) is None


@pytest.mark.unit
class TestHasSettableParent:
    def test_missing_parent(self) -> None:
        assert not has_settable_parent({"summary": {}})

    def test_parent_without_operations(self) -> None:
        assert has_settable_parent({"parent": {"required": True}})

    def test_parent_with_set_operation(self) -> None:
        assert has_settable_parent({"parent": {"operations": ["set"]}})

    def test_parent_not_settable(self) -> None:
        assert not has_settable_parent({"parent": {"operations": []}})


@pytest.mark.unit
class TestProbeCapabilities:
    def test_hierarchy_supported(self, jira: Mock) -> None:
        all_types = [issue_type_json(t, {}) for t in (EPIC_TYPE, STORY_TYPE, TASK_TYPE, SUBTASK_TYPE)]
        scoped = [issue_type_json(SUBTASK_TYPE, {"parent": {"operations": ["set"]}})]
        jira.get_create_meta.side_effect = [all_types, scoped]

        capabilities = probe_capabilities(jira, "PMAC")

        assert capabilities.epic_type_id == EPIC_TYPE.id
        assert capabilities.story_type_id == STORY_TYPE.id
        assert capabilities.subtask_type_id == SUBTASK_TYPE.id
        assert capabilities.hierarchy_supported
        jira.get_create_meta.assert_called_with("PMAC", issue_type_ids=[SUBTASK_TYPE.id], expand_fields=True)

    def test_no_parent_field(self, jira: Mock) -> None:
        all_types = [issue_type_json(t) for t in (EPIC_TYPE, STORY_TYPE, SUBTASK_TYPE)]
        scoped = [issue_type_json(SUBTASK_TYPE, {"summary": {}})]
        jira.get_create_meta.side_effect = [all_types, scoped]

        assert not probe_capabilities(jira, "PMAC").hierarchy_supported

    def test_no_subtask_type_skips_second_query(self, jira: Mock) -> None:
        jira.get_create_meta.return_value = [issue_type_json(t) for t in (EPIC_TYPE, STORY_TYPE)]

        capabilities = probe_capabilities(jira, "PMAC")

        assert capabilities.subtask_type is None
        assert not capabilities.hierarchy_supported
        jira.get_create_meta.assert_called_once()

    def test_second_query_failure_is_not_fatal(self, jira: Mock) -> None:
        jira.get_create_meta.side_effect = [
            [issue_type_json(t) for t in (EPIC_TYPE, STORY_TYPE, SUBTASK_TYPE)],
            JiraApiError("Jira returned 500", status=500),
        ]

        capabilities = probe_capabilities(jira, "PMAC")

        assert capabilities.subtask_type == SUBTASK_TYPE
        assert not capabilities.hierarchy_supported

    def test_no_issue_types_is_fatal(self, jira: Mock) -> None:
        jira.get_create_meta.return_value = []

        with pytest.raises(CapabilityProbeError, match="No issue types found"):
            probe_capabilities(jira, "PMAC")

    def test_schema_query_failure_is_fatal(self, jira: Mock) -> None:
        jira.get_create_meta.side_effect = JiraApiError("Jira returned 403", status=403)

        with pytest.raises(CapabilityProbeError, match="Failed to read issue types"):
            probe_capabilities(jira, "PMAC")
