"""Create epics and stories with a two-tier creation protocol.

Tier 1 creates the record with the probed issue type and only the required
fields. If Jira rejects it, tier 2 retries with the generic "Task" type.
Stories whose epic is known are first tried as native children of the epic
when the project supports it.

A record counts as created once Jira returns its key. Descriptions are attached
afterwards and a failure there never undoes the record.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from .chain import ChainOutcome, Strategy, run_chain
from .models import CreatedRecord

if TYPE_CHECKING:
    from .formatting import ContentFormatter
    from .models import CapabilitySet, Epic, EpicKeyMap, Story
    from .protocols import IssueTracker

logger: logging.Logger = logging.getLogger(__name__)

FALLBACK_ISSUE_TYPE: Final[str] = "Task"
NATIVE_CHILD_STRATEGY: Final[str] = "native-subtask"


def _issue_key(response: dict[str, Any]) -> str:
    return str(response.get("key") or response["id"])


class HierarchyBuilder:
    """Creates epics and stories in one project."""

    def __init__(self, client: IssueTracker, project_key: str, formatter: ContentFormatter) -> None:
        self.client: IssueTracker = client
        self.project_key: str = project_key
        self.formatter: ContentFormatter = formatter

    def _create(self, summary: str, issue_type: dict[str, str], parent_key: str | None = None) -> str:
        fields: dict[str, Any] = {
            "project": {"key": self.project_key},
            "summary": summary,
            "issuetype": issue_type,
        }
        if parent_key:
            fields["parent"] = {"key": parent_key}
        return _issue_key(self.client.create_issue(fields))

    def _fallback_tier(self, record: Epic) -> str:
        return self._create(record.summary, {"name": FALLBACK_ISSUE_TYPE})

    def _attach_description(self, key: str, record: Epic) -> bool | None:
        if not record.description:
            return None
        return self.formatter.set_description(key, record.description).succeeded

    def epic_tiers(self, capabilities: CapabilitySet) -> list[Strategy[Epic, str]]:
        return [
            Strategy("probed-type", lambda epic: self._create(epic.summary, {"id": capabilities.epic_type_id})),
            Strategy("fallback-type", self._fallback_tier),
        ]

    def story_tiers(self, capabilities: CapabilitySet, parent_epic_key: str | None) -> list[Strategy[Story, str]]:
        tiers: list[Strategy[Story, str]] = []
        subtask_type_id = capabilities.subtask_type_id
        if capabilities.hierarchy_supported and subtask_type_id and parent_epic_key:
            tiers.append(
                Strategy(
                    NATIVE_CHILD_STRATEGY,
                    lambda story: self._create(story.summary, {"id": subtask_type_id}, parent_key=parent_epic_key),
                )
            )
        tiers.append(
            Strategy("probed-type", lambda story: self._create(story.summary, {"id": capabilities.story_type_id}))
        )
        tiers.append(Strategy("fallback-type", self._fallback_tier))
        return tiers

    def create_epic(self, epic: Epic, capabilities: CapabilitySet, epic_keys: EpicKeyMap) -> CreatedRecord | None:
        """Create an epic and record its key under its summary.

        A later epic with the same summary replaces the mapping entry.

        Returns:
            The created record, or None when both tiers were rejected
        """
        logger.info(f"Creating epic: {epic.summary}")
        outcome: ChainOutcome[str] = run_chain(
            self.epic_tiers(capabilities), epic, subject=f"epic '{epic.summary}'"
        )
        if not outcome.succeeded or outcome.value is None:
            logger.error(f"Epic '{epic.summary}' could not be created and is skipped")
            return None

        key = outcome.value
        if epic.summary in epic_keys:
            logger.info(f"Duplicate epic summary '{epic.summary}': {epic_keys[epic.summary]} replaced by {key}")
        epic_keys[epic.summary] = key
        logger.info(f"Epic created: {key} ({outcome.strategy_name})")

        return CreatedRecord(key=key, description_attached=self._attach_description(key, epic))

    def create_story(
        self,
        story: Story,
        capabilities: CapabilitySet,
        parent_epic_key: str | None,
    ) -> CreatedRecord | None:
        """Create a story, directly under its epic when the project allows it.

        Returns:
            The created record, or None when every tier was rejected
        """
        logger.info(f"Creating story: {story.summary}")
        outcome: ChainOutcome[str] = run_chain(
            self.story_tiers(capabilities, parent_epic_key), story, subject=f"story '{story.summary}'"
        )
        if not outcome.succeeded or outcome.value is None:
            logger.error(f"Story '{story.summary}' could not be created and is skipped")
            return None

        key = outcome.value
        linked_as_native = outcome.strategy_name == NATIVE_CHILD_STRATEGY
        if linked_as_native:
            logger.info(f"Story created as sub-task of {parent_epic_key}: {key}")
        else:
            logger.info(f"Story created: {key} ({outcome.strategy_name})")

        return CreatedRecord(
            key=key,
            epic_link=story.epic_link,
            linked_as_native=linked_as_native,
            description_attached=self._attach_description(key, story),
        )
