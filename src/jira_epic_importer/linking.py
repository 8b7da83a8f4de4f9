"""Link stories to their epics after creation.

Used for stories that could not be created as native children of their epic.
Strategies are tried in order and the first that Jira accepts wins:

1. convert-to-subtask: change the story into a sub-task with the epic as parent
2. issue-link-relates: "Relates" link between story and epic
3. issue-link-blocks: "Blocks" link with the epic blocking the story
4. epic-link-customfield: set an "Epic Link"-like custom field to the epic key
5. recreate-as-subtask: create a copy of the story as a sub-task of the epic
   and relate it to the original, which is left in place
6. add-epic-label: tag the story with a label derived from the epic key
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Final, NamedTuple

from .capabilities import fetch_issue_types, select_subtask_type
from .chain import Strategy, run_chain
from .exceptions import StrategyError
from .models import LinkOutcome

if TYPE_CHECKING:
    from .models import CreatedRecord, EpicKeyMap, IssueType
    from .protocols import IssueTracker
    from .utils import Pacing

logger: logging.Logger = logging.getLogger(__name__)

RELATES_LINK_TYPE: Final[str] = "Relates"
BLOCKS_LINK_TYPE: Final[str] = "Blocks"
EPIC_LINK_FIELD_NAME: Final[str] = "Epic Link"


class LinkPair(NamedTuple):
    story_key: str
    epic_key: str


def find_epic_link_field(fields: list[dict[str, Any]]) -> str | None:
    """Return the id of the field most likely to hold an epic link, or None.

    Matches by name, so the result is a guess: an exact "Epic Link" name, then
    any name containing "Epic", then a custom schema mentioning "epic".
    """
    priority = [
        lambda f: f.get("name") == EPIC_LINK_FIELD_NAME,
        lambda f: "Epic" in (f.get("name") or ""),
        lambda f: "epic" in ((f.get("schema") or {}).get("custom") or ""),
    ]
    for predicate in priority:
        for field in fields:
            if field.get("id") and predicate(field):
                return field["id"]
    return None


def epic_label(epic_key: str) -> str:
    """Label used to tag stories with their epic, e.g. PMAC-12 -> Epic_PMAC_12."""
    return "Epic_" + re.sub(r"[^A-Za-z0-9_]", "_", epic_key)


class LinkStrategyEngine:
    """Applies the ordered linking strategies to (story, epic) pairs."""

    def __init__(self, client: IssueTracker, project_key: str, pacing: Pacing) -> None:
        self.client: IssueTracker = client
        self.project_key: str = project_key
        self.pacing: Pacing = pacing

    @property
    def strategies(self) -> list[Strategy[LinkPair, str | None]]:
        return [
            Strategy("convert-to-subtask", self.convert_to_subtask),
            Strategy("issue-link-relates", self.link_relates),
            Strategy("issue-link-blocks", self.link_blocks),
            Strategy("epic-link-customfield", self.set_epic_link_field),
            Strategy("recreate-as-subtask", self.recreate_as_subtask),
            Strategy("add-epic-label", self.add_epic_label),
        ]

    def _subtask_type(self) -> IssueType:
        subtask_type = select_subtask_type(fetch_issue_types(self.client, self.project_key))
        if subtask_type is None:
            msg = "No sub-task issue type found"
            raise StrategyError(msg)
        logger.debug(f"Found sub-task type: {subtask_type.name} ({subtask_type.id})")
        return subtask_type

    def convert_to_subtask(self, pair: LinkPair) -> None:
        subtask_type = self._subtask_type()
        self.client.update_issue(
            pair.story_key,
            {"fields": {"issuetype": {"id": subtask_type.id}, "parent": {"key": pair.epic_key}}},
        )

    def link_relates(self, pair: LinkPair) -> None:
        self.client.create_issue_link(RELATES_LINK_TYPE, inward_key=pair.story_key, outward_key=pair.epic_key)

    def link_blocks(self, pair: LinkPair) -> None:
        self.client.create_issue_link(BLOCKS_LINK_TYPE, inward_key=pair.epic_key, outward_key=pair.story_key)

    def set_epic_link_field(self, pair: LinkPair) -> None:
        field_id = find_epic_link_field(self.client.get_fields())
        if field_id is None:
            msg = "Epic Link field not found"
            raise StrategyError(msg)
        logger.debug(f"Found Epic Link field: {field_id}")
        self.client.update_issue(pair.story_key, {"fields": {field_id: pair.epic_key}})

    def recreate_as_subtask(self, pair: LinkPair) -> str:
        """Create a sub-task copy of the story under the epic; returns the new key.

        The original story is not deleted or closed. The copy is related to it.
        """
        story_fields = self.client.get_issue(pair.story_key).get("fields") or {}
        subtask_type = self._subtask_type()

        fields: dict[str, Any] = {
            "project": {"key": self.project_key},
            "summary": story_fields.get("summary") or pair.story_key,
            "issuetype": {"id": subtask_type.id},
            "parent": {"key": pair.epic_key},
        }
        if story_fields.get("description"):
            fields["description"] = story_fields["description"]

        created = self.client.create_issue(fields)
        new_key = str(created.get("key") or created["id"])
        logger.info(f"Created new sub-task {new_key} from {pair.story_key}")

        self.client.create_issue_link(RELATES_LINK_TYPE, inward_key=new_key, outward_key=pair.story_key)
        return new_key

    def add_epic_label(self, pair: LinkPair) -> None:
        epic_fields = self.client.get_issue(pair.epic_key, fields=["summary"]).get("fields") or {}
        label = epic_label(pair.epic_key)
        logger.debug(f"Tagging {pair.story_key} with {label} for epic '{epic_fields.get('summary', '')}'")
        self.client.update_issue(pair.story_key, {"update": {"labels": [{"add": label}]}})

    def link(self, story_key: str, epic_key: str) -> LinkOutcome:
        """Link a story to an epic with the first strategy Jira accepts."""
        logger.info(f"Attempting to link story {story_key} to epic {epic_key}...")
        outcome = run_chain(
            self.strategies,
            LinkPair(story_key, epic_key),
            subject=f"link {story_key} -> {epic_key}",
            pause=self.pacing.after_link_attempt,
        )
        if not outcome.succeeded:
            logger.warning(f"All approaches to link story {story_key} to epic {epic_key} failed")
            return LinkOutcome(success=False)

        logger.info(f"Linked {story_key} to {epic_key} using {outcome.strategy_name}")
        return LinkOutcome(success=True, strategy_name=outcome.strategy_name, replacement_key=outcome.value)

    def link_record(self, record: CreatedRecord, epic_keys: EpicKeyMap) -> LinkOutcome | None:
        """Link a created story to the epic its epic_link names.

        Returns:
            None when the record needs no deferred link (already a native child,
            no epic_link, or an epic that was never created)
        """
        if record.linked_as_native or not record.epic_link or record.epic_link not in epic_keys:
            return None
        return self.link(record.key, epic_keys[record.epic_link])
