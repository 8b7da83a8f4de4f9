"""Attach descriptions in whichever rich-text encoding the Jira instance accepts.

Jira Cloud expects Atlassian Document Format (ADF) for the description field,
but instances differ in which edit form they accept. The options below are
tried in order and the first accepted one wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Final

from .chain import ChainOutcome, Strategy, run_chain

if TYPE_CHECKING:
    from .protocols import IssueTracker
    from .utils import Pacing

logger: logging.Logger = logging.getLogger(__name__)

_BLANK_LINE: Final[re.Pattern[str]] = re.compile(r"\n[ \t]*\n")


def paragraph(text: str) -> dict[str, Any]:
    return {"type": "paragraph", "content": [{"type": "text", "text": text}]}


def adf_document(paragraphs: list[str]) -> dict[str, Any]:
    """Build an ADF document with one paragraph per entry."""
    return {"type": "doc", "version": 1, "content": [paragraph(text) for text in paragraphs]}


def split_paragraphs(text: str) -> list[str]:
    """Split text into blank-line-delimited blocks, dropping empty ones."""
    blocks = [block.strip("\n") for block in _BLANK_LINE.split(text)]
    return [block for block in blocks if block.strip()] or [text]


def update_set_payload(text: str) -> dict[str, Any]:
    return {"update": {"description": [{"set": adf_document([text])}]}}


def direct_field_payload(text: str) -> dict[str, Any]:
    return {"fields": {"description": adf_document([text])}}


def multi_paragraph_payload(text: str) -> dict[str, Any]:
    return {"fields": {"description": adf_document(split_paragraphs(text))}}


def plain_text_payload(text: str) -> dict[str, Any]:
    return {"fields": {"description": text}}


class ContentFormatter:
    """Sets issue descriptions, trying ADF variants before falling back to plain text."""

    def __init__(self, client: IssueTracker, pacing: Pacing) -> None:
        self.client: IssueTracker = client
        self.pacing: Pacing = pacing

    def _option(self, name: str, build: Callable[[str], dict[str, Any]]) -> Strategy[tuple[str, str], str]:
        def attempt(target: tuple[str, str]) -> str:
            issue_key, text = target
            self.client.update_issue(issue_key, build(text))
            return name

        return Strategy(name, attempt)

    @property
    def options(self) -> list[Strategy[tuple[str, str], str]]:
        return [
            self._option("update-set-operation", update_set_payload),
            self._option("direct-field-update", direct_field_payload),
            self._option("multi-paragraph", multi_paragraph_payload),
            self._option("plain-text", plain_text_payload),
        ]

    def set_description(self, issue_key: str, text: str) -> ChainOutcome[str]:
        """Set the description of an issue.

        Never raises for a rejected format: when every option fails the
        outcome reports succeeded=False and the issue keeps no description.
        """
        outcome = run_chain(
            self.options,
            (issue_key, text),
            subject=f"description of {issue_key}",
            pause=self.pacing.after_description_attempt,
        )
        if outcome.succeeded:
            logger.info(f"Added description to {issue_key} using {outcome.strategy_name} format")
        else:
            logger.warning(f"All description update attempts failed for {issue_key}")
        return outcome
