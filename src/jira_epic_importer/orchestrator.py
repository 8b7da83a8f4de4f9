"""Import orchestrator that sequences the stages of a run.

The ImportOrchestrator is the central coordinator of an import. It:
1. Acquires the target project (reusing an existing one)
2. Probes the project's capabilities once
3. Drives component, epic and story creation
4. Owns the epic summary -> key mapping for the run
5. Links stories that could not be created under their epic

Import Flow
-----------
Stages run strictly in order, one Jira call at a time:

AcquireProject
    - Reuse the project with the configured key if it exists
    - Otherwise create it with the authenticated user as lead
ProbeCapabilities
    - Classify issue types for epics, stories and sub-tasks
    - Check whether sub-tasks accept a parent (native hierarchy)
ProvisionComponents
    - Create every component named by an epic or story
CreateEpics
    - Create each epic and record summary -> key (last write wins)
CreateStories
    - Create each story, directly under its epic when supported
DeferredLinking
    - Run the link strategies for stories with a resolvable epic that were
      not created as native children
Summarize
    - Log counts and return the ImportResult

Error Handling
--------------
- Failures in AcquireProject and ProbeCapabilities are fatal: the run stops
  and the result carries the error message.
- Every later stage drops or skips the failing item and continues.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from .capabilities import probe_capabilities
from .components import provision_components
from .exceptions import JiraApiError, JiraImportError, ProjectAcquisitionError
from .formatting import ContentFormatter
from .hierarchy import HierarchyBuilder
from .linking import LinkStrategyEngine
from .utils import Pacing

if TYPE_CHECKING:
    from .models import CapabilitySet, CreatedRecord, EpicKeyMap
    from .protocols import ImportSource, IssueTracker

logger: logging.Logger = logging.getLogger(__name__)

PROJECT_DESCRIPTION: Final[str] = "Imported epics and stories"
PREFERRED_PROJECT_TYPE: Final[str] = "software"


@dataclass
class ImportStats:
    """Statistics collected during an import."""

    components_created: int = 0
    epics_created: int = 0
    epics_dropped: int = 0
    stories_created: int = 0
    stories_dropped: int = 0
    stories_linked_native: int = 0
    stories_linked_deferred: int = 0
    links_failed: int = 0
    descriptions_failed: int = 0
    # original story key -> key of the sub-task created by recreate-as-subtask
    replacement_keys: dict[str, str] = field(default_factory=dict)


@dataclass
class ImportResult:
    """Result of an import run."""

    success: bool
    project_key: str | None = None
    epics_created: int = 0
    stories_created: int = 0
    error: str | None = None
    stats: ImportStats = field(default_factory=ImportStats)

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "projectKey": self.project_key,
            "epicsCreated": self.epics_created,
            "storiesCreated": self.stories_created,
        }


class ImportOrchestrator:
    """Imports epics and stories into one Jira project.

    Usage:
        client = JiraClient(host, email, token)
        orchestrator = ImportOrchestrator(client, "PMAC", "Project Management as Code")
        result = orchestrator.run(load_import_data("data.json"))
    """

    def __init__(
        self,
        client: IssueTracker,
        project_key: str,
        project_name: str,
        *,
        pacing: Pacing | None = None,
    ) -> None:
        self.client: IssueTracker = client
        self.project_key: str = project_key
        self.project_name: str = project_name
        self.pacing: Pacing = pacing or Pacing()

    def acquire_project(self) -> dict[str, Any]:
        """Return the project with the configured key, creating it if needed.

        Raises:
            ProjectAcquisitionError: If the project can neither be read nor created
        """
        try:
            existing = self.client.get_project(self.project_key)
            if existing is not None:
                logger.info(f"Project {self.project_key} already exists, using it")
                return existing

            myself = self.client.get_myself()
            logger.info(f"Using current user as project lead: {myself.get('displayName', '')}")

            project_types = self.client.get_project_types()
            logger.debug(f"Available project types: {[t.get('key') for t in project_types]}")
            project_type = next(
                (t for t in project_types if t.get("key") == PREFERRED_PROJECT_TYPE),
                project_types[0] if project_types else {"key": PREFERRED_PROJECT_TYPE},
            )

            payload = {
                "key": self.project_key,
                "name": f"{self.project_name} {dt.date.today().isoformat()}",
                "projectTypeKey": project_type["key"],
                "description": PROJECT_DESCRIPTION,
                "leadAccountId": myself["accountId"],
            }
            logger.info(f"Creating project: {payload['name']} ({self.project_key})")
            created = self.client.create_project(payload)
        except (JiraApiError, KeyError) as e:
            msg = f"Failed to create project {self.project_key}: {e}"
            raise ProjectAcquisitionError(msg) from e

        logger.info(f"Project created successfully: {created.get('key', self.project_key)}")
        return created

    def run(self, source: ImportSource) -> ImportResult:
        """Execute the full import.

        Returns:
            ImportResult; success is False only when a fatal stage failed
        """
        logger.info(f"Import starting: {len(source.epics)} epics, {len(source.stories)} stories")
        logger.info(f"Jira host: {self.client.host}, project: {self.project_key}")

        try:
            project = self.acquire_project()
            project_key: str = project.get("key") or self.project_key
            capabilities = probe_capabilities(self.client, project_key)
        except JiraImportError as e:
            logger.error(f"Import failed: {e}")
            return ImportResult(success=False, error=str(e))

        stats = ImportStats()
        formatter = ContentFormatter(self.client, self.pacing)
        builder = HierarchyBuilder(self.client, project_key, formatter)
        linker = LinkStrategyEngine(self.client, project_key, self.pacing)
        epic_keys: EpicKeyMap = {}

        components = [record.component for record in [*source.epics, *source.stories] if record.component]
        stats.components_created = len(provision_components(self.client, project_key, components, self.pacing))

        self._create_epics(source, builder, capabilities, epic_keys, stats)
        created_stories = self._create_stories(source, builder, capabilities, epic_keys, stats)
        self._link_stories(created_stories, linker, epic_keys, stats)
        self._summarize(project_key, capabilities, stats)

        return ImportResult(
            success=True,
            project_key=project_key,
            epics_created=stats.epics_created,
            stories_created=stats.stories_created,
            stats=stats,
        )

    def _create_epics(
        self,
        source: ImportSource,
        builder: HierarchyBuilder,
        capabilities: CapabilitySet,
        epic_keys: EpicKeyMap,
        stats: ImportStats,
    ) -> None:
        logger.info("=== Creating Epics ===")
        for epic in source.epics:
            record = builder.create_epic(epic, capabilities, epic_keys)
            if record is None:
                stats.epics_dropped += 1
            else:
                stats.epics_created += 1
                if record.description_attached is False:
                    stats.descriptions_failed += 1
            self.pacing.after_record()

    def _create_stories(
        self,
        source: ImportSource,
        builder: HierarchyBuilder,
        capabilities: CapabilitySet,
        epic_keys: EpicKeyMap,
        stats: ImportStats,
    ) -> list[CreatedRecord]:
        logger.info("=== Creating Stories ===")
        created: list[CreatedRecord] = []
        for story in source.stories:
            parent_epic_key = epic_keys.get(story.epic_link) if story.epic_link else None
            if story.epic_link and parent_epic_key is None:
                logger.warning(f"Story '{story.summary}' references unknown epic '{story.epic_link}'")

            record = builder.create_story(story, capabilities, parent_epic_key)
            if record is None:
                stats.stories_dropped += 1
            else:
                created.append(record)
                stats.stories_created += 1
                if record.linked_as_native:
                    stats.stories_linked_native += 1
                if record.description_attached is False:
                    stats.descriptions_failed += 1
            self.pacing.after_record()
        return created

    def _link_stories(
        self,
        created_stories: list[CreatedRecord],
        linker: LinkStrategyEngine,
        epic_keys: EpicKeyMap,
        stats: ImportStats,
    ) -> None:
        pending = [
            record
            for record in created_stories
            if not record.linked_as_native and record.epic_link and record.epic_link in epic_keys
        ]
        if not pending:
            logger.info("=== No stories need deferred linking ===")
            return

        logger.info(f"=== Linking {len(pending)} Stories to Epics ===")
        for record in pending:
            outcome = linker.link_record(record, epic_keys)
            if outcome is None:
                continue
            if outcome.success:
                stats.stories_linked_deferred += 1
                if outcome.replacement_key:
                    stats.replacement_keys[record.key] = outcome.replacement_key
                    logger.info(f"Story {record.key} was recreated as sub-task {outcome.replacement_key}")
            else:
                stats.links_failed += 1
            self.pacing.after_record()

    def _summarize(self, project_key: str, capabilities: CapabilitySet, stats: ImportStats) -> None:
        logger.info("Import completed successfully!")
        logger.info(f"View your project at: {self.client.host}/projects/{project_key}")
        logger.info("=== Import Summary ===")
        logger.info(f"Created {stats.components_created} components")
        logger.info(f"Created {stats.epics_created} epics using {capabilities.epic_type.name} issue type")
        logger.info(f"Created {stats.stories_created} stories")
        logger.info(f"- {stats.stories_linked_native} created as sub-tasks of their epic")
        logger.info(f"- {stats.stories_linked_deferred} linked using alternate methods")
        if stats.links_failed:
            logger.warning(f"- {stats.links_failed} could not be linked to their epic")
        if stats.epics_dropped or stats.stories_dropped:
            logger.warning(f"Skipped {stats.epics_dropped} epics and {stats.stories_dropped} stories")
        if stats.descriptions_failed:
            logger.warning(f"{stats.descriptions_failed} records were created without their description")
