"""
Component provisioning for the import project.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .exceptions import JiraApiError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .protocols import IssueTracker
    from .utils import Pacing

logger: logging.Logger = logging.getLogger(__name__)


def provision_components(
    client: IssueTracker,
    project_key: str,
    names: Iterable[str],
    pacing: Pacing,
) -> list[str]:
    """Create the named components in the project.

    Duplicate names are created once. A failed creation (typically because the
    component already exists) is logged and does not stop the others.

    Args:
        client: Jira client
        project_key: Project the components belong to
        names: Component names, possibly repeated
        pacing: Delays between calls

    Returns:
        Names of the components that were created by this call
    """
    unique_names = list(dict.fromkeys(names))
    if not unique_names:
        logger.info("No components to create")
        return []

    logger.info(f"Creating {len(unique_names)} components")
    created: list[str] = []

    for name in unique_names:
        try:
            client.create_component(name, project_key, description=f"Imported {name} component")
            created.append(name)
            logger.info(f"Created component: {name}")
        except JiraApiError as e:
            logger.warning(f"Couldn't create component {name}: {e}")
        pacing.after_component()

    return created
