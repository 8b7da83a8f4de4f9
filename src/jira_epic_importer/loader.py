"""Load the epics and stories to import from a JSON file.

Expected layout::

    {
        "epics": [{"summary": "...", "description": "...", "priority": "High",
                   "labels": ["..."], "component": "..."}],
        "stories": [{"summary": "...", "epicLink": "<epic summary>", ...}]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

from .exceptions import DataLoadError
from .models import Epic, ImportData, Story

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE: Final[str] = "pmac-jira-import-json.json"


def _common_fields(entry: Any, section: str, index: int) -> dict[str, Any]:  # noqa: ANN401
    if not isinstance(entry, dict):
        msg = f"{section}[{index}] is not an object"
        raise DataLoadError(msg)

    summary = entry.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        msg = f"{section}[{index}] has no summary"
        raise DataLoadError(msg)

    for name in ("description", "priority"):
        value = entry.get(name)
        if value is not None and not isinstance(value, str):
            msg = f"{section}[{index}] {name} must be a string"
            raise DataLoadError(msg)

    for name in ("component", "epicLink"):
        value = entry.get(name)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            msg = f"{section}[{index}] {name} must be a non-empty string"
            raise DataLoadError(msg)

    labels = entry.get("labels") or []
    if not isinstance(labels, list) or not all(isinstance(label, str) for label in labels):
        msg = f"{section}[{index}] labels must be a list of strings"
        raise DataLoadError(msg)

    return {
        "summary": summary,
        "description": entry.get("description") or "",
        "priority": entry.get("priority"),
        "labels": labels,
        "component": entry.get("component") or None,
    }


def parse_import_data(data: Any) -> ImportData:  # noqa: ANN401
    """Validate a decoded JSON document and convert it to ImportData."""
    if not isinstance(data, dict):
        msg = "Import data must be a JSON object with 'epics' and 'stories'"
        raise DataLoadError(msg)

    sections: dict[str, list[Any]] = {}
    for section in ("epics", "stories"):
        entries = data.get(section, [])
        if not isinstance(entries, list):
            msg = f"'{section}' must be a list"
            raise DataLoadError(msg)
        sections[section] = entries

    epics = [Epic(**_common_fields(entry, "epics", i)) for i, entry in enumerate(sections["epics"])]
    stories = [
        Story(**_common_fields(entry, "stories", i), epic_link=entry.get("epicLink") or None)
        for i, entry in enumerate(sections["stories"])
    ]
    return ImportData(epics=epics, stories=stories)


def load_import_data(path: str | Path) -> ImportData:
    """Read and validate the import data file.

    Raises:
        DataLoadError: If the file cannot be read or its content is malformed
    """
    file_path = Path(path)
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as e:
        msg = f"Unable to read import data file {file_path}: {e}"
        raise DataLoadError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Import data file {file_path} is not valid JSON: {e}"
        raise DataLoadError(msg) from e

    import_data = parse_import_data(data)
    logger.info(f"Loaded {len(import_data.epics)} epics and {len(import_data.stories)} stories from {file_path}")
    return import_data
