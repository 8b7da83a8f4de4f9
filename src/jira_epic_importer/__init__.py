"""
Jira Epic Importer

Imports epics and their stories into a Jira project, adapting to the issue
types, hierarchy support and description formats the instance offers.
"""

from __future__ import annotations

from .cli import main
from .exceptions import (
    CapabilityProbeError,
    ConfigurationError,
    DataLoadError,
    JiraApiError,
    JiraImportError,
    ProjectAcquisitionError,
    StrategyError,
)
from .jira_client import JiraClient
from .loader import load_import_data
from .models import CapabilitySet, CreatedRecord, Epic, ImportData, LinkOutcome, Story
from .orchestrator import ImportOrchestrator, ImportResult, ImportStats
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "CapabilityProbeError",
    "CapabilitySet",
    "ConfigurationError",
    "CreatedRecord",
    "DataLoadError",
    "Epic",
    "ImportData",
    "ImportOrchestrator",
    "ImportResult",
    "ImportStats",
    "JiraApiError",
    "JiraClient",
    "JiraImportError",
    "LinkOutcome",
    "ProjectAcquisitionError",
    "StrategyError",
    "Story",
    "load_import_data",
    "main",
    "setup_logging",
]
