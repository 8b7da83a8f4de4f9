"""
Custom exception classes for the Jira epic importer.
"""

from __future__ import annotations

from typing import Any


class JiraImportError(Exception):
    """Base exception for import errors."""


class JiraApiError(JiraImportError):
    """Raised when a request to the Jira REST API fails."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        method: str = "",
        path: str = "",
        detail: Any = None,  # noqa: ANN401 - decoded JSON body or raw text
    ) -> None:
        super().__init__(message)
        self.status: int | None = status
        self.method: str = method
        self.path: str = path
        self.detail: Any = detail

    def __str__(self) -> str:
        base = super().__str__()
        if self.detail:
            return f"{base} - {self.detail}"
        return base


class StrategyError(JiraImportError):
    """Raised when a fallback strategy cannot be applied to the target at all."""


class ProjectAcquisitionError(JiraImportError):
    """Raised when the target project can neither be found nor created."""


class CapabilityProbeError(JiraImportError):
    """Raised when the issue type schema of the project cannot be determined."""


class DataLoadError(JiraImportError):
    """Raised when the import data file is missing or malformed."""


class ConfigurationError(JiraImportError):
    """Raised when required settings are missing."""
