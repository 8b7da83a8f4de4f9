"""
Settings for an import run, read from the environment and CLI options.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from . import jira_utils
from .exceptions import ConfigurationError

DEFAULT_PROJECT_KEY: Final[str] = "PMAC"
DEFAULT_PROJECT_NAME: Final[str] = "Project Management as Code"


@dataclass(frozen=True)
class ImporterConfig:
    jira_host: str
    jira_email: str
    api_token: str
    project_key: str = DEFAULT_PROJECT_KEY
    project_name: str = DEFAULT_PROJECT_NAME


def load_config(
    *,
    jira_host: str | None = None,
    jira_email: str | None = None,
    project_key: str | None = None,
    project_name: str | None = None,
    token_pass_path: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ImporterConfig:
    """Build the configuration, preferring explicit values over environment variables.

    Raises:
        ConfigurationError: If the Jira host, email or API token is missing
    """
    env = os.environ if environ is None else environ

    host = jira_host or env.get("JIRA_HOST") or ""
    email = jira_email or env.get("JIRA_EMAIL") or ""
    missing = [name for name, value in (("JIRA_HOST", host), ("JIRA_EMAIL", email)) if not value]
    if missing:
        msg = f"Missing required settings: {', '.join(missing)}"
        raise ConfigurationError(msg)

    token = jira_utils.get_token(token_pass_path)
    if not token:
        msg = "No Jira API token: set JIRA_API_TOKEN or pass --jira-pass-token"
        raise ConfigurationError(msg)

    return ImporterConfig(
        jira_host=host,
        jira_email=email,
        api_token=token,
        project_key=project_key or env.get("PROJECT_KEY") or DEFAULT_PROJECT_KEY,
        project_name=project_name or env.get("PROJECT_NAME") or DEFAULT_PROJECT_NAME,
    )
