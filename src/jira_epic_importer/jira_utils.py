from __future__ import annotations

import logging
import os
from typing import Final

from . import utils
from .jira_client import JiraClient

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)

_TOKEN_ENV_VAR: Final[str] = "JIRA_API_TOKEN"  # noqa: S105
_DEFAULT_TOKEN_PASS_PATH: Final[str] = "jira/api_token"  # noqa: S105


def get_token(pass_path: str | None = None) -> str | None:
    """Get Jira API token from pass path, env var JIRA_API_TOKEN, or default pass location."""
    if pass_path:
        return utils.get_pass_value(pass_path)

    token: str | None = os.environ.get(_TOKEN_ENV_VAR)
    if token:
        return token

    try:
        return utils.get_pass_value(_DEFAULT_TOKEN_PASS_PATH)
    except (ValueError, utils.PassError):
        logger.warning("No Jira API token specified nor found")
        return None


def get_client(host: str, email: str, token: str) -> JiraClient:
    """Get a Jira client authenticated with the email/token pair."""
    return JiraClient(host, email, token)
