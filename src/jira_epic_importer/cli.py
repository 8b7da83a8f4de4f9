"""
Command-line interface for the Jira epic importer.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import jira_utils
from .config import load_config
from .exceptions import JiraImportError
from .loader import DEFAULT_DATA_FILE, load_import_data
from .orchestrator import ImportOrchestrator
from .utils import setup_logging

logger: logging.Logger = logging.getLogger(__name__)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Import epics and stories into a Jira project")

    _ = parser.add_argument(
        "data_file",
        nargs="?",
        default=DEFAULT_DATA_FILE,
        help=f"JSON file with 'epics' and 'stories' (default: {DEFAULT_DATA_FILE})",
    )

    _ = parser.add_argument("--project-key", "-k", help="Jira project key (default: $PROJECT_KEY or PMAC)")
    _ = parser.add_argument("--project-name", help="Name used when the project has to be created")
    _ = parser.add_argument("--jira-host", help="Jira base URL (default: $JIRA_HOST)")
    _ = parser.add_argument("--jira-email", help="Account email for the API token (default: $JIRA_EMAIL)")
    _ = parser.add_argument(
        "--jira-pass-token", help="Path for the Jira API token in pass utility (default: $JIRA_API_TOKEN)"
    )

    _ = parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_arguments(argv)

    verbose: bool = getattr(args, "verbose", False)
    setup_logging(verbose=verbose)

    try:
        config = load_config(
            jira_host=args.jira_host,
            jira_email=args.jira_email,
            project_key=args.project_key,
            project_name=args.project_name,
            token_pass_path=args.jira_pass_token,
        )
        data = load_import_data(args.data_file)

        client = jira_utils.get_client(config.jira_host, config.jira_email, config.api_token)
        orchestrator = ImportOrchestrator(client, config.project_key, config.project_name)
        result = orchestrator.run(data)
    except JiraImportError as e:
        logger.error(f"Import failed: {e}")  # noqa: TRY400
        sys.exit(1)
    except Exception:
        logger.exception("Import failed")
        sys.exit(1)

    if not result.success:
        sys.exit(1)
    sys.exit(0)
