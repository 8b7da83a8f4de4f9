"""
Tests for CLI module.
"""

from unittest.mock import MagicMock, patch

import pytest

from jira_epic_importer.cli import main, parse_arguments
from jira_epic_importer.config import ImporterConfig
from jira_epic_importer.exceptions import DataLoadError
from jira_epic_importer.loader import DEFAULT_DATA_FILE
from jira_epic_importer.models import ImportData
from jira_epic_importer.orchestrator import ImportResult

_CONFIG = ImporterConfig(
    jira_host="https://example.atlassian.net",
    jira_email="me@example.com",
    api_token="token",
    project_key="PMAC",
    project_name="Project Management as Code",
)


@pytest.mark.unit
class TestParseArguments:
    def test_defaults(self) -> None:
        args = parse_arguments([])
        assert args.data_file == DEFAULT_DATA_FILE
        assert args.project_key is None
        assert args.jira_pass_token is None
        assert args.verbose is False

    def test_options(self) -> None:
        args = parse_arguments(["data.json", "-k", "DEMO", "--jira-pass-token", "jira/work", "-v"])
        assert args.data_file == "data.json"
        assert args.project_key == "DEMO"
        assert args.jira_pass_token == "jira/work"
        assert args.verbose is True


@pytest.mark.unit
class TestMain:
    def _run_main(self, argv: list[str], result: ImportResult) -> tuple[int | str | None, MagicMock, MagicMock]:
        with (
            patch("jira_epic_importer.cli.setup_logging"),
            patch("jira_epic_importer.cli.load_config", return_value=_CONFIG) as mock_config,
            patch("jira_epic_importer.cli.load_import_data", return_value=ImportData()),
            patch("jira_epic_importer.cli.jira_utils.get_client"),
            patch("jira_epic_importer.cli.ImportOrchestrator") as mock_orchestrator,
        ):
            mock_orchestrator.return_value.run.return_value = result

            with pytest.raises(SystemExit) as exc_info:
                main(argv)

            return exc_info.value.code, mock_config, mock_orchestrator

    def test_successful_import_exits_zero(self) -> None:
        code, _, mock_orchestrator = self._run_main([], ImportResult(success=True, project_key="PMAC"))

        assert code == 0
        args, _ = mock_orchestrator.call_args
        assert args[1:] == ("PMAC", "Project Management as Code")

    def test_failed_import_exits_one(self) -> None:
        code, _, _ = self._run_main([], ImportResult(success=False, project_key="PMAC", error="boom"))
        assert code == 1

    def test_options_forwarded_to_config(self) -> None:
        _, mock_config, _ = self._run_main(
            ["-k", "DEMO", "--jira-host", "https://h", "--jira-pass-token", "jira/work"],
            ImportResult(success=True, project_key="DEMO"),
        )

        _, kwargs = mock_config.call_args
        assert kwargs["project_key"] == "DEMO"
        assert kwargs["jira_host"] == "https://h"
        assert kwargs["token_pass_path"] == "jira/work"

    def test_data_load_error_exits_one(self) -> None:
        with (
            patch("jira_epic_importer.cli.setup_logging"),
            patch("jira_epic_importer.cli.load_config", return_value=_CONFIG),
            patch("jira_epic_importer.cli.load_import_data", side_effect=DataLoadError("bad file")),
            patch("jira_epic_importer.cli.ImportOrchestrator") as mock_orchestrator,
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["missing.json"])

        assert exc_info.value.code == 1
        mock_orchestrator.assert_not_called()

    def test_unexpected_error_exits_one(self) -> None:
        with (
            patch("jira_epic_importer.cli.setup_logging"),
            patch("jira_epic_importer.cli.load_config", side_effect=RuntimeError("unexpected")),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main([])

        assert exc_info.value.code == 1
