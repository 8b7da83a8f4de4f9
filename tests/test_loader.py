"""Tests for loading the import data file."""

import json
from pathlib import Path

import pytest

from jira_epic_importer.exceptions import DataLoadError
from jira_epic_importer.loader import load_import_data, parse_import_data


@pytest.mark.unit
class TestParseImportData:
    def test_epics_and_stories(self) -> None:
        data = parse_import_data(
            {
                "epics": [
                    {
                        "summary": "Foundation",
                        "description": "Base work",
                        "priority": "High",
                        "labels": ["core"],
                        "component": "Backend",
                    }
                ],
                "stories": [{"summary": "Login", "epicLink": "Foundation"}],
            }
        )

        epic = data.epics[0]
        assert epic.summary == "Foundation"
        assert epic.description == "Base work"
        assert epic.priority == "High"
        assert epic.labels == ["core"]
        assert epic.component == "Backend"
        story = data.stories[0]
        assert story.epic_link == "Foundation"
        assert story.description == ""
        assert story.component is None

    def test_missing_sections_are_empty(self) -> None:
        data = parse_import_data({})
        assert data.epics == []
        assert data.stories == []

    def test_not_an_object(self) -> None:
        with pytest.raises(DataLoadError, match="JSON object"):
            parse_import_data([])

    def test_section_not_a_list(self) -> None:
        with pytest.raises(DataLoadError, match="'stories' must be a list"):
            parse_import_data({"stories": {}})

    def test_missing_summary(self) -> None:
        with pytest.raises(DataLoadError, match=r"epics\[1\] has no summary"):
            parse_import_data({"epics": [{"summary": "A"}, {"description": "no summary"}]})

    def test_blank_summary(self) -> None:
        with pytest.raises(DataLoadError, match="has no summary"):
            parse_import_data({"stories": [{"summary": "   "}]})

    def test_labels_must_be_strings(self) -> None:
        with pytest.raises(DataLoadError, match="labels"):
            parse_import_data({"epics": [{"summary": "A", "labels": [1]}]})

    @pytest.mark.parametrize(
        ("field", "value", "error"),
        [
            ("description", 42, "description must be a string"),
            ("description", ["text"], "description must be a string"),
            ("priority", 1, "priority must be a string"),
            ("component", ["UI"], "component must be a non-empty string"),
            ("component", "  ", "component must be a non-empty string"),
            ("epicLink", ["Foundation"], "epicLink must be a non-empty string"),
            ("epicLink", "", "epicLink must be a non-empty string"),
            ("labels", "core", "labels must be a list of strings"),
        ],
    )
    def test_malformed_story_field(self, field: str, value: object, error: str) -> None:
        data = {"epics": [{"summary": "Foundation"}], "stories": [{"summary": "Login", field: value}]}

        with pytest.raises(DataLoadError, match=rf"stories\[0\] {error}"):
            parse_import_data(data)

    def test_optional_fields_may_be_null(self) -> None:
        data = parse_import_data(
            {"stories": [{"summary": "Login", "description": None, "component": None, "epicLink": None}]}
        )

        story = data.stories[0]
        assert story.description == ""
        assert story.component is None
        assert story.epic_link is None


@pytest.mark.unit
class TestLoadImportData:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"epics": [{"summary": "A"}], "stories": [{"summary": "B", "epicLink": "A"}]}))

        data = load_import_data(path)

        assert [e.summary for e in data.epics] == ["A"]
        assert [s.summary for s in data.stories] == ["B"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DataLoadError, match="Unable to read"):
            load_import_data(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "data.json"
        path.write_text("{not json")

        with pytest.raises(DataLoadError, match="not valid JSON"):
            load_import_data(path)
