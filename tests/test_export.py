"""Tests for result export formatting and file writing."""

from __future__ import annotations

import json
from datetime import datetime

import pytest

from sql_workbench.core.export import (
    export_csv,
    export_filename,
    export_json,
    export_markdown,
    export_output_tab,
    write_export,
)
from sql_workbench.core.models import OutputKind, OutputTab, ResultSet


@pytest.fixture
def result() -> ResultSet:
    return ResultSet(
        rows=[
            {"id": 1, "name": "Ada, Countess", "note": None},
            {"id": 2, "name": "Grace | Admiral", "note": "line\nbreak"},
        ]
    )


def _tab(result, kind=OutputKind.RESULTS, name="SELECT customers") -> OutputTab:
    return OutputTab(id="o1", name=name, query_id="q_customers", kind=kind, result=result)


class TestFormatters:
    def test_csv_quotes_and_nulls(self, result):
        lines = export_csv(result).splitlines()
        assert lines[0] == "id,name,note"
        assert lines[1] == '1,"Ada, Countess",'

    def test_json_keeps_nulls(self, result):
        data = json.loads(export_json(result))
        assert data[0] == {"id": 1, "name": "Ada, Countess", "note": None}

    def test_markdown_escapes(self, result):
        lines = export_markdown(result).splitlines()
        assert lines[0] == "| id | name | note |"
        assert lines[1] == "| --- | --- | --- |"
        assert lines[3] == "| 2 | Grace \\| Admiral | line break |"

    def test_markdown_empty(self):
        assert export_markdown(ResultSet()) == "_No rows_\n"


class TestOutputTabs:
    def test_results_tab(self, result):
        assert export_output_tab(_tab(result), "csv").startswith("id,name,note")

    def test_chart_refused(self, result):
        with pytest.raises(ValueError, match="Charts cannot be exported"):
            export_output_tab(_tab(result, OutputKind.VISUALIZATION), "csv")

    def test_unknown_format(self, result):
        with pytest.raises(ValueError, match="Unknown export format"):
            export_output_tab(_tab(result), "xlsx")


class TestFiles:
    def test_filename_slug(self, result):
        name = export_filename(
            _tab(result, name="SELECT * orders!"), "md", now=datetime(2024, 5, 1, 10, 30)
        )
        assert name == "select-orders-20240501-103000.md"

    def test_blank_slug_falls_back(self, result):
        name = export_filename(_tab(result, name="***"), "csv", now=datetime(2024, 1, 1))
        assert name.startswith("results-")

    def test_write_creates_directory(self, result, tmp_path):
        target = tmp_path / "exports"
        path = write_export(_tab(result), "json", target)
        assert path.parent == target
        assert path.suffix == ".json"
        assert json.loads(path.read_text(encoding="utf-8"))[1]["id"] == 2
