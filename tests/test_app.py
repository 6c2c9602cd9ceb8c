"""Textual Pilot tests for WorkbenchApp.

Tests use ``app.run_test()`` to spin up a headless Textual app and verify
the widget tree, key bindings, and that rendering follows workbench state.
The executor is a FakeExecutor, so no database is involved.
"""

from __future__ import annotations

import pytest
import yaml
from textual.widgets import Select, TextArea

from sql_workbench.app import WorkbenchApp
from sql_workbench.core.layout import LayoutDirection
from sql_workbench.core.models import HistoryEntry
from sql_workbench.core.naming import DEFAULT_TAB_NAME
from sql_workbench.widgets import ConfirmScreen, HistoryList, ResultsTable, TableBrowser

SCHEMA = [
    ("customers", [("id", "INTEGER"), ("name", "TEXT")]),
    ("orders", [("id", "INTEGER"), ("total", "REAL")]),
]


# ── Fixtures ────────────────────────────────────────────────────────


@pytest.fixture()
def prefs_path(tmp_path):
    return tmp_path / "preferences.yaml"


@pytest.fixture()
def app(workbench, prefs_path, tmp_path):
    return WorkbenchApp(
        workbench,
        schema=lambda: SCHEMA,
        prefs_path=prefs_path,
        export_dir=tmp_path / "exports",
    )


async def _run(app, pilot) -> None:
    await pilot.press("f5")
    await app.workers.wait_for_complete()
    await pilot.pause()


# ── Widget-tree smoke tests ─────────────────────────────────────────


class TestAppMount:
    """Verify the app mounts and renders the initial session."""

    @pytest.mark.asyncio
    async def test_app_mounts(self, app):
        async with app.run_test(size=(120, 40)):
            assert app.query_one("#editor") is not None
            assert app.query_one("#query-tabs") is not None
            assert app.query_one("#status-bar") is not None

    @pytest.mark.asyncio
    async def test_editor_shows_default_query(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            assert app.query_one("#editor", TextArea).text == "SELECT * FROM customers;"
            assert app.query_one("#catalog-select", Select).value == "q_customers"

    @pytest.mark.asyncio
    async def test_no_results_hides_results_pane(self, app):
        async with app.run_test(size=(120, 40)):
            assert app.query_one("#results-pane").display is False
            assert app.query_one("#error-bar").display is False

    @pytest.mark.asyncio
    async def test_table_browser_populated(self, app):
        async with app.run_test(size=(120, 40)):
            browser = app.query_one(TableBrowser)
            assert [n.data for n in browser.root.children] == ["customers", "orders"]

    @pytest.mark.asyncio
    async def test_schema_failure_tolerated(self, workbench):
        def broken():
            raise RuntimeError("database is locked")

        app = WorkbenchApp(workbench, schema=broken)
        async with app.run_test(size=(120, 40)):
            browser = app.query_one(TableBrowser)
            assert browser.root.children[0].data is None


# ── Running queries ─────────────────────────────────────────────────


class TestRunQuery:
    @pytest.mark.asyncio
    async def test_f5_creates_output(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            assert len(app.workbench.session.output_tabs) == 1
            assert app.query_one("#results-pane").display is True
            assert app.query_one(ResultsTable).row_count == 2

    @pytest.mark.asyncio
    async def test_rejected_query_shows_error(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            app.workbench.edit_text("DROP TABLE customers;")
            app.refresh_view()
            await pilot.pause()
            await _run(app, pilot)
            error_bar = app.query_one("#error-bar")
            assert error_bar.display is True
            assert error_bar.has_class("-validation")
            assert app.workbench.session.output_tabs == []

    @pytest.mark.asyncio
    async def test_typed_custom_text_then_run(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            app.query_one("#editor", TextArea).load_text("SELECT 1;")
            await pilot.pause()
            assert app.workbench.session.editor_query_id is None
            assert app.query_one("#catalog-select", Select).value is Select.NULL
            await _run(app, pilot)
            error_bar = app.query_one("#error-bar")
            assert error_bar.display is True
            assert error_bar.has_class("-validation")
            assert app.workbench.session.output_tabs == []

    @pytest.mark.asyncio
    async def test_error_dismissed(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            app.workbench.edit_text("nope")
            await _run(app, pilot)
            app.dismiss_error()
            await pilot.pause()
            assert app.query_one("#error-bar").display is False


# ── Key bindings ────────────────────────────────────────────────────


class TestTabs:
    @pytest.mark.asyncio
    async def test_ctrl_t_adds_tab(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("ctrl+t")
            await pilot.pause()
            session = app.workbench.session
            assert len(session.query_tabs) == 2
            assert session.active_tab.id == session.query_tabs[-1].id

    @pytest.mark.asyncio
    async def test_catalog_select_loads_query(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            app.query_one("#catalog-select", Select).value = "q_orders"
            await pilot.pause()
            assert app.workbench.query_modified
            assert app.workbench.session.editor_text == "SELECT * FROM orders;"
            await pilot.pause()
            assert app.query_one("#editor", TextArea).text == "SELECT * FROM orders;"


class TestSidebarToggle:
    @pytest.mark.asyncio
    async def test_ctrl_b_hides_sidebar(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            assert app.query_one("#sidebar").display is True
            await pilot.press("ctrl+b")
            await pilot.pause()
            assert app.query_one("#sidebar").display is False


class TestLayout:
    @pytest.mark.asyncio
    async def test_fullscreen_after_run(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            await pilot.press("f11")
            await pilot.pause()
            assert app.workbench.layout.is_fullscreen
            assert app.query_one("#query-tabs").display is False
            assert app.query_one("#editor-pane").display is False

    @pytest.mark.asyncio
    async def test_layout_toggle(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            await pilot.press("ctrl+l")
            await pilot.pause()
            assert app.workbench.layout.direction is LayoutDirection.VERTICAL
            assert app.query_one("#work-area").has_class("-vertical")

    @pytest.mark.asyncio
    async def test_layout_saved_on_exit(self, app, prefs_path):
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("ctrl+b")
            await pilot.pause()
        data = yaml.safe_load(prefs_path.read_text())
        assert data["layout"]["sidebar_open"] is False


class TestClearResults:
    @pytest.mark.asyncio
    async def test_confirmed(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            await pilot.press("ctrl+k")
            await pilot.pause()
            assert isinstance(app.screen, ConfirmScreen)
            await pilot.press("y")
            await pilot.pause()
            assert app.workbench.session.output_tabs == []
            assert app.query_one("#results-pane").display is False

    @pytest.mark.asyncio
    async def test_declined(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            await pilot.press("ctrl+k")
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            assert len(app.workbench.session.output_tabs) == 1


class TestVisualize:
    @pytest.mark.asyncio
    async def test_f6_adds_chart(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            await pilot.press("f6")
            await pilot.pause()
            active = app.workbench.session.active_output_tab
            assert active.is_visualization
            assert app.query_one("#chart-view").display is True
            assert app.query_one(ResultsTable).display is False

    @pytest.mark.asyncio
    async def test_f6_from_focused_editor(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await _run(app, pilot)
            editor = app.query_one("#editor", TextArea)
            editor.focus()
            await pilot.pause()
            await pilot.press("f6")
            await pilot.pause()
            assert app.workbench.session.active_output_tab.is_visualization
            assert len(app.workbench.session.output_tabs) == 2
            assert editor.text == "SELECT * FROM customers;"


class TestRename:
    @pytest.mark.asyncio
    async def test_blank_rename_keeps_name(self, app):
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            name = app.workbench.session.active_tab.name
            assert name != DEFAULT_TAB_NAME
            await pilot.press("f2")
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()
            assert app.workbench.session.active_tab.name == name


class TestHistoryList:
    @pytest.mark.asyncio
    async def test_unlabelled_entry_named_from_query(self, app):
        async with app.run_test(size=(120, 40)):
            history = app.query_one(HistoryList)
            history.update_entries(
                [HistoryEntry(query="SELECT * FROM orders;", query_id=None, label="")]
            )
            prompt = str(history.get_option_at_index(0).prompt)
            assert "SELECT orders" in prompt
            assert "None" not in prompt
