"""SQL Workbench - a Textual shell around the workbench core.

Rendering is derived from ``Workbench`` state by ``refresh_view()``; user
input is forwarded to the workbench and followed by a refresh.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Button, Footer, Select, Static, TextArea, Tree

from .core.layout import LayoutDirection, Panel
from .core.models import HistoryEntry
from .core.session import CLEAR_PROMPT
from .core.workbench import Workbench
from .log import logger
from .preferences import Preferences, save_layout, save_theme_name
from .theme import DEFAULT_THEME, TEXTUAL_THEMES, THEME_DESCRIPTIONS
from .widgets import (
    ConfirmScreen,
    ExportFormatScreen,
    HistoryList,
    OutputTabBar,
    QueryTabBar,
    ResizeHandle,
    ResultsPane,
    ShortcutOverlay,
    Sidebar,
    TableBrowser,
    TextPromptScreen,
)
from .widgets.results import ChartView, ResultsTable
from .widgets.sidebar import Schema

# Below this width, picking a table hides the sidebar
NARROW_WIDTH = 80


class ErrorBar(Static):
    """The single error line.  Click to dismiss."""

    def on_click(self) -> None:
        self.app.dismiss_error()


class WorkbenchApp(App):
    """SQL Workbench - query tabs, results, charts."""

    CSS_PATH = "styles.tcss"
    TITLE = "SQL Workbench"

    BINDINGS = [
        Binding("f5", "run_query", "Run", show=True, priority=True),
        Binding("ctrl+r", "run_query", "Run", show=False, priority=True),
        Binding("ctrl+t", "new_tab", "New tab", show=True, priority=True),
        Binding("ctrl+w", "close_tab", "Close tab", show=False, priority=True),
        Binding("f2", "rename_tab", "Rename", show=True),
        Binding("f11", "toggle_fullscreen", "Fullscreen", show=True),
        Binding("ctrl+l", "toggle_output_mode", "Layout", show=False, priority=True),
        Binding("ctrl+b", "toggle_sidebar", "Sidebar", show=True, priority=True),
        Binding("ctrl+k", "clear_results", "Clear", show=False, priority=True),
        Binding("ctrl+s", "save_query", "Save", show=False, priority=True),
        Binding("ctrl+e", "export_results", "Export", show=False, priority=True),
        Binding("ctrl+pageup", "cycle_tab(-1)", show=False, priority=True),
        Binding("ctrl+pagedown", "cycle_tab(1)", show=False, priority=True),
        Binding("f6", "visualize", "Chart", show=True, priority=True),
        Binding("f9", "cycle_theme", show=False),
        Binding("f1", "show_shortcuts", "Keys", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(
        self,
        workbench: Workbench,
        *,
        schema: Callable[[], Schema] | None = None,
        prefs: Preferences | None = None,
        prefs_path: Path | None = None,
        export_dir: Path | None = None,
    ) -> None:
        super().__init__()
        self.workbench = workbench
        self._schema = schema
        self._prefs = prefs or Preferences()
        self._prefs_path = prefs_path
        self.export_dir = export_dir or Path.cwd()
        # Editor text last pushed into (or read from) the TextArea
        self._shown_editor_text: str | None = None

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        layout = self.workbench.layout
        catalog = self.workbench.catalog
        with Horizontal(id="main-container"):
            yield Sidebar(id="sidebar")
            yield ResizeHandle(layout, "sidebar", id="sidebar-handle")
            with Vertical(id="workspace"):
                yield QueryTabBar(id="query-tabs")
                with Horizontal(id="query-toolbar"):
                    yield Select(
                        [(d.name, d.id) for d in catalog],
                        prompt="Custom query",
                        id="catalog-select",
                    )
                    yield Static("", id="modified-notice")
                with Horizontal(id="panel-switcher"):
                    yield Button("Editor", id="btn-panel-editor")
                    yield Button("Results", id="btn-panel-results")
                with Container(id="work-area"):
                    with Vertical(id="editor-pane"):
                        yield TextArea("", id="editor", tab_behavior="indent")
                    yield ResizeHandle(layout, "split", id="split-handle")
                    with ResultsPane(id="results-pane"):
                        yield OutputTabBar(id="output-tabs")
                        with Horizontal(id="results-toolbar"):
                            yield Static("", id="results-header", classes="results-surface")
                            yield Button("Chart", id="btn-chart")
                            yield Button("Export", id="btn-export")
                            yield Button("Layout", id="btn-layout")
                            yield Button("Fullscreen", id="btn-fullscreen")
                            yield Button("Clear", id="btn-clear", variant="error")
                        yield ResultsTable(id="results-table")
                        yield ChartView(id="chart-view")
        yield ErrorBar("", id="error-bar")
        with Horizontal(id="status-bar"):
            yield Static("Ready", id="status-state")
            yield Static("", id="status-rows")
            yield Static("", id="status-layout")
        yield Footer()

    def on_mount(self) -> None:
        for theme in TEXTUAL_THEMES.values():
            self.register_theme(theme)
        theme_name = self._prefs.display.theme
        self.theme = TEXTUAL_THEMES.get(theme_name, TEXTUAL_THEMES[DEFAULT_THEME]).name

        self.workbench.layout.on_change = self._apply_layout
        self._load_schema()
        self.refresh_view()
        self.query_one("#editor", TextArea).focus()

    def on_unmount(self) -> None:
        self.workbench.layout.on_change = None
        if self._prefs_path is not None:
            save_layout(self.workbench.layout, self._prefs_path)

    def _load_schema(self) -> None:
        browser = self.query_one(TableBrowser)
        if self._schema is None:
            browser.populate([])
            return
        try:
            browser.populate(self._schema())
        except Exception:
            logger.debug("Table listing failed", exc_info=True)
            browser.populate([])

    # ── Rendering ───────────────────────────────────────────────

    def refresh_view(self) -> None:
        """Re-render every region from workbench state."""
        wb = self.workbench
        session = wb.session
        try:
            query_bar = self.query_one(QueryTabBar)
        except NoMatches:
            return
        query_bar.update_tabs(session.query_tabs, session.active_tab_id)
        self.query_one(OutputTabBar).update_tabs(
            session.output_tabs, session.active_output_tab_id
        )
        self._sync_editor()
        self._sync_select()
        self.query_one("#modified-notice", Static).update(
            "[dim]Query changed. Press F5 to run the new query.[/]" if wb.query_modified else ""
        )

        active = session.active_output_tab
        self.query_one(ResultsPane).show(active, self._prefs.display.max_rows)
        header = self.query_one("#results-header", Static)
        if active is None:
            header.update("")
        else:
            header.update(f" [b]{active.name}[/]  {active.result.row_count} rows")

        error_bar = self.query_one(ErrorBar)
        error = wb.error
        error_bar.display = error is not None
        if error is not None:
            error_bar.update(f" ✗ {error.message}  [dim](click to dismiss)[/]")
            for kind in ("validation", "execution", "stale", "error"):
                error_bar.set_class(error.kind == kind, f"-{kind}")

        self.query_one(HistoryList).update_entries(wb.history)
        self._update_status()
        self._apply_layout()

    def _sync_editor(self) -> None:
        text = self.workbench.session.editor_text
        if text == self._shown_editor_text:
            return
        self._shown_editor_text = text
        editor = self.query_one("#editor", TextArea)
        if editor.text != text:
            editor.load_text(text)

    def _sync_select(self) -> None:
        select = self.query_one("#catalog-select", Select)
        query_id = self.workbench.session.editor_query_id
        value = query_id if query_id is not None else Select.NULL
        if select.value != value:
            select.value = value

    def _update_status(self) -> None:
        wb = self.workbench
        state = "Running…" if wb.loading else (wb.notice or "Ready")
        self.query_one("#status-state", Static).update(state)

        rows = ""
        active = wb.session.active_output_tab
        if active is not None:
            rows = f"{active.result.row_count} rows"
            if active.result.duration_ms is not None:
                rows += f" in {active.result.duration_ms:.1f} ms"
        self.query_one("#status-rows", Static).update(rows)

        layout = wb.layout
        mode = layout.direction.value
        if layout.is_fullscreen:
            mode += " · fullscreen"
        self.query_one("#status-layout", Static).update(mode)

    def _apply_layout(self) -> None:
        """Apply layout state to widget visibility and sizes."""
        layout = self.workbench.layout
        has_results = self.workbench.has_results
        try:
            work_area = self.query_one("#work-area")
        except NoMatches:
            return
        editor_pane = self.query_one("#editor-pane")

        show_sidebar = layout.sidebar_open and not layout.is_fullscreen
        sidebar = self.query_one(Sidebar)
        sidebar.display = show_sidebar
        sidebar.styles.width = int(layout.sidebar_width)
        self.query_one("#sidebar-handle").display = show_sidebar

        chrome = not layout.is_fullscreen
        self.query_one("#query-tabs").display = chrome
        self.query_one("#query-toolbar").display = chrome
        tabbed = layout.direction is LayoutDirection.TABBED
        switcher = self.query_one("#panel-switcher")
        switcher.display = tabbed and chrome
        for panel in Panel:
            button = self.query_one(f"#btn-panel-{panel.value}", Button)
            button.set_class(layout.active_panel is panel, "-active")
        self.query_one("#btn-panel-results", Button).disabled = not has_results

        vertical = layout.direction is not LayoutDirection.HORIZONTAL
        work_area.set_class(vertical, "-vertical")
        work_area.set_class(not vertical, "-horizontal")

        editor_pane.display = layout.editor_visible()
        self.query_one(ResultsPane).display = layout.results_visible(has_results)
        divider = layout.divider_visible(has_results)
        self.query_one("#split-handle").display = divider

        size = f"{layout.split_size:g}%" if divider else "1fr"
        if vertical:
            editor_pane.styles.width = "1fr"
            editor_pane.styles.height = size
        else:
            editor_pane.styles.height = "1fr"
            editor_pane.styles.width = size
        self.query_one("#btn-fullscreen", Button).label = (
            "Exit fullscreen" if layout.is_fullscreen else "Fullscreen"
        )

    def _after_action(self) -> None:
        # Deferred sync steps (guard release, auto-naming) land on the next turn
        self.refresh_view()
        self.call_later(self.refresh_view)

    # ── Editor & catalog ────────────────────────────────────────

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        self._shown_editor_text = text
        if self.workbench.edit_text(text):
            self._after_action()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id != "catalog-select":
            return
        value = event.value
        if value is Select.NULL or value == self.workbench.session.editor_query_id:
            return
        self.workbench.select_catalog_query(str(value))
        self._after_action()

    # ── Tabs ────────────────────────────────────────────────────

    def select_query_tab(self, tab_id: str) -> None:
        self.workbench.select_tab(tab_id)
        self._after_action()

    def close_query_tab(self, tab_id: str) -> None:
        self.workbench.close_tab(tab_id)
        self._after_action()

    def select_output_tab(self, output_id: str) -> None:
        self.workbench.select_output_tab(output_id)
        self._after_action()

    def close_output_tab(self, output_id: str) -> None:
        self.workbench.close_output_tab(output_id)
        self._after_action()

    def action_new_tab(self) -> None:
        self.workbench.add_tab()
        self._after_action()
        self.query_one("#editor", TextArea).focus()

    def action_close_tab(self) -> None:
        self.close_query_tab(self.workbench.session.active_tab_id)

    def action_cycle_tab(self, offset: int) -> None:
        self.workbench.dismiss_error()
        self.workbench.session.cycle_tab(offset)
        self._after_action()

    def action_rename_tab(self) -> None:
        session = self.workbench.session
        tab = session.active_tab
        if not session.begin_rename(tab.id):
            return

        def finish(name: str | None) -> None:
            self.workbench.dismiss_error()
            if name and name.strip():
                session.set_rename_draft(name)
                session.commit_rename()
            else:
                session.cancel_rename()
            self._after_action()

        self.push_screen(TextPromptScreen("Rename tab", value=tab.name), finish)

    # ── Execution ───────────────────────────────────────────────

    def action_run_query(self) -> None:
        self._run_query_worker()

    @work(group="execution")
    async def _run_query_worker(self) -> None:
        self.query_one("#status-state", Static).update("Running…")
        await self.workbench.run_query()
        self._after_action()

    def on_history_list_entry_chosen(self, event: HistoryList.EntryChosen) -> None:
        self._open_history_worker(event.entry, event.execute)

    @work(group="execution")
    async def _open_history_worker(self, entry: HistoryEntry, execute: bool) -> None:
        await self.workbench.open_history_entry(entry, execute=execute)
        self._after_action()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        table = event.node.data
        if table is None:
            return
        self.workbench.open_table(table)
        if self.size.width < NARROW_WIDTH:
            self.workbench.layout.set_sidebar_open(False)
        self._after_action()

    # ── Results ─────────────────────────────────────────────────

    def action_clear_results(self) -> None:
        wb = self.workbench
        if not wb.has_results or not self._prefs.execution.confirm_clear:
            wb.clear_results()
            self._after_action()
            return

        def answered(confirmed: bool | None) -> None:
            wb.clear_results(confirm=lambda _message: bool(confirmed))
            self._after_action()

        self.push_screen(ConfirmScreen(CLEAR_PROMPT), answered)

    def action_visualize(self) -> None:
        self.workbench.create_visualization()
        self._after_action()

    def action_export_results(self) -> None:
        def chosen(fmt: str | None) -> None:
            if fmt:
                path = self.workbench.export_active(fmt, self.export_dir)
                if path is not None:
                    self.notify(f"Exported to {path}", title="Export")
            self._after_action()

        self.push_screen(ExportFormatScreen(), chosen)

    def action_save_query(self) -> None:
        def chosen(name: str | None) -> None:
            notice = self.workbench.save_query(name or "")
            if notice:
                self.notify(notice, title="Save")
            self._after_action()

        name = self.workbench.session.active_tab.name
        self.push_screen(TextPromptScreen("Save query as", value=name), chosen)

    def dismiss_error(self) -> None:
        self.workbench.dismiss_error()
        self.refresh_view()

    # ── Layout actions ──────────────────────────────────────────

    def action_toggle_fullscreen(self) -> None:
        self.workbench.toggle_fullscreen()
        self._after_action()

    def action_toggle_output_mode(self) -> None:
        self.workbench.toggle_output_mode()
        self._after_action()

    def action_toggle_sidebar(self) -> None:
        self.workbench.layout.toggle_sidebar()
        self._after_action()

    def handle_results_double_click(self, on_results_surface: bool) -> None:
        if self.workbench.results_double_click(on_results_surface):
            self._after_action()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {
            "btn-chart": self.action_visualize,
            "btn-export": self.action_export_results,
            "btn-layout": self.action_toggle_output_mode,
            "btn-fullscreen": self.action_toggle_fullscreen,
            "btn-clear": self.action_clear_results,
            "btn-panel-editor": lambda: self._select_panel(Panel.EDITOR),
            "btn-panel-results": lambda: self._select_panel(Panel.RESULTS),
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            event.stop()
            action()

    def _select_panel(self, panel: Panel) -> None:
        self.workbench.layout.select_panel(panel)
        self._after_action()

    def on_resize(self, event: events.Resize) -> None:
        self._apply_layout()

    # ── Misc ────────────────────────────────────────────────────

    def action_show_shortcuts(self) -> None:
        self.push_screen(ShortcutOverlay())

    def action_cycle_theme(self) -> None:
        names = list(TEXTUAL_THEMES)
        current = self._prefs.display.theme
        index = names.index(current) if current in names else -1
        name = names[(index + 1) % len(names)]
        self._prefs.display.theme = name
        self.theme = TEXTUAL_THEMES[name].name
        if self._prefs_path is not None:
            save_theme_name(name, self._prefs_path)
        self.notify(f"Theme: {name} ({THEME_DESCRIPTIONS[name]})")
