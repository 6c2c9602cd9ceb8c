"""Framework-agnostic workbench: the state behind the presentation shell.

Composes the catalog, tab session, layout controller and execution
orchestrator, wires their reactions together, and keeps the single
user-visible error slot.  The Textual app renders from this object and
forwards user actions to it; nothing here knows about widgets.
"""

from __future__ import annotations

from pathlib import Path

from ..log import logger
from .catalog import QueryCatalog, QueryDefinition
from .errors import QueryExecutionError, StaleReferenceError, WorkbenchError
from .execution import DEFAULT_HISTORY_LIMIT, ExecutionOrchestrator, Executor
from .export import write_export
from .ids import IdGenerator
from .layout import LayoutController
from .models import HistoryEntry, OutputKind, OutputTab, QueryTab
from .session import ConfirmCallback, TabSession
from .sync import DeferredCalls


class Workbench:
    """One workbench session, explicitly constructed and owned by the shell."""

    def __init__(
        self,
        catalog: QueryCatalog,
        executor: Executor,
        *,
        layout: LayoutController | None = None,
        confirm: ConfirmCallback | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        ids: IdGenerator | None = None,
        deferred: DeferredCalls | None = None,
    ) -> None:
        self.catalog = catalog
        self.session = TabSession(catalog, ids=ids, deferred=deferred, confirm=confirm)
        self.layout = layout or LayoutController()
        self.executor = ExecutionOrchestrator(
            catalog, executor, history_limit=history_limit
        )

        # Only one error is shown; any new user action clears it
        self.error: WorkbenchError | None = None
        # Transient acknowledgement (e.g. "Query saved")
        self.notice: str | None = None
        # A different catalog query was picked but not yet run
        self.query_modified: bool = False

        self.session.on_output_created = self._on_output_created
        self.session.on_outputs_changed = self._on_outputs_changed

    # -- Derived state --------------------------------------------------------

    @property
    def has_results(self) -> bool:
        return self.session.has_outputs

    @property
    def has_rows(self) -> bool:
        """The active output tab has rows to show."""
        tab = self.session.active_output_tab
        return tab is not None and not tab.result.is_empty

    @property
    def loading(self) -> bool:
        return self.executor.loading

    @property
    def current_query(self) -> QueryDefinition | None:
        return self.catalog.get(self.session.editor_query_id)

    @property
    def history(self) -> list[HistoryEntry]:
        return self.executor.history

    def dismiss_error(self) -> None:
        self.error = None
        self.notice = None

    # -- Editor & query tabs --------------------------------------------------

    def edit_text(self, text: str) -> bool:
        changed = self.session.set_editor_text(text)
        if changed:
            self.dismiss_error()
        return changed

    def select_catalog_query(self, query_id: str) -> bool:
        self.dismiss_error()
        if not self.session.select_catalog_query(query_id):
            return False
        self.query_modified = True
        return True

    def add_tab(self) -> QueryTab:
        self.dismiss_error()
        return self.session.add_tab()

    def close_tab(self, tab_id: str | None = None) -> bool:
        self.dismiss_error()
        return self.session.close_tab(tab_id or self.session.active_tab_id)

    def select_tab(self, tab_id: str) -> bool:
        self.dismiss_error()
        return self.session.select_tab(tab_id)

    def rename_tab(self, tab_id: str, name: str) -> bool:
        self.dismiss_error()
        return self.session.rename_tab(tab_id, name)

    def open_table(self, table_name: str, custom_query: str | None = None) -> QueryTab:
        """Table-browser selection: open a new tab querying the table."""
        self.dismiss_error()
        return self.session.open_table(table_name, custom_query)

    def save_query(self, name: str) -> str | None:
        """Acknowledge a save request; nothing is persisted."""
        self.dismiss_error()
        name = name.strip()
        if not name:
            return None
        self.notice = f'Query "{name}" saved'
        return self.notice

    # -- Execution ------------------------------------------------------------

    async def run_query(self, text: str | None = None) -> OutputTab | None:
        """Run the editor text (or *text*) and materialize an output tab.

        Validation and execution failures land in ``error``; they never
        touch tab or output state.
        """
        self.dismiss_error()
        self.query_modified = False
        self.session.settle()
        query_text = self.session.editor_text if text is None else text
        label = self.session.active_tab.name
        return await self._execute(query_text, self.session.editor_query_id, label)

    async def open_history_entry(
        self, entry: HistoryEntry, execute: bool = False
    ) -> QueryTab | None:
        """Reopen a history entry in a new tab, optionally running it."""
        self.dismiss_error()
        tab = self.session.create_tab_from_history(entry)
        if tab is None:
            self.error = StaleReferenceError(
                "Cannot load this query from history: "
                "it is no longer in the query catalog."
            )
            return None
        if execute:
            await self._execute(entry.query, entry.query_id, tab.name)
        return tab

    async def _execute(
        self, query_text: str, query_id: str | None, label: str
    ) -> OutputTab | None:
        try:
            outcome = await self.executor.execute(query_text, query_id, label)
        except WorkbenchError as exc:
            logger.debug("Run rejected: %s", exc)
            self.error = exc
            return None
        if outcome.result is None:
            self.error = QueryExecutionError(outcome.error or "Query failed")
            return None
        return self.session.create_output_tab(
            label, outcome.query_id, OutputKind.RESULTS, outcome.result
        )

    # -- Output tabs ----------------------------------------------------------

    def select_output_tab(self, output_id: str) -> bool:
        self.dismiss_error()
        if not self.session.select_output_tab(output_id):
            return False
        self.layout.show_results()
        return True

    def close_output_tab(self, output_id: str) -> bool:
        self.dismiss_error()
        return self.session.close_output_tab(output_id)

    def clear_results(self, confirm: ConfirmCallback | None = None) -> bool:
        """Clear every output tab; False when the user declined."""
        self.dismiss_error()
        cleared = self.session.clear_all_output_tabs(confirm)
        if cleared:
            self.executor.clear_results()
        return cleared

    def create_visualization(self, output_id: str | None = None) -> OutputTab | None:
        self.dismiss_error()
        source_id = output_id or self.session.active_output_tab_id
        source = next(
            (t for t in self.session.output_tabs if t.id == source_id), None
        )
        if source is None:
            self.error = StaleReferenceError(
                "The results for this chart are no longer available."
            )
            return None
        if source.is_visualization:
            self.error = WorkbenchError("This tab is already a chart.")
            return None
        return self.session.create_visualization_tab(source.id)

    def export_active(self, fmt: str, directory: Path) -> Path | None:
        """Write the active results tab to *directory*."""
        self.dismiss_error()
        tab = self.session.active_output_tab
        if tab is None:
            self.error = StaleReferenceError("No results to export.")
            return None
        try:
            path = write_export(tab, fmt, directory)
        except (ValueError, OSError) as exc:
            logger.debug("Export failed", exc_info=True)
            self.error = WorkbenchError(f"Export failed: {exc}")
            return None
        self.notice = f"Exported to {path}"
        return path

    # -- Layout ---------------------------------------------------------------

    def toggle_fullscreen(self) -> bool:
        self.dismiss_error()
        return self.layout.toggle_fullscreen(self.has_rows)

    def toggle_output_mode(self) -> bool:
        self.dismiss_error()
        return self.layout.toggle_output_mode(self.has_rows, self.loading)

    def results_double_click(self, on_results_surface: bool) -> bool:
        return self.layout.handle_results_double_click(
            on_results_surface, self.has_rows
        )

    # -- Reactions ------------------------------------------------------------

    def _on_output_created(self, tab: OutputTab) -> None:
        self.layout.show_results()

    def _on_outputs_changed(self) -> None:
        self.layout.check_exit_fullscreen(self.has_results)
