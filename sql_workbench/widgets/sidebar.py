"""Sidebar: table browser and execution history."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import OptionList, Static, Tree
from textual.widgets.option_list import Option

from ..core.models import HistoryEntry
from ..core.naming import derive_tab_name

Schema = list[tuple[str, list[tuple[str, str]]]]


class TableBrowser(Tree[str]):
    """Tables as expandable nodes with their columns as leaves.

    Table nodes carry the table name as data; column leaves carry none.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("Tables", **kwargs)
        self.show_root = False

    def populate(self, schema: Schema) -> None:
        self.clear()
        if not schema:
            self.root.add_leaf("No tables")
            return
        for table, columns in schema:
            node = self.root.add(f"▤ {table}", data=table)
            for name, col_type in columns:
                node.add_leaf(f"{name}  [dim]{col_type.lower()}[/]")
        self.root.expand()


class HistoryList(OptionList):
    """Past executions, newest first.  Enter opens, ``r`` opens and runs."""

    BINDINGS = [
        Binding("r", "run_entry", "Run again", show=False),
    ]

    class EntryChosen(Message):
        """A history entry was picked for reopening."""

        def __init__(self, entry: HistoryEntry, execute: bool) -> None:
            super().__init__()
            self.entry = entry
            self.execute = execute

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.entries: list[HistoryEntry] = []

    def update_entries(self, entries: list[HistoryEntry]) -> None:
        if entries == self.entries:
            return
        self.entries = list(entries)
        self.clear_options()
        if not entries:
            self.add_option(Option("[dim]No queries run yet[/]", disabled=True))
            return
        for index, entry in enumerate(entries):
            mark = "[green]✓[/]" if entry.succeeded else "[red]✗[/]"
            label = entry.label or derive_tab_name(entry.query)
            self.add_option(
                Option(f"{mark} {entry.time_str}  {label}", id=str(index))
            )

    def _chosen(self, index: int | None, execute: bool) -> None:
        if index is None or not (0 <= index < len(self.entries)):
            return
        self.post_message(self.EntryChosen(self.entries[index], execute))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self._chosen(event.option_index, execute=False)

    def action_run_entry(self) -> None:
        self._chosen(self.highlighted, execute=True)


class Sidebar(Vertical):
    """Left-docked panel with the table browser above the history list."""

    def compose(self) -> ComposeResult:
        yield Static(" Tables", classes="sidebar-title")
        yield TableBrowser(id="table-browser")
        yield Static(" History", classes="sidebar-title")
        yield HistoryList(id="history-list")
