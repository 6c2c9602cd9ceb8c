"""Tab session: query tabs, output tabs, and editor/tab synchronization.

The session owns two collections (editable ``QueryTab`` buffers and
``OutputTab`` results) plus the text currently bound to the editor.  The
editor text and the active tab's stored query are kept in agreement by a
one-step propagation in whichever direction the change came from, with a
``ReentrancyGuard`` stopping the opposite reaction from echoing it back.
"""

from __future__ import annotations

from typing import Callable

from ..log import logger
from .catalog import QueryCatalog
from .ids import IdGenerator
from .models import HistoryEntry, OutputKind, OutputTab, QueryTab, ResultSet
from .naming import derive_tab_name
from .sync import DeferredCalls, ReentrancyGuard, SyncDirection

_MUTABLE_FIELDS = frozenset({"name", "query", "query_id", "renamed"})

TABLE_QUERY_TEMPLATE = "SELECT * FROM {table} LIMIT 100;"

ConfirmCallback = Callable[[str], bool]

CLEAR_PROMPT = "Clear all results?"


class TabSession:
    """Multi-tab query session with output tabs and editor binding.

    Every public operation first runs callbacks deferred from the previous
    turn, so outside an event loop each call is its own turn.
    """

    def __init__(
        self,
        catalog: QueryCatalog,
        *,
        ids: Callable[[], str] | None = None,
        deferred: DeferredCalls | None = None,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self.catalog = catalog
        self._ids = ids or IdGenerator()
        self._deferred = deferred or DeferredCalls()
        self._guard = ReentrancyGuard(self._deferred)
        self._guard.on_release = self._on_guard_released
        self._confirm = confirm

        self._query_tabs: list[QueryTab] = []
        self._output_tabs: list[OutputTab] = []
        self._active_tab_id: str = ""
        self._active_output_tab_id: str | None = None

        # Text bound to the editor surface
        self._editor_text: str = ""
        self._editor_query_id: str | None = None
        # Tab whose query the editor currently shows; edits are written there
        self._editor_tab_id: str | None = None
        # Tab the pending editor->tab step wrote into, named on release
        self._written_tab_id: str | None = None

        # Inline rename in progress
        self.editing_tab_id: str | None = None
        self.rename_draft: str = ""

        # -- Listeners (assigned by the owner) --
        self.on_output_created: Callable[[OutputTab], None] | None = None
        self.on_outputs_changed: Callable[[], None] | None = None
        self.on_sync: Callable[[SyncDirection, QueryTab], None] | None = None

        first = self._new_default_tab()
        self._query_tabs.append(first)
        self._activate(first.id)

    # -- Read-only views ------------------------------------------------------

    @property
    def query_tabs(self) -> list[QueryTab]:
        return list(self._query_tabs)

    @property
    def output_tabs(self) -> list[OutputTab]:
        return list(self._output_tabs)

    @property
    def active_tab_id(self) -> str:
        return self.active_tab.id

    @property
    def active_tab(self) -> QueryTab:
        tab = self._find_tab(self._active_tab_id)
        if tab is None:
            # Dangling pointer: heal by activating the first tab
            tab = self._query_tabs[0]
            logger.debug("Active tab %s missing, healing", self._active_tab_id)
            self._activate(tab.id)
        return tab

    @property
    def active_output_tab_id(self) -> str | None:
        return self._active_output_tab_id

    @property
    def active_output_tab(self) -> OutputTab | None:
        return self._find_output(self._active_output_tab_id)

    @property
    def has_outputs(self) -> bool:
        return bool(self._output_tabs)

    @property
    def editor_text(self) -> str:
        return self._editor_text

    @property
    def editor_query_id(self) -> str | None:
        return self._editor_query_id

    @property
    def syncing(self) -> SyncDirection | None:
        """Direction currently propagating, if any."""
        return self._guard.held

    def settle(self) -> None:
        """Finish the current turn: run deferred guard releases and reactions."""
        self._deferred.run_pending()

    # -- Query tabs -----------------------------------------------------------

    def add_tab(self) -> QueryTab:
        """Open a tab seeded from the default catalog query and activate it."""
        self.settle()
        tab = self._new_default_tab()
        self._query_tabs.append(tab)
        self._activate(tab.id)
        return tab

    def close_tab(self, tab_id: str) -> bool:
        """Close a tab, moving activation to its left (else right) neighbour.

        Closing the last tab replaces it with a fresh default tab.  Output
        tabs are never affected.
        """
        self.settle()
        index = self._tab_index(tab_id)
        if index is None:
            return False
        if self.editing_tab_id == tab_id:
            self.cancel_rename()

        if len(self._query_tabs) == 1:
            replacement = self._new_default_tab()
            self._query_tabs.append(replacement)
            del self._query_tabs[index]
            self._activate(replacement.id)
            return True

        was_active = tab_id == self._active_tab_id
        del self._query_tabs[index]
        if was_active:
            neighbour = self._query_tabs[index - 1 if index > 0 else 0]
            self._activate(neighbour.id)
        return True

    def select_tab(self, tab_id: str) -> bool:
        """Activate a tab; unknown ids are ignored."""
        self.settle()
        if self._find_tab(tab_id) is None:
            return False
        if tab_id != self._active_tab_id:
            self._activate(tab_id)
        return True

    def cycle_tab(self, offset: int) -> QueryTab:
        """Activate the tab *offset* positions away, wrapping around."""
        self.settle()
        index = self._tab_index(self._active_tab_id) or 0
        target = self._query_tabs[(index + offset) % len(self._query_tabs)]
        if target.id != self._active_tab_id:
            self._activate(target.id)
        return target

    def rename_tab(self, tab_id: str, new_name: str) -> bool:
        """Give a tab a user-chosen name, freezing auto-naming for it.

        Blank names are refused and the previous name kept.
        """
        self.settle()
        name = new_name.strip()
        if not name or self._find_tab(tab_id) is None:
            return False
        self.update_query_tab(tab_id, name=name, renamed=True)
        return True

    def begin_rename(self, tab_id: str) -> bool:
        tab = self._find_tab(tab_id)
        if tab is None:
            return False
        self.editing_tab_id = tab_id
        self.rename_draft = tab.name
        return True

    def set_rename_draft(self, text: str) -> None:
        if self.editing_tab_id is not None:
            self.rename_draft = text

    def commit_rename(self) -> bool:
        if self.editing_tab_id is None:
            return False
        tab_id, draft = self.editing_tab_id, self.rename_draft
        self.cancel_rename()
        return self.rename_tab(tab_id, draft)

    def cancel_rename(self) -> None:
        self.editing_tab_id = None
        self.rename_draft = ""

    def update_query_tab(self, tab_id: str, **fields: object) -> QueryTab | None:
        """Merge *fields* into a tab.

        Called both by the sync loop (guard held: no further propagation)
        and directly.  A direct change to the active tab's query is copied
        to the editor once.
        """
        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update tab fields: {', '.join(sorted(unknown))}")
        tab = self._find_tab(tab_id)
        if tab is None:
            return None
        for key, value in fields.items():
            setattr(tab, key, value)

        if self._guard.idle and tab.id == self._active_tab_id:
            self._sync_tab_to_editor()
            self._auto_name_active()
        return tab

    def open_table(self, table_name: str, custom_query: str | None = None) -> QueryTab:
        """Open a new tab querying *table_name* (or running *custom_query*)."""
        self.settle()
        query = custom_query or TABLE_QUERY_TEMPLATE.format(table=table_name)
        match = self.catalog.match_text(query)
        tab = QueryTab(
            id=self._ids(),
            name=f"SELECT {table_name}",
            query=query,
            query_id=match.id if match else None,
        )
        self._query_tabs.append(tab)
        self._activate(tab.id)
        return tab

    def create_tab_from_history(self, entry: HistoryEntry) -> QueryTab | None:
        """Reopen a past execution in a new tab.

        Returns None when the entry's catalog query has since disappeared.
        """
        self.settle()
        if entry.query_id not in self.catalog:
            logger.debug("History entry %r no longer in catalog", entry.query_id)
            return None
        tab = QueryTab(
            id=self._ids(),
            name=entry.label or derive_tab_name(entry.query),
            query=entry.query,
            query_id=entry.query_id,
        )
        self._query_tabs.append(tab)
        self._activate(tab.id)
        return tab

    # -- Editor binding -------------------------------------------------------

    def set_editor_text(self, text: str) -> bool:
        """Record an edit of the editor text and push it into the active tab."""
        self.settle()
        if text == self._editor_text:
            return False
        match = self.catalog.match_text(text)
        self._editor_text = text
        self._editor_query_id = match.id if match else None
        self._sync_editor_to_tab()
        return True

    def select_catalog_query(self, query_id: str) -> bool:
        """Load a catalog query into the editor (and so the active tab)."""
        self.settle()
        definition = self.catalog.get(query_id)
        if definition is None:
            return False
        self._editor_text = definition.query
        self._editor_query_id = definition.id
        self._sync_editor_to_tab()
        return True

    # -- Output tabs ----------------------------------------------------------

    def create_output_tab(
        self,
        source_tab_name: str,
        query_id: str | None,
        kind: OutputKind,
        payload: ResultSet,
    ) -> OutputTab:
        """Append an output tab and make it the active one."""
        self.settle()
        tab = OutputTab(
            id=self._ids(),
            name=source_tab_name,
            query_id=query_id,
            kind=kind,
            result=payload,
        )
        self._output_tabs.append(tab)
        self._active_output_tab_id = tab.id
        if self.on_output_created is not None:
            self.on_output_created(tab)
        self._notify_outputs_changed()
        return tab

    def select_output_tab(self, output_id: str) -> bool:
        if self._find_output(output_id) is None:
            return False
        self._active_output_tab_id = output_id
        return True

    def close_output_tab(self, output_id: str) -> bool:
        index = self._output_index(output_id)
        if index is None:
            return False
        del self._output_tabs[index]
        if self._active_output_tab_id == output_id:
            if self._output_tabs:
                neighbour = self._output_tabs[index - 1 if index > 0 else 0]
                self._active_output_tab_id = neighbour.id
            else:
                self._active_output_tab_id = None
        self._notify_outputs_changed()
        return True

    def clear_all_output_tabs(self, confirm: ConfirmCallback | None = None) -> bool:
        """Remove every output tab after confirmation.

        Returns False ("not cleared") when the confirmation is declined.
        """
        if not self._output_tabs:
            return True
        confirm = confirm or self._confirm
        if confirm is not None and not confirm(CLEAR_PROMPT):
            logger.debug("Clear all results declined")
            return False
        self._output_tabs.clear()
        self._active_output_tab_id = None
        self._notify_outputs_changed()
        return True

    def create_visualization_tab(self, source_output_id: str) -> OutputTab | None:
        """Chart a results tab from a snapshot of its rows.

        Returns None if the source is gone or is itself a visualization.
        """
        source = self._find_output(source_output_id)
        if source is None:
            logger.debug("Visualization source %s no longer exists", source_output_id)
            return None
        if source.kind is not OutputKind.RESULTS:
            return None
        return self.create_output_tab(
            f"{source.name} (chart)",
            source.query_id,
            OutputKind.VISUALIZATION,
            source.result.snapshot(),
        )

    # -- Synchronization ------------------------------------------------------

    def _activate(self, tab_id: str) -> None:
        self._active_tab_id = tab_id
        self._sync_tab_to_editor()

    def _sync_tab_to_editor(self) -> None:
        """Copy the active tab's query into the editor (guard: tab->editor)."""
        tab = self._find_tab(self._active_tab_id)
        if tab is None:
            return
        if tab.query == self._editor_text and tab.query_id == self._editor_query_id:
            self._editor_tab_id = tab.id
            return
        if not self._guard.acquire(SyncDirection.TAB_TO_EDITOR):
            # Previous step still settling; its release is queued ahead of this
            self._deferred(self._sync_tab_to_editor)
            return
        self._editor_text = tab.query
        self._editor_query_id = tab.query_id
        self._editor_tab_id = tab.id
        self._emit_sync(SyncDirection.TAB_TO_EDITOR, tab)
        self._guard.release_later()

    def _sync_editor_to_tab(self) -> None:
        """Store the editor text in the tab it shows (guard: editor->tab)."""
        self._write_editor_text(
            self._editor_tab_id, self._editor_text, self._editor_query_id
        )

    def _write_editor_text(
        self, tab_id: str | None, text: str, query_id: str | None
    ) -> None:
        # Target and text are fixed when the edit happens, not when it lands
        tab = self._find_tab(tab_id)
        if tab is None:
            return
        if tab.query == text and tab.query_id == query_id:
            # Echo of a tab activation
            return
        held = self._guard.held
        if held is SyncDirection.TAB_TO_EDITOR:
            # A user edit racing a tab activation lands once that settles
            self._deferred(lambda: self._write_editor_text(tab.id, text, query_id))
            return
        if held is None:
            self._guard.acquire(SyncDirection.EDITOR_TO_TAB)
            self.update_query_tab(tab.id, query=text, query_id=query_id)
            self._written_tab_id = tab.id
            self._emit_sync(SyncDirection.EDITOR_TO_TAB, tab)
            self._guard.release_later()
            return
        # Follow-up edit while editor->tab is held: merge into that step
        self.update_query_tab(tab.id, query=text, query_id=query_id)
        self._written_tab_id = tab.id
        self._emit_sync(SyncDirection.EDITOR_TO_TAB, tab)

    def _on_guard_released(self, direction: SyncDirection) -> None:
        written, self._written_tab_id = self._written_tab_id, None
        self._auto_name_active()
        # An edit may have landed in a tab that is no longer active
        if written is not None and written != self._active_tab_id:
            self._auto_name(written)

    def _auto_name_active(self) -> None:
        self._auto_name(self._active_tab_id)

    def _auto_name(self, tab_id: str | None) -> None:
        if not self._guard.idle:
            return
        tab = self._find_tab(tab_id)
        if tab is None or tab.renamed:
            return
        name = derive_tab_name(tab.query)
        if name != tab.name:
            tab.name = name

    def _emit_sync(self, direction: SyncDirection, tab: QueryTab) -> None:
        if self.on_sync is not None:
            self.on_sync(direction, tab)

    # -- Helpers --------------------------------------------------------------

    def _new_default_tab(self) -> QueryTab:
        default = self.catalog.default
        return QueryTab(
            id=self._ids(),
            name=derive_tab_name(default.query),
            query=default.query,
            query_id=default.id,
        )

    def _notify_outputs_changed(self) -> None:
        if self.on_outputs_changed is not None:
            self.on_outputs_changed()

    def _find_tab(self, tab_id: str | None) -> QueryTab | None:
        return next((t for t in self._query_tabs if t.id == tab_id), None)

    def _tab_index(self, tab_id: str) -> int | None:
        return next(
            (i for i, t in enumerate(self._query_tabs) if t.id == tab_id), None
        )

    def _find_output(self, output_id: str | None) -> OutputTab | None:
        return next((t for t in self._output_tabs if t.id == output_id), None)

    def _output_index(self, output_id: str) -> int | None:
        return next(
            (i for i, t in enumerate(self._output_tabs) if t.id == output_id), None
        )
