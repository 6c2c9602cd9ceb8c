"""Tab bar widgets for SQL Workbench."""

from __future__ import annotations

from textual import events
from textual.containers import Horizontal
from textual.widgets import Static

from ..core.models import OutputTab, QueryTab


class TabButton(Static):
    """A clickable tab label in a tab bar."""

    def __init__(self, label: str, tab_id: str, kind: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.tab_id = tab_id
        self.kind = kind

    def on_click(self, event: events.Click) -> None:
        event.stop()
        if self.kind == "query":
            self.app.select_query_tab(self.tab_id)
            # Double-click starts an inline rename
            if event.chain >= 2:
                self.app.action_rename_tab()
        else:
            self.app.select_output_tab(self.tab_id)


class TabCloseButton(Static):
    """The small close mark after a tab label."""

    def __init__(self, tab_id: str, kind: str, **kwargs) -> None:
        super().__init__("×", **kwargs)
        self.tab_id = tab_id
        self.kind = kind

    def on_click(self, event: events.Click) -> None:
        event.stop()
        if self.kind == "query":
            self.app.close_query_tab(self.tab_id)
        else:
            self.app.close_output_tab(self.tab_id)


class AddTabButton(Static):
    def on_click(self, event: events.Click) -> None:
        event.stop()
        self.app.action_new_tab()


class QueryTabBar(Horizontal):
    """Horizontal bar of editable query tabs plus a "+" button."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._signature: tuple = ()

    def update_tabs(self, tabs: list[QueryTab], active_id: str) -> None:
        """Rebuild the tab bar buttons when names, order or selection changed."""
        signature = (tuple((t.id, t.name) for t in tabs), active_id)
        if signature == self._signature:
            return
        self._signature = signature
        self.remove_children()
        for tab in tabs:
            cls = "tab-btn tab-active" if tab.id == active_id else "tab-btn"
            self.mount(TabButton(f" {tab.name} ", tab.id, "query", classes=cls))
            self.mount(TabCloseButton(tab.id, "query", classes="tab-close"))
        self.mount(AddTabButton(" + ", classes="tab-add"))


class OutputTabBar(Horizontal):
    """Horizontal bar of result and chart tabs."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._signature: tuple = ()

    def update_tabs(self, tabs: list[OutputTab], active_id: str | None) -> None:
        signature = (tuple(t.id for t in tabs), active_id)
        if signature == self._signature:
            return
        self._signature = signature
        self.remove_children()
        for tab in tabs:
            icon = "▇" if tab.is_visualization else "≡"
            cls = "tab-btn tab-active" if tab.id == active_id else "tab-btn"
            self.mount(TabButton(f" {icon} {tab.name} ", tab.id, "output", classes=cls))
            self.mount(TabCloseButton(tab.id, "output", classes="tab-close"))
