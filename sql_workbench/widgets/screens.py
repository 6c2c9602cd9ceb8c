"""Modal screen widgets for SQL Workbench."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, Static
from textual.widgets.option_list import Option

from ..core.export import EXPORT_FORMATS

SHORTCUTS_TEXT = """\
                   Keyboard Shortcuts
────────────────────────────────────────────────────

 TABS ──────────────────────────────────────────────
  Ctrl+T           New query tab
  Ctrl+W           Close query tab
  F2               Rename query tab (or double-click)
  Ctrl+PgUp/PgDn   Previous/next query tab

 QUERIES ───────────────────────────────────────────
  F5 / Ctrl+R      Run query
  Ctrl+S           Save query
  Ctrl+E           Export results (CSV, JSON, Markdown)
  F6               Chart the active results
  Ctrl+K           Clear all results

 LAYOUT ────────────────────────────────────────────
  Ctrl+L           Toggle side-by-side / stacked
  F11              Fullscreen results (or double-click)
  Ctrl+B           Toggle sidebar
  F9               Next theme
  Ctrl+Q           Quit

           Press F1 or Esc to close\
"""

EXPORT_LABELS: dict[str, str] = {
    "csv": "CSV (comma separated)",
    "json": "JSON (array of objects)",
    "md": "Markdown table",
}


class ShortcutOverlay(ModalScreen):
    """Modal overlay listing keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss_overlay", show=False),
        Binding("f1", "dismiss_overlay", show=False),
    ]

    def compose(self) -> ComposeResult:
        with ScrollableContainer(id="shortcut-modal"):
            yield Static(SHORTCUTS_TEXT, id="shortcut-content")

    def action_dismiss_overlay(self) -> None:
        self.app.pop_screen()

    def on_click(self, event) -> None:
        """Dismiss overlay when clicking outside the modal content."""
        modal = self.query_one("#shortcut-modal")
        if (event.screen_x, event.screen_y) not in modal.region:
            self.app.pop_screen()


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no question; dismisses with True only on an explicit yes."""

    BINDINGS = [
        Binding("escape", "answer(False)", show=False),
        Binding("n", "answer(False)", show=False),
        Binding("y", "answer(True)", show=False),
    ]

    def __init__(self, message: str) -> None:
        super().__init__()
        self._message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-modal", classes="modal-box"):
            yield Static(self._message, id="confirm-message")
            with Horizontal(classes="modal-buttons"):
                yield Button("Yes", variant="error", id="confirm-yes")
                yield Button("No", id="confirm-no")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, value: bool) -> None:
        self.dismiss(value)


class TextPromptScreen(ModalScreen[str]):
    """Single-line text entry.  Dismisses with "" when cancelled."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
    ]

    def __init__(self, title: str, value: str = "", placeholder: str = "") -> None:
        super().__init__()
        self._title = title
        self._value = value
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical(id="prompt-modal", classes="modal-box"):
            yield Static(
                f"{self._title}  [dim](Enter to confirm, Esc to cancel)[/]",
                id="prompt-title",
            )
            yield Input(
                value=self._value, placeholder=self._placeholder, id="prompt-input"
            )

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def action_cancel(self) -> None:
        self.dismiss("")


class ExportFormatScreen(ModalScreen[str]):
    """Pick an export format; dismisses with "" when cancelled."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="export-modal", classes="modal-box"):
            yield Static("Export results as", id="export-title")
            yield OptionList(
                *(Option(EXPORT_LABELS.get(fmt, fmt), id=fmt) for fmt in EXPORT_FORMATS),
                id="export-options",
            )

    def on_mount(self) -> None:
        self.query_one("#export-options", OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(event.option.id or "")

    def action_cancel(self) -> None:
        self.dismiss("")
