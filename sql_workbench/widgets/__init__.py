"""Widget classes for the workbench shell."""

from .handles import ResizeHandle
from .results import ChartView, ResultsPane, ResultsTable, render_chart
from .screens import (
    ConfirmScreen,
    ExportFormatScreen,
    ShortcutOverlay,
    TextPromptScreen,
)
from .sidebar import HistoryList, Sidebar, TableBrowser
from .tabs import AddTabButton, OutputTabBar, QueryTabBar, TabButton, TabCloseButton

__all__ = [
    "AddTabButton",
    "ChartView",
    "ConfirmScreen",
    "ExportFormatScreen",
    "HistoryList",
    "OutputTabBar",
    "QueryTabBar",
    "ResizeHandle",
    "ResultsPane",
    "ResultsTable",
    "ShortcutOverlay",
    "Sidebar",
    "TabButton",
    "TabCloseButton",
    "TableBrowser",
    "TextPromptScreen",
    "render_chart",
]
