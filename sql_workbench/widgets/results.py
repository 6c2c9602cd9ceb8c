"""Result rendering: the rows table, the bar chart, and their container."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text
from textual import events
from textual.containers import Vertical
from textual.widgets import DataTable, Static

from ..core.charts import ChartSeries, chart_series
from ..core.models import OutputTab, ResultSet

BAR_WIDTH = 40
LABEL_WIDTH = 24


def _format_cell(value: object) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, float):
        return f"{value:,.2f}"
    return str(value)


class ResultsTable(DataTable):
    """Rows of a results-kind output tab."""

    def __init__(self, **kwargs) -> None:
        super().__init__(zebra_stripes=True, cursor_type="row", **kwargs)
        self.shown_id: str | None = None

    def show_result(self, tab_id: str, result: ResultSet, max_rows: int) -> None:
        if tab_id == self.shown_id:
            return
        self.shown_id = tab_id
        self.clear(columns=True)
        columns = result.columns
        if not columns:
            return
        self.add_columns(*columns)
        for row in result.rows[:max_rows]:
            self.add_row(
                *(
                    Text(_format_cell(row.get(c)), style="dim" if row.get(c) is None else "")
                    for c in columns
                )
            )


def render_chart(series: ChartSeries, bar_width: int = BAR_WIDTH) -> Table:
    """Horizontal bar chart as a rich Table."""
    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", no_wrap=True, max_width=LABEL_WIDTH)
    table.add_column(no_wrap=True)
    table.add_column(justify="right", no_wrap=True)
    peak = series.max_value
    for label, value in series.points:
        length = int(round(value / peak * bar_width)) if peak > 0 else 0
        table.add_row(
            Text(label, overflow="ellipsis"),
            Text("█" * max(length, 0), style="bold blue"),
            f"{value:,.2f}",
        )
    return table


class ChartView(Static):
    """Bar chart of a visualization-kind output tab."""

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.shown_id: str | None = None

    def show_chart(self, tab_id: str, result: ResultSet) -> None:
        if tab_id == self.shown_id:
            return
        self.shown_id = tab_id
        series = chart_series(result)
        if series is None:
            self.update("[dim]Nothing to chart: these results have no numeric column.[/]")
            return
        title = f"[b]{series.value_column}[/] by [b]{series.label_column}[/]"
        if series.truncated:
            title += f"  [dim](first {len(series.points)} rows)[/]"
        grid = Table.grid()
        grid.add_row(title)
        grid.add_row(render_chart(series))
        self.update(grid)


class ResultsPane(Vertical):
    """Results panel.  Double-clicking its own surface toggles fullscreen.

    Clicks on nested controls (tabs, buttons, table cells) are not the
    surface and are ignored.
    """

    def on_click(self, event: events.Click) -> None:
        if event.chain < 2:
            return
        on_surface = event.widget is self or (
            event.widget is not None and event.widget.has_class("results-surface")
        )
        self.app.handle_results_double_click(on_surface)

    def show(self, tab: OutputTab | None, max_rows: int) -> None:
        table = self.query_one(ResultsTable)
        chart = self.query_one(ChartView)
        if tab is None:
            table.display = False
            chart.display = False
            return
        if tab.is_visualization:
            chart.show_chart(tab.id, tab.result)
        else:
            table.show_result(tab.id, tab.result, max_rows)
        table.display = not tab.is_visualization
        chart.display = tab.is_visualization
