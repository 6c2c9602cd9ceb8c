"""Chart data for visualization output tabs."""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any

from .models import ResultSet

MAX_POINTS = 30


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


@dataclass
class ChartSeries:
    """Label/value pairs picked out of a result set."""

    label_column: str
    value_column: str
    points: list[tuple[str, float]] = field(default_factory=list)
    truncated: bool = False

    @property
    def max_value(self) -> float:
        return max((v for _, v in self.points), default=0.0)


def chart_series(result: ResultSet, max_points: int = MAX_POINTS) -> ChartSeries | None:
    """Pick the first numeric column as values and the first other column as labels.

    A column counts as numeric when every non-null value in it is a number.
    Returns None when the rows have no numeric column.  Without a label
    column, rows are labelled by position.
    """
    columns = result.columns
    numeric = [
        col
        for col in columns
        if any(row.get(col) is not None for row in result.rows)
        and all(
            _is_number(row.get(col)) for row in result.rows if row.get(col) is not None
        )
    ]
    if not numeric:
        return None

    # Prefer a measure over an id-like first column
    value_column = next((c for c in numeric if c.lower() != "id"), numeric[0])
    label_column = next((c for c in columns if c not in numeric), "")

    series = ChartSeries(label_column=label_column or "#", value_column=value_column)
    for index, row in enumerate(result.rows):
        if len(series.points) >= max_points:
            series.truncated = True
            break
        value = row.get(value_column)
        if value is None:
            continue
        label = str(row.get(label_column)) if label_column else str(index + 1)
        series.points.append((label, float(value)))
    return series
