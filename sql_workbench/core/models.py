"""Data models for query tabs, output tabs, and execution history."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

Row = dict[str, Any]


class OutputKind(str, Enum):
    """Discriminant for what an output tab shows."""

    RESULTS = "results"
    VISUALIZATION = "visualization"


@dataclass
class QueryTab:
    """One editable query buffer."""

    id: str
    name: str
    query: str = ""
    query_id: str | None = None  # None when the text matches no catalog entry
    # Set once the user names the tab; auto-naming never touches it after
    renamed: bool = False


@dataclass
class ResultSet:
    """Rows returned by one execution, owned by exactly one output tab."""

    rows: list[Row] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def columns(self) -> list[str]:
        """Column names in first-seen order across all rows."""
        seen: dict[str, None] = {}
        for row in self.rows:
            for key in row:
                seen.setdefault(key, None)
        return list(seen)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def snapshot(self) -> ResultSet:
        """Independent deep copy, safe to keep after the source is closed."""
        return ResultSet(rows=copy.deepcopy(self.rows), duration_ms=self.duration_ms)


@dataclass
class OutputTab:
    """A materialized result, or a visualization built from one."""

    id: str
    name: str
    query_id: str | None
    kind: OutputKind
    result: ResultSet = field(default_factory=ResultSet)

    @property
    def is_visualization(self) -> bool:
        return self.kind is OutputKind.VISUALIZATION


@dataclass(frozen=True)
class HistoryEntry:
    """One past execution request, successful or not."""

    query: str
    query_id: str | None
    label: str
    timestamp: datetime = field(default_factory=datetime.now)
    duration_ms: float | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def time_str(self) -> str:
        return self.timestamp.strftime("%H:%M:%S")
