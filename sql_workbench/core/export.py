"""Pure-function export helpers for result output tabs.

Each formatter takes a ``ResultSet`` and returns text.  Only
``results``-kind output tabs are exportable; charts are not.
"""

from __future__ import annotations

import csv
import io
import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from .models import OutputKind, OutputTab, ResultSet

EXPORT_FORMATS: dict[str, str] = {
    "csv": ".csv",
    "json": ".json",
    "md": ".md",
}


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def export_csv(result: ResultSet) -> str:
    """Format rows as CSV with a header line."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    columns = result.columns
    writer.writerow(columns)
    for row in result.rows:
        writer.writerow([_cell(row.get(col)) for col in columns])
    return buf.getvalue()


def export_json(result: ResultSet) -> str:
    """Format rows as a pretty-printed JSON array."""
    return json.dumps(result.rows, indent=2, ensure_ascii=False, default=str)


def export_markdown(result: ResultSet) -> str:
    """Format rows as a GitHub-flavoured markdown table."""
    columns = result.columns
    if not columns:
        return "_No rows_\n"

    def esc(text: str) -> str:
        return text.replace("|", "\\|").replace("\n", " ")

    lines = [
        "| " + " | ".join(esc(c) for c in columns) + " |",
        "| " + " | ".join("---" for _ in columns) + " |",
    ]
    for row in result.rows:
        lines.append(
            "| " + " | ".join(esc(_cell(row.get(c))) for c in columns) + " |"
        )
    return "\n".join(lines) + "\n"


_FORMATTERS: dict[str, Callable[[ResultSet], str]] = {
    "csv": export_csv,
    "json": export_json,
    "md": export_markdown,
}


def export_output_tab(tab: OutputTab, fmt: str) -> str:
    """Render *tab* in *fmt*.

    Raises:
        ValueError: For an unknown format or a non-exportable tab kind.
    """
    formatter = _FORMATTERS.get(fmt)
    if formatter is None:
        raise ValueError(f"Unknown export format: {fmt}")
    if tab.kind is OutputKind.RESULTS:
        return formatter(tab.result)
    if tab.kind is OutputKind.VISUALIZATION:
        raise ValueError("Charts cannot be exported; export the results tab instead")
    raise ValueError(f"Unknown output kind: {tab.kind}")


def export_filename(tab: OutputTab, fmt: str, *, now: datetime | None = None) -> str:
    """Build a filesystem-safe name like ``select-orders-20240501-103000.csv``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    slug = re.sub(r"[^a-z0-9]+", "-", tab.name.lower()).strip("-") or "results"
    return f"{slug}-{stamp}{EXPORT_FORMATS[fmt]}"


def write_export(tab: OutputTab, fmt: str, directory: Path) -> Path:
    """Export *tab* into *directory* and return the written path."""
    text = export_output_tab(tab, fmt)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(tab, fmt)
    path.write_text(text, encoding="utf-8")
    return path
