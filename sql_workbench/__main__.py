"""Entry point for the SQL Workbench CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .core.catalog import SAMPLE_CATALOG, QueryCatalog, load_catalog
from .core.layout import LayoutDirection
from .core.sample_db import SampleDatabase
from .log import configure_logging, logger
from .preferences import PREFS_PATH, load_preferences


def _print_catalog(catalog: QueryCatalog) -> None:
    """Print the catalog as a table and exit."""
    from rich.console import Console
    from rich.table import Table

    table = Table(title="Query catalog")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Query", style="dim")
    for definition in catalog:
        table.add_row(definition.id, definition.name, definition.query)
    Console().print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SQL Workbench")
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"sql-workbench {__version__}",
    )
    parser.add_argument(
        "--catalog",
        "-c",
        type=Path,
        help="YAML file of vetted queries (default: built-in sample catalog)",
    )
    parser.add_argument(
        "--database",
        "-d",
        type=Path,
        help="SQLite file to query (default: in-memory sample shop)",
    )
    parser.add_argument(
        "--layout",
        choices=[d.value for d in LayoutDirection],
        help="Initial layout (overrides preferences)",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        default=PREFS_PATH,
        help=f"Preferences file (default: {PREFS_PATH})",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        default=Path.cwd(),
        help="Directory exported results are written to",
    )
    parser.add_argument(
        "--list-queries",
        action="store_true",
        help="Print the query catalog and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Send debug logs to the Textual console",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write debug logs to this file (with --debug)",
    )
    return parser


def main():
    """Run SQL Workbench."""
    args = build_parser().parse_args()
    configure_logging(debug=args.debug, log_file=args.log_file)

    try:
        catalog = load_catalog(args.catalog) if args.catalog else SAMPLE_CATALOG
    except (OSError, ValueError) as exc:
        print(f"Cannot load query catalog: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.list_queries:
        _print_catalog(catalog)
        return

    try:
        db = SampleDatabase.open(args.database) if args.database else SampleDatabase.create()
    except (OSError, ValueError) as exc:
        print(f"Cannot open database: {exc}", file=sys.stderr)
        sys.exit(1)

    prefs = load_preferences(args.prefs)

    from .app import WorkbenchApp
    from .core.workbench import Workbench

    workbench = Workbench(
        catalog,
        db.execute,
        layout=prefs.build_layout(args.layout),
        history_limit=prefs.execution.history_limit,
    )
    app = WorkbenchApp(
        workbench,
        schema=db.schema,
        prefs=prefs,
        prefs_path=args.prefs,
        export_dir=args.export_dir,
    )
    logger.info("Starting with %d catalog queries", len(catalog))
    try:
        app.run()
    finally:
        db.close()


if __name__ == "__main__":
    main()
