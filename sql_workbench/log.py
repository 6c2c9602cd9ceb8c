"""Package-wide logger for SQL Workbench."""

from __future__ import annotations

import logging

logger = logging.getLogger("sql_workbench")


def configure_logging(*, debug: bool = False, log_file: str | None = None) -> None:
    """Route package log records to Textual devtools and/or a file.

    Without ``debug`` the logger stays at WARNING and only reaches whatever
    handlers the host process installed.
    """
    if not debug:
        logger.setLevel(logging.WARNING)
        return

    from textual.logging import TextualHandler

    logger.setLevel(logging.DEBUG)
    logger.addHandler(TextualHandler())
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
