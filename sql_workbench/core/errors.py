"""Recoverable error taxonomy for the workbench.

None of these are fatal: the ``Workbench`` catches them and shows one at a
time in its error slot.
"""

from __future__ import annotations


class WorkbenchError(Exception):
    """Base class for user-facing, recoverable workbench errors."""

    kind = "error"

    @property
    def message(self) -> str:
        return str(self)


class QueryValidationError(WorkbenchError):
    """Query text is not one of the vetted catalog queries."""

    kind = "validation"


class ExecutionInFlightError(WorkbenchError):
    """A run was requested while another one is still executing."""

    kind = "validation"


class QueryExecutionError(WorkbenchError):
    """The executor raised while running an accepted query."""

    kind = "execution"


class StaleReferenceError(WorkbenchError):
    """A history entry or output tab referenced by an action no longer exists."""

    kind = "stale"
