"""Execution orchestrator: vetted-query policy, timing, errors, history."""

from __future__ import annotations

import asyncio
import inspect
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Union

from ..log import logger
from .catalog import QueryCatalog, QueryDefinition
from .errors import ExecutionInFlightError, QueryValidationError
from .models import HistoryEntry, ResultSet, Row

Executor = Callable[[str], Union[Iterable[Row], Awaitable[Iterable[Row]]]]

DEFAULT_HISTORY_LIMIT = 50

NOT_IN_CATALOG_MESSAGE = (
    "You can only execute queries from the catalog. "
    "Please pick a query from the query list."
)


@dataclass
class ExecutionOutcome:
    """What one accepted run produced: rows or an error message."""

    query_id: str
    label: str
    result: ResultSet | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ExecutionOrchestrator:
    """Runs catalog queries through an external executor, one at a time.

    The executor may be a plain function (run in a worker thread so the
    event loop stays responsive) or a coroutine function.
    """

    def __init__(
        self,
        catalog: QueryCatalog,
        executor: Executor,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.catalog = catalog
        self._executor = executor
        self._clock = clock
        self._history: deque[HistoryEntry] = deque(maxlen=max(1, history_limit))

        self.loading: bool = False
        self.results: ResultSet | None = None
        self.last_error: str | None = None
        self.last_duration_ms: float | None = None
        self.invocations: int = 0

    @property
    def history(self) -> list[HistoryEntry]:
        """Past executions, newest first."""
        return list(reversed(self._history))

    @property
    def history_limit(self) -> int:
        return self._history.maxlen or 0

    def validate(self, query_text: str) -> QueryDefinition:
        """Return the catalog entry for *query_text*.

        Raises:
            QueryValidationError: If the text matches no catalog query.
        """
        definition = self.catalog.match_text(query_text)
        if definition is None:
            raise QueryValidationError(NOT_IN_CATALOG_MESSAGE)
        return definition

    async def execute(
        self,
        query_text: str,
        query_id: str | None = None,
        label: str = "",
    ) -> ExecutionOutcome:
        """Run *query_text* once and record the outcome.

        Executor failures are captured in the outcome and ``last_error``
        rather than raised.

        Raises:
            QueryValidationError: If the text is not a catalog query.
            ExecutionInFlightError: If another run has not finished yet.
        """
        definition = self.validate(query_text)
        if self.loading:
            raise ExecutionInFlightError("A query is already running")
        if query_id is not None and query_id != definition.id:
            logger.debug(
                "Query id %s does not match text; using %s", query_id, definition.id
            )

        self.loading = True
        self.last_error = None
        self.invocations += 1
        started = self._clock()
        rows: list[Row] | None = None
        error: str | None = None
        try:
            rows = await self._invoke(query_text)
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__
            logger.debug("Query %s failed", definition.id, exc_info=True)
        finally:
            self.loading = False
        duration_ms = (self._clock() - started) * 1000.0

        self.last_duration_ms = duration_ms
        self._history.append(
            HistoryEntry(
                query=query_text,
                query_id=definition.id,
                label=label,
                duration_ms=duration_ms,
                error=error,
            )
        )

        if error is not None:
            self.last_error = error
            return ExecutionOutcome(definition.id, label, error=error)

        result = ResultSet(rows=rows or [], duration_ms=duration_ms)
        self.results = result
        logger.info(
            "Ran %s: %d rows in %.1f ms", definition.id, result.row_count, duration_ms
        )
        return ExecutionOutcome(definition.id, label, result=result)

    def clear_results(self) -> None:
        self.results = None
        self.last_error = None

    async def _invoke(self, query_text: str) -> list[Row]:
        if inspect.iscoroutinefunction(self._executor):
            rows: Any = await self._executor(query_text)
        else:
            rows = await asyncio.to_thread(self._executor, query_text)
        return [dict(row) for row in rows]
