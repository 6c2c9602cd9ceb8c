"""Framework-agnostic workbench core – tabs, layout, execution, no widgets."""

from .catalog import SAMPLE_CATALOG, QueryCatalog, QueryDefinition, load_catalog
from .errors import (
    ExecutionInFlightError,
    QueryExecutionError,
    QueryValidationError,
    StaleReferenceError,
    WorkbenchError,
)
from .execution import ExecutionOrchestrator, ExecutionOutcome
from .ids import IdGenerator
from .layout import Bounds, DragResize, LayoutController, LayoutDirection, Panel
from .models import HistoryEntry, OutputKind, OutputTab, QueryTab, ResultSet
from .naming import derive_tab_name
from .sample_db import SampleDatabase
from .session import TabSession
from .sync import DeferredCalls, ReentrancyGuard, SyncDirection
from .workbench import Workbench

__all__ = [
    "Bounds",
    "DeferredCalls",
    "DragResize",
    "ExecutionInFlightError",
    "ExecutionOrchestrator",
    "ExecutionOutcome",
    "HistoryEntry",
    "IdGenerator",
    "LayoutController",
    "LayoutDirection",
    "OutputKind",
    "OutputTab",
    "Panel",
    "QueryCatalog",
    "QueryDefinition",
    "QueryExecutionError",
    "QueryTab",
    "QueryValidationError",
    "ReentrancyGuard",
    "ResultSet",
    "SAMPLE_CATALOG",
    "SampleDatabase",
    "StaleReferenceError",
    "SyncDirection",
    "TabSession",
    "Workbench",
    "WorkbenchError",
    "derive_tab_name",
]
