"""Shared test fixtures for the sql-workbench test suite."""

from __future__ import annotations

import itertools

import pytest

from sql_workbench.core.catalog import QueryCatalog, QueryDefinition
from sql_workbench.core.ids import IdGenerator
from sql_workbench.core.sample_db import SampleDatabase
from sql_workbench.core.session import TabSession
from sql_workbench.core.sync import DeferredCalls
from sql_workbench.core.workbench import Workbench

CUSTOMERS_SQL = "SELECT * FROM customers;"
ORDERS_SQL = "SELECT * FROM orders;"
PRODUCTS_SQL = "SELECT name, price FROM products;"


# -- Catalog & ids ------------------------------------------------------------


@pytest.fixture
def catalog() -> QueryCatalog:
    return QueryCatalog(
        [
            QueryDefinition("q_customers", "All customers", CUSTOMERS_SQL),
            QueryDefinition("q_orders", "All orders", ORDERS_SQL),
            QueryDefinition("q_products", "Product prices", PRODUCTS_SQL),
        ]
    )


@pytest.fixture
def ids() -> IdGenerator:
    """Deterministic ids: t1, t2, t3, ..."""
    counter = itertools.count(1)
    return IdGenerator(factory=lambda: f"t{next(counter)}")


@pytest.fixture
def deferred() -> DeferredCalls:
    return DeferredCalls()


@pytest.fixture
def session(catalog, ids, deferred) -> TabSession:
    """A settled session: the initial tab-to-editor step has finished."""
    s = TabSession(catalog, ids=ids, deferred=deferred)
    s.settle()
    return s


# -- Executors ----------------------------------------------------------------


class FakeExecutor:
    """Records every query it is handed and returns canned rows.

    ``fail_with`` makes every call raise that exception instead.
    """

    def __init__(self, rows=None, fail_with: Exception | None = None) -> None:
        self.rows = rows if rows is not None else [
            {"id": 1, "name": "Ada", "total": 10.5},
            {"id": 2, "name": "Grace", "total": 7.25},
        ]
        self.fail_with = fail_with
        self.calls: list[str] = []

    def __call__(self, sql: str):
        self.calls.append(sql)
        if self.fail_with is not None:
            raise self.fail_with
        return [dict(row) for row in self.rows]


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def workbench(catalog, executor, ids, deferred) -> Workbench:
    wb = Workbench(catalog, executor, ids=ids, deferred=deferred)
    wb.session.settle()
    return wb


@pytest.fixture
def sample_db():
    db = SampleDatabase.create()
    yield db
    db.close()


@pytest.fixture
def make_executor():
    """Factory for executors with custom rows or a failure."""
    return FakeExecutor
