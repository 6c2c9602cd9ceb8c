"""SQLite-backed executor and table source for the sample shop schema."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from ..log import logger
from .models import Row

_SCHEMA = """\
CREATE TABLE customers (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    country TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE TABLE products (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    price REAL NOT NULL
);
CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    customer_id INTEGER NOT NULL REFERENCES customers(id),
    order_date TEXT NOT NULL,
    status TEXT NOT NULL,
    total REAL NOT NULL
);
CREATE TABLE order_items (
    id INTEGER PRIMARY KEY,
    order_id INTEGER NOT NULL REFERENCES orders(id),
    product_id INTEGER NOT NULL REFERENCES products(id),
    quantity INTEGER NOT NULL,
    unit_price REAL NOT NULL
);
"""

_CUSTOMERS = [
    (1, "Ada Lovelace", "ada@example.com", "UK", "2024-01-04"),
    (2, "Grace Hopper", "grace@example.com", "USA", "2024-01-19"),
    (3, "Alan Turing", "alan@example.com", "UK", "2024-02-02"),
    (4, "Edsger Dijkstra", "edsger@example.com", "Netherlands", "2024-02-27"),
    (5, "Barbara Liskov", "barbara@example.com", "USA", "2024-03-11"),
    (6, "Donald Knuth", "don@example.com", "USA", "2024-03-30"),
    (7, "Niklaus Wirth", "niklaus@example.com", "Switzerland", "2024-04-15"),
    (8, "Margaret Hamilton", "margaret@example.com", "USA", "2024-05-06"),
]

_PRODUCTS = [
    (1, "Mechanical Keyboard", "Peripherals", 129.0),
    (2, "Trackball Mouse", "Peripherals", 59.5),
    (3, "27in Monitor", "Displays", 349.99),
    (4, "USB-C Dock", "Accessories", 189.0),
    (5, "Laptop Stand", "Accessories", 39.95),
    (6, "Noise Cancelling Headphones", "Audio", 279.0),
    (7, "Desk Microphone", "Audio", 99.0),
]

_ORDERS = [
    (1, 1, "2024-05-01", "shipped"),
    (2, 2, "2024-05-03", "delivered"),
    (3, 3, "2024-05-04", "delivered"),
    (4, 2, "2024-05-09", "pending"),
    (5, 4, "2024-05-12", "shipped"),
    (6, 5, "2024-05-15", "cancelled"),
    (7, 6, "2024-05-18", "delivered"),
    (8, 7, "2024-05-21", "pending"),
    (9, 8, "2024-05-25", "delivered"),
    (10, 1, "2024-05-28", "delivered"),
]

# (order_id, product_id, quantity)
_ORDER_ITEMS = [
    (1, 1, 1),
    (1, 5, 2),
    (2, 3, 2),
    (3, 6, 1),
    (3, 2, 1),
    (4, 4, 1),
    (5, 1, 3),
    (6, 7, 1),
    (7, 3, 1),
    (7, 4, 1),
    (8, 2, 2),
    (9, 6, 2),
    (10, 5, 1),
    (10, 7, 1),
]


class SampleDatabase:
    """SQLite connection usable as the workbench executor.

    The connection is shared with the orchestrator's worker thread, so
    access is serialized with a lock.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    @classmethod
    def create(cls) -> SampleDatabase:
        """In-memory database seeded with the sample shop data."""
        db = cls(sqlite3.connect(":memory:", check_same_thread=False))
        db._seed()
        return db

    @classmethod
    def open(cls, path: Path) -> SampleDatabase:
        """Wrap an existing SQLite file."""
        if not path.exists():
            raise FileNotFoundError(f"Database not found: {path}")
        logger.info("Opening database %s", path)
        return cls(sqlite3.connect(str(path), check_same_thread=False))

    def execute(self, sql: str) -> list[Row]:
        """Run *sql* and return its rows as dicts (empty for statements)."""
        with self._lock:
            cursor = self._conn.execute(sql)
            rows = [dict(row) for row in cursor.fetchall()]
            self._conn.commit()
        return rows

    def list_tables(self) -> list[str]:
        with self._lock:
            cursor = self._conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' "
                "AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            return [row["name"] for row in cursor.fetchall()]

    def list_columns(self, table: str) -> list[tuple[str, str]]:
        """``(name, declared type)`` pairs for *table*."""
        quoted = table.replace('"', '""')
        with self._lock:
            cursor = self._conn.execute(f'PRAGMA table_info("{quoted}")')
            return [(row["name"], row["type"] or "") for row in cursor.fetchall()]

    def schema(self) -> list[tuple[str, list[tuple[str, str]]]]:
        """Every table with its columns, for the table browser."""
        return [(table, self.list_columns(table)) for table in self.list_tables()]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _seed(self) -> None:
        prices = {pid: price for pid, _name, _cat, price in _PRODUCTS}
        totals: dict[int, float] = {}
        items = []
        for item_id, (order_id, product_id, qty) in enumerate(_ORDER_ITEMS, start=1):
            unit = prices[product_id]
            items.append((item_id, order_id, product_id, qty, unit))
            totals[order_id] = round(totals.get(order_id, 0.0) + qty * unit, 2)

        with self._lock:
            self._conn.executescript(_SCHEMA)
            self._conn.executemany(
                "INSERT INTO customers VALUES (?, ?, ?, ?, ?)", _CUSTOMERS
            )
            self._conn.executemany(
                "INSERT INTO products VALUES (?, ?, ?, ?)", _PRODUCTS
            )
            self._conn.executemany(
                "INSERT INTO orders VALUES (?, ?, ?, ?, ?)",
                [
                    (oid, cid, day, status, totals.get(oid, 0.0))
                    for oid, cid, day, status in _ORDERS
                ],
            )
            self._conn.executemany(
                "INSERT INTO order_items VALUES (?, ?, ?, ?, ?)", items
            )
            self._conn.commit()
