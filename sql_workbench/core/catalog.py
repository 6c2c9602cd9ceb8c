"""The fixed catalog of vetted, executable queries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

import yaml

from ..log import logger


@dataclass(frozen=True)
class QueryDefinition:
    """A named, runnable catalog query."""

    id: str
    name: str
    query: str


class QueryCatalog:
    """Ordered, read-only collection of query definitions.

    The first definition is the default used to seed new tabs.
    """

    def __init__(self, definitions: Iterable[QueryDefinition]) -> None:
        self._definitions: tuple[QueryDefinition, ...] = tuple(definitions)
        if not self._definitions:
            raise ValueError("Query catalog must contain at least one query")
        self._by_id: dict[str, QueryDefinition] = {}
        for definition in self._definitions:
            if definition.id in self._by_id:
                raise ValueError(f"Duplicate query id in catalog: {definition.id}")
            self._by_id[definition.id] = definition

    def __iter__(self) -> Iterator[QueryDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, query_id: object) -> bool:
        return query_id in self._by_id

    @property
    def default(self) -> QueryDefinition:
        return self._definitions[0]

    def get(self, query_id: str | None) -> QueryDefinition | None:
        if query_id is None:
            return None
        return self._by_id.get(query_id)

    def match_text(self, text: str) -> QueryDefinition | None:
        """Return the definition whose text equals *text*, ignoring outer whitespace."""
        needle = text.strip()
        for definition in self._definitions:
            if definition.query.strip() == needle:
                return definition
        return None


def load_catalog(path: Path) -> QueryCatalog:
    """Load a catalog from YAML.

    Accepts either a bare list of ``{id, name, query}`` mappings or a mapping
    with a top-level ``queries:`` list.

    Raises:
        ValueError: If the file is unreadable or an entry is malformed.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ValueError(f"Cannot read query catalog {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("queries")
    if not isinstance(data, list):
        raise ValueError(f"Query catalog {path} must be a list of queries")

    definitions = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: entry {index} is not a mapping")
        missing = [key for key in ("id", "name", "query") if not entry.get(key)]
        if missing:
            raise ValueError(
                f"{path}: entry {index} is missing {', '.join(missing)}"
            )
        definitions.append(
            QueryDefinition(
                id=str(entry["id"]),
                name=str(entry["name"]),
                query=str(entry["query"]).strip(),
            )
        )

    catalog = QueryCatalog(definitions)
    logger.info("Loaded %d catalog queries from %s", len(catalog), path)
    return catalog


SAMPLE_CATALOG = QueryCatalog(
    [
        QueryDefinition(
            id="all_customers",
            name="All Customers",
            query="SELECT * FROM customers;",
        ),
        QueryDefinition(
            id="orders_by_status",
            name="Orders by Status",
            query=(
                "SELECT status, COUNT(*) AS order_count FROM orders "
                "GROUP BY status ORDER BY order_count DESC;"
            ),
        ),
        QueryDefinition(
            id="revenue_by_country",
            name="Revenue by Country",
            query=(
                "SELECT c.country, ROUND(SUM(o.total), 2) AS revenue FROM orders o "
                "JOIN customers c ON c.id = o.customer_id "
                "GROUP BY c.country ORDER BY revenue DESC;"
            ),
        ),
        QueryDefinition(
            id="top_products",
            name="Top Products",
            query=(
                "SELECT p.name, SUM(oi.quantity) AS units_sold FROM order_items oi "
                "JOIN products p ON p.id = oi.product_id "
                "GROUP BY p.name ORDER BY units_sold DESC LIMIT 10;"
            ),
        ),
        QueryDefinition(
            id="recent_orders",
            name="Recent Orders",
            query=(
                "SELECT o.id, c.name AS customer, o.order_date, o.status, o.total "
                "FROM orders o JOIN customers c ON c.id = o.customer_id "
                "ORDER BY o.order_date DESC LIMIT 20;"
            ),
        ),
        QueryDefinition(
            id="category_prices",
            name="Prices by Category",
            query=(
                "SELECT category, COUNT(*) AS products, ROUND(AVG(price), 2) "
                "AS avg_price FROM products GROUP BY category;"
            ),
        ),
        QueryDefinition(
            id="customers_preview",
            name="Customers (first 100)",
            query="SELECT * FROM customers LIMIT 100;",
        ),
        QueryDefinition(
            id="products_preview",
            name="Products (first 100)",
            query="SELECT * FROM products LIMIT 100;",
        ),
        QueryDefinition(
            id="orders_preview",
            name="Orders (first 100)",
            query="SELECT * FROM orders LIMIT 100;",
        ),
        QueryDefinition(
            id="order_items_preview",
            name="Order Items (first 100)",
            query="SELECT * FROM order_items LIMIT 100;",
        ),
    ]
)
