"""Tests for the query catalog and its YAML loader."""

from __future__ import annotations

import pytest

from sql_workbench.core.catalog import (
    SAMPLE_CATALOG,
    QueryCatalog,
    QueryDefinition,
    load_catalog,
)


class TestQueryCatalog:
    def test_default_is_first(self, catalog):
        assert catalog.default.id == "q_customers"

    def test_lookup_by_id(self, catalog):
        assert catalog.get("q_orders").name == "All orders"
        assert catalog.get("missing") is None
        assert catalog.get(None) is None

    def test_contains_and_len(self, catalog):
        assert "q_products" in catalog
        assert "nope" not in catalog
        assert len(catalog) == 3

    def test_iteration_keeps_order(self, catalog):
        assert [d.id for d in catalog] == ["q_customers", "q_orders", "q_products"]

    def test_match_text_ignores_outer_whitespace(self, catalog):
        match = catalog.match_text("\n  SELECT * FROM customers;  \n")
        assert match is not None
        assert match.id == "q_customers"

    def test_match_text_is_exact_otherwise(self, catalog):
        assert catalog.match_text("SELECT * FROM customers") is None
        assert catalog.match_text("select * from customers;") is None

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError, match="at least one"):
            QueryCatalog([])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            QueryCatalog(
                [
                    QueryDefinition("a", "A", "SELECT 1;"),
                    QueryDefinition("a", "B", "SELECT 2;"),
                ]
            )


class TestSampleCatalog:
    def test_ids_unique_and_tables_covered(self):
        ids = [d.id for d in SAMPLE_CATALOG]
        assert len(ids) == len(set(ids))
        for table in ("customers", "products", "orders", "order_items"):
            assert SAMPLE_CATALOG.match_text(f"SELECT * FROM {table} LIMIT 100;")

    def test_sample_queries_run(self, sample_db):
        for definition in SAMPLE_CATALOG:
            sample_db.execute(definition.query)


class TestLoadCatalog:
    def test_load_list(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "- id: one\n  name: One\n  query: SELECT 1;\n"
            "- id: two\n  name: Two\n  query: |\n    SELECT 2;\n"
        )
        catalog = load_catalog(path)
        assert [d.id for d in catalog] == ["one", "two"]
        assert catalog.get("two").query == "SELECT 2;"

    def test_load_queries_key(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("queries:\n  - id: one\n    name: One\n    query: SELECT 1;\n")
        assert load_catalog(path).default.id == "one"

    def test_missing_field(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("- id: one\n  name: One\n")
        with pytest.raises(ValueError, match="missing query"):
            load_catalog(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("just: a mapping\n")
        with pytest.raises(ValueError, match="must be a list"):
            load_catalog(path)

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ValueError, match="Cannot read"):
            load_catalog(tmp_path / "nope.yaml")
