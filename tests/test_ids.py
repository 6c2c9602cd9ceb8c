"""Tests for the tab id generator."""

from __future__ import annotations

from sql_workbench.core.ids import IdGenerator


class TestIdGenerator:
    def test_default_ids_are_unique(self):
        gen = IdGenerator()
        ids = {gen() for _ in range(500)}
        assert len(ids) == 500
        assert gen.issued_count == 500

    def test_default_ids_are_short_hex(self):
        value = IdGenerator()()
        assert len(value) == 12
        int(value, 16)

    def test_repeats_from_factory_are_skipped(self):
        values = iter(["a", "a", "b", "a", "c"])
        gen = IdGenerator(factory=lambda: next(values))
        assert [gen(), gen(), gen()] == ["a", "b", "c"]
