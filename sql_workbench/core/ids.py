"""Unique identifiers for query and output tabs."""

from __future__ import annotations

import uuid
from typing import Callable


def _short_uuid() -> str:
    return uuid.uuid4().hex[:12]


class IdGenerator:
    """Callable that hands out tab ids, never the same one twice.

    ``factory`` may be swapped for a deterministic source in tests; any
    repeat it produces is skipped and a fresh value drawn instead.
    """

    def __init__(self, factory: Callable[[], str] | None = None) -> None:
        self._factory = factory or _short_uuid
        self._issued: set[str] = set()

    def __call__(self) -> str:
        while True:
            candidate = self._factory()
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    @property
    def issued_count(self) -> int:
        return len(self._issued)
