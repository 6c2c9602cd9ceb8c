"""Deferred callbacks and the editor/tab re-entrancy guard.

The editor text and the active tab's stored query each trigger updates of
the other.  A guard records which direction is currently propagating so the
opposite reaction can stand down.  Guards are released on the *next*
cooperative turn, after every reaction to the current update has run.
"""

from __future__ import annotations

import asyncio
from collections import deque
from enum import Enum
from typing import Callable

Callback = Callable[[], None]


class SyncDirection(Enum):
    """Which way a synchronization step is flowing."""

    TAB_TO_EDITOR = "tab-to-editor"
    EDITOR_TO_TAB = "editor-to-tab"


class DeferredCalls:
    """Schedule callbacks for the next turn of the event loop.

    With a running asyncio loop (the Textual app) callbacks go through
    ``loop.call_soon``.  Without one they queue until ``run_pending()``,
    which the session calls at the start of every operation, so the next
    user event is the next turn.
    """

    def __init__(self) -> None:
        self._pending: deque[Callback] = deque()

    def __call__(self, callback: Callback) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._pending.append(callback)
        else:
            loop.call_soon(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Run queued callbacks in order, including any they enqueue."""
        ran = 0
        while self._pending:
            self._pending.popleft()()
            ran += 1
        return ran


class ReentrancyGuard:
    """Two mutually exclusive flags: at most one direction is held."""

    def __init__(self, defer: Callable[[Callback], None]) -> None:
        self._defer = defer
        self._held: SyncDirection | None = None
        # Called after a deferred release, with the direction just released
        self.on_release: Callable[[SyncDirection], None] | None = None

    @property
    def held(self) -> SyncDirection | None:
        return self._held

    @property
    def idle(self) -> bool:
        return self._held is None

    def is_held(self, direction: SyncDirection) -> bool:
        return self._held is direction

    def acquire(self, direction: SyncDirection) -> bool:
        """Hold *direction*; refused while any direction is already held."""
        if self._held is not None:
            return False
        self._held = direction
        return True

    def release_later(self) -> None:
        """Release the held direction on the next turn."""
        direction = self._held
        if direction is None:
            return

        def _release() -> None:
            if self._held is not direction:
                return
            self._held = None
            if self.on_release is not None:
                self.on_release(direction)

        self._defer(_release)
