"""Drag handles for the editor/results split and the sidebar edge."""

from __future__ import annotations

from textual import events
from textual.widgets import Static

from ..core.layout import DragResize, LayoutController, LayoutDirection


class ResizeHandle(Static):
    """A one-cell strip that resizes its neighbours while dragged.

    Mouse-down captures the mouse and starts a drag on the layout
    controller; each move feeds the pointer position in; mouse-up releases.
    ``target`` is ``"split"`` (editor/results divider) or ``"sidebar"``.
    """

    def __init__(self, layout: LayoutController, target: str, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.layout_state = layout
        self.target = target
        self._drag: DragResize | None = None
        self._vertical = False

    @property
    def dragging(self) -> bool:
        return self._drag is not None

    def on_mouse_down(self, event: events.MouseDown) -> None:
        region = self.parent.region
        if self.target == "sidebar":
            self._vertical = False
            drag: DragResize | None = self.layout_state.start_sidebar_drag(region.x)
        elif self.layout_state.direction is LayoutDirection.VERTICAL:
            self._vertical = True
            drag = self.layout_state.start_split_drag(region.y, region.height)
        else:
            self._vertical = False
            drag = self.layout_state.start_split_drag(region.x, region.width)
        if drag is None:
            return
        event.stop()
        self._drag = drag
        self.add_class("-dragging")
        self.capture_mouse()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._drag is None:
            return
        pointer = event.screen_y if self._vertical else event.screen_x
        if self._drag.move(pointer) is None:
            # Superseded by a newer drag
            self._finish()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self._drag is not None:
            event.stop()
            self._finish()

    def _finish(self) -> None:
        drag, self._drag = self._drag, None
        self.remove_class("-dragging")
        self.release_mouse()
        if drag is not None and drag.active:
            self.layout_state.end_drag()
