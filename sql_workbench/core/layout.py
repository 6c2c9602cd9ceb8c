"""Layout state: split orientation and ratio, fullscreen, panels, sidebar.

Pure state with no widget references.  The shell feeds in pointer
positions and container geometry, and re-renders from the resulting state
through the ``on_change`` listener.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class LayoutDirection(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    TABBED = "tabbed"


class Panel(str, Enum):
    """Which panel is shown in tabbed mode."""

    EDITOR = "editor"
    RESULTS = "results"


@dataclass(frozen=True)
class Bounds:
    """Inclusive clamp range for a resizable dimension."""

    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


SPLIT_BOUNDS = Bounds(15.0, 85.0)  # percent of the split container
SIDEBAR_BOUNDS = Bounds(20.0, 60.0)  # terminal columns
DEFAULT_SPLIT_SIZE = 50.0
DEFAULT_SIDEBAR_WIDTH = 32.0


class DragResize:
    """One press-move-release resize gesture.

    Holds the only reference to its apply callback; ``end()`` drops it, so
    a finished drag cannot update layout state again.
    """

    def __init__(
        self,
        compute: Callable[[float], float],
        apply: Callable[[float], None],
    ) -> None:
        self._compute: Callable[[float], float] | None = compute
        self._apply: Callable[[float], None] | None = apply

    @property
    def active(self) -> bool:
        return self._apply is not None

    def move(self, pointer: float) -> float | None:
        """Apply the clamped value for *pointer*; None once the drag ended."""
        if self._compute is None or self._apply is None:
            return None
        value = self._compute(pointer)
        self._apply(value)
        return value

    def end(self) -> None:
        self._compute = None
        self._apply = None


class LayoutController:
    """State machine over (direction, fullscreen, active panel) plus sizes."""

    def __init__(
        self,
        *,
        direction: LayoutDirection = LayoutDirection.HORIZONTAL,
        split_size: float = DEFAULT_SPLIT_SIZE,
        split_bounds: Bounds = SPLIT_BOUNDS,
        sidebar_open: bool = True,
        sidebar_width: float = DEFAULT_SIDEBAR_WIDTH,
        sidebar_bounds: Bounds = SIDEBAR_BOUNDS,
    ) -> None:
        self.split_bounds = split_bounds
        self.sidebar_bounds = sidebar_bounds
        self.direction = LayoutDirection(direction)
        self.split_size = split_bounds.clamp(split_size)
        self.is_fullscreen = False
        self.active_panel = Panel.EDITOR
        self.sidebar_open = sidebar_open
        self.sidebar_width = sidebar_bounds.clamp(sidebar_width)
        self._drag: DragResize | None = None

        # Called once per state change that needs a re-render
        self.on_change: Callable[[], None] | None = None

    # -- Orientation & panels -------------------------------------------------

    def set_direction(self, direction: LayoutDirection) -> None:
        """Explicit layout choice; the only way into tabbed mode."""
        direction = LayoutDirection(direction)
        if direction is self.direction:
            return
        self.direction = direction
        self._changed()

    def toggle_output_mode(self, has_results: bool, loading: bool = False) -> bool:
        """Swap side-by-side/stacked, or swap panels in tabbed mode.

        Orientation only flips when there are results to compare against
        the editor.  Returns False when nothing changed.
        """
        if self.direction is LayoutDirection.TABBED:
            self.select_panel(
                Panel.RESULTS if self.active_panel is Panel.EDITOR else Panel.EDITOR
            )
            return True
        if not has_results or loading:
            return False
        self.direction = (
            LayoutDirection.VERTICAL
            if self.direction is LayoutDirection.HORIZONTAL
            else LayoutDirection.HORIZONTAL
        )
        self._changed()
        return True

    def select_panel(self, panel: Panel) -> None:
        panel = Panel(panel)
        if panel is self.active_panel:
            return
        self.active_panel = panel
        self._changed()

    def show_results(self) -> None:
        """A new output arrived: bring the results panel forward."""
        if not self.is_fullscreen:
            self.select_panel(Panel.RESULTS)

    # -- Fullscreen -----------------------------------------------------------

    def toggle_fullscreen(self, has_results: bool) -> bool:
        """Enter or leave fullscreen results; refused with nothing to show."""
        if not self.is_fullscreen and not has_results:
            return False
        self.is_fullscreen = not self.is_fullscreen
        if self.is_fullscreen:
            self.active_panel = Panel.RESULTS
        self._changed()
        return True

    def check_exit_fullscreen(self, has_results: bool) -> None:
        """Leave fullscreen whenever the results have become empty."""
        if self.is_fullscreen and not has_results:
            self.is_fullscreen = False
            self._changed()

    def handle_results_double_click(
        self, on_results_surface: bool, has_results: bool
    ) -> bool:
        """Fullscreen shortcut, ignored for clicks on nested controls."""
        if not on_results_surface:
            return False
        return self.toggle_fullscreen(has_results)

    # -- Sidebar --------------------------------------------------------------

    def toggle_sidebar(self) -> bool:
        self.sidebar_open = not self.sidebar_open
        self._changed()
        return self.sidebar_open

    def set_sidebar_open(self, is_open: bool) -> None:
        if is_open != self.sidebar_open:
            self.sidebar_open = is_open
            self._changed()

    # -- Resizing -------------------------------------------------------------

    @property
    def dragging(self) -> bool:
        return self._drag is not None and self._drag.active

    def set_split_size(self, value: float) -> float:
        value = self.split_bounds.clamp(value)
        if value != self.split_size:
            self.split_size = value
            self._changed()
        return self.split_size

    def set_sidebar_width(self, value: float) -> float:
        value = self.sidebar_bounds.clamp(value)
        if value != self.sidebar_width:
            self.sidebar_width = value
            self._changed()
        return self.sidebar_width

    def start_split_drag(self, origin: float, extent: float) -> DragResize | None:
        """Begin dragging the editor/results divider.

        *origin* and *extent* are the split container's start coordinate and
        length along the active axis (x/width when horizontal, y/height when
        vertical).  No divider exists in tabbed or fullscreen mode.
        """
        if self.direction is LayoutDirection.TABBED or self.is_fullscreen:
            return None

        def compute(pointer: float) -> float:
            if extent <= 0:
                return self.split_size
            return self.split_bounds.clamp((pointer - origin) / extent * 100.0)

        return self._begin_drag(DragResize(compute, self.set_split_size))

    def start_sidebar_drag(self, origin: float) -> DragResize:
        """Begin dragging the sidebar edge; *origin* is the sidebar's left edge."""

        def compute(pointer: float) -> float:
            return self.sidebar_bounds.clamp(pointer - origin)

        return self._begin_drag(DragResize(compute, self.set_sidebar_width))

    def end_drag(self) -> None:
        if self._drag is not None:
            self._drag.end()
            self._drag = None

    def _begin_drag(self, drag: DragResize) -> DragResize:
        # A drag whose release was never seen ends here
        self.end_drag()
        self._drag = drag
        return drag

    # -- Derived visibility ---------------------------------------------------

    def editor_visible(self) -> bool:
        if self.is_fullscreen:
            return False
        return (
            self.direction is not LayoutDirection.TABBED
            or self.active_panel is Panel.EDITOR
        )

    def results_visible(self, has_results: bool) -> bool:
        if not has_results:
            return False
        return (
            self.is_fullscreen
            or self.direction is not LayoutDirection.TABBED
            or self.active_panel is Panel.RESULTS
        )

    def divider_visible(self, has_results: bool) -> bool:
        return (
            has_results
            and not self.is_fullscreen
            and self.direction is not LayoutDirection.TABBED
        )

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
