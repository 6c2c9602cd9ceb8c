"""User preferences for SQL Workbench.

Loads layout, execution and display settings from
~/.sql-workbench/preferences.yaml.  Falls back to sensible defaults if the
file doesn't exist or is invalid.  Creates a default file on first run so
users can discover and edit it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .core.layout import (
    DEFAULT_SIDEBAR_WIDTH,
    DEFAULT_SPLIT_SIZE,
    SIDEBAR_BOUNDS,
    SPLIT_BOUNDS,
    Bounds,
    LayoutController,
    LayoutDirection,
)
from .log import logger
from .theme import DEFAULT_THEME, TEXTUAL_THEMES

PREFS_PATH = Path.home() / ".sql-workbench" / "preferences.yaml"

_DEFAULT_YAML = """\
# SQL Workbench Preferences
# Delete this file to reset to defaults.

layout:
  direction: horizontal          # horizontal | vertical | tabbed
  split_size: 50                 # editor share of the split, in percent
  split_min: 15                  # smallest editor share while dragging
  split_max: 85                  # largest editor share while dragging
  sidebar_open: true             # show the table browser on start
  sidebar_width: 32              # sidebar width in columns
  sidebar_min: 20
  sidebar_max: 60

execution:
  history_limit: 50              # executions kept in the history list
  confirm_clear: true            # ask before clearing all results

display:
  theme: dark                    # dark | light | solarized
  max_rows: 1000                 # rows rendered per results tab
"""


@dataclass
class LayoutPreferences:
    """Split and sidebar geometry.  Sidebar sizes are terminal columns."""

    direction: str = LayoutDirection.HORIZONTAL.value
    split_size: float = DEFAULT_SPLIT_SIZE
    split_min: float = SPLIT_BOUNDS.minimum
    split_max: float = SPLIT_BOUNDS.maximum
    sidebar_open: bool = True
    sidebar_width: int = int(DEFAULT_SIDEBAR_WIDTH)
    sidebar_min: int = int(SIDEBAR_BOUNDS.minimum)
    sidebar_max: int = int(SIDEBAR_BOUNDS.maximum)


@dataclass
class ExecutionPreferences:
    history_limit: int = 50
    confirm_clear: bool = True


@dataclass
class DisplayPreferences:
    theme: str = DEFAULT_THEME
    max_rows: int = 1000


@dataclass
class Preferences:
    """Top-level workbench preferences."""

    layout: LayoutPreferences = field(default_factory=LayoutPreferences)
    execution: ExecutionPreferences = field(default_factory=ExecutionPreferences)
    display: DisplayPreferences = field(default_factory=DisplayPreferences)

    def build_layout(self, direction: str | None = None) -> LayoutController:
        """Layout controller seeded from these preferences.

        *direction* overrides ``layout.direction`` (the ``--layout`` flag).
        """
        lp = self.layout
        return LayoutController(
            direction=LayoutDirection(direction or lp.direction),
            split_size=lp.split_size,
            split_bounds=Bounds(lp.split_min, lp.split_max),
            sidebar_open=lp.sidebar_open,
            sidebar_width=lp.sidebar_width,
            sidebar_bounds=Bounds(lp.sidebar_min, lp.sidebar_max),
        )


def _apply_layout(prefs: LayoutPreferences, data: dict) -> None:
    if "direction" in data:
        value = str(data["direction"]).lower()
        if value in {d.value for d in LayoutDirection}:
            prefs.direction = value
    for key in ("split_size", "split_min", "split_max"):
        if key in data:
            setattr(prefs, key, float(data[key]))
    for key in ("sidebar_width", "sidebar_min", "sidebar_max"):
        if key in data:
            setattr(prefs, key, int(data[key]))
    if "sidebar_open" in data:
        prefs.sidebar_open = bool(data["sidebar_open"])
    # Inverted bounds would pin every drag to one edge
    if prefs.split_min > prefs.split_max:
        prefs.split_min, prefs.split_max = SPLIT_BOUNDS.minimum, SPLIT_BOUNDS.maximum
    if prefs.sidebar_min > prefs.sidebar_max:
        prefs.sidebar_min = int(SIDEBAR_BOUNDS.minimum)
        prefs.sidebar_max = int(SIDEBAR_BOUNDS.maximum)


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if isinstance(data.get("layout"), dict):
                _apply_layout(prefs.layout, data["layout"])
            if isinstance(data.get("execution"), dict):
                edata = data["execution"]
                if "history_limit" in edata:
                    prefs.execution.history_limit = max(1, int(edata["history_limit"]))
                if "confirm_clear" in edata:
                    prefs.execution.confirm_clear = bool(edata["confirm_clear"])
            if isinstance(data.get("display"), dict):
                ddata = data["display"]
                if str(ddata.get("theme", "")) in TEXTUAL_THEMES:
                    prefs.display.theme = str(ddata["theme"])
                if "max_rows" in ddata:
                    prefs.display.max_rows = max(1, int(ddata["max_rows"]))
        except (yaml.YAMLError, AttributeError, TypeError, ValueError):
            logger.debug("Ignoring invalid preferences file %s", path, exc_info=True)
            return Preferences()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("Could not write default preferences to %s", path)

    return prefs


def _set_value(text: str, section: str, key: str, value: str) -> str:
    """Replace ``key`` inside ``section``, adding either one if missing.

    Trailing comments on the replaced line are preserved.
    """
    section_match = re.search(rf"^{section}:.*$", text, re.MULTILINE)
    if section_match is None:
        return text.rstrip() + f"\n\n{section}:\n  {key}: {value}\n"

    # The section body runs until the next top-level key
    start = section_match.end()
    next_section = re.search(r"^\S", text[start + 1 :], re.MULTILINE)
    end = start + 1 + next_section.start() if next_section else len(text)
    body = text[start:end]

    pattern = rf"^(\s+{key}:)[ \t]*(?:\"[^\"]*\"|[^\s#]+)?([ \t]*(?:#.*)?)$"
    if re.search(pattern, body, re.MULTILINE):
        body = re.sub(
            pattern,
            lambda m: f"{m.group(1)} {value}{m.group(2) or ''}",
            body,
            count=1,
            flags=re.MULTILINE,
        )
    else:
        body = f"\n  {key}: {value}" + body
    return text[:start] + body + text[end:]


def _update_file(path: Path | None, updates: list[tuple[str, str, str]]) -> None:
    path = path or PREFS_PATH
    try:
        if path.exists():
            text = path.read_text()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = _DEFAULT_YAML
        for section, key, value in updates:
            text = _set_value(text, section, key, value)
        path.write_text(text)
    except OSError:
        logger.debug("Could not save preferences to %s", path, exc_info=True)


def save_layout(layout: LayoutController, path: Path | None = None) -> None:
    """Persist direction, split size, and sidebar state.

    Surgically updates only those values, preserving the rest of the file
    (including user comments) as-is.
    """
    _update_file(
        path,
        [
            ("layout", "direction", layout.direction.value),
            ("layout", "split_size", f"{layout.split_size:g}"),
            ("layout", "sidebar_open", "true" if layout.sidebar_open else "false"),
            ("layout", "sidebar_width", f"{int(layout.sidebar_width)}"),
        ],
    )


def save_theme_name(name: str, path: Path | None = None) -> None:
    """Persist the selected theme preset name."""
    _update_file(path, [("display", "theme", name)])
