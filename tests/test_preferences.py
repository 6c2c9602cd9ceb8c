"""Tests for sql_workbench.preferences.

Covers load_preferences, build_layout, and the surgical save_* helpers.
All file I/O uses tmp_path so nothing touches the real user config.
"""

from __future__ import annotations

from pathlib import Path

import yaml

from sql_workbench.core.layout import LayoutController, LayoutDirection
from sql_workbench.preferences import (
    Preferences,
    load_preferences,
    save_layout,
    save_theme_name,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


# -- load_preferences --------------------------------------------------------


class TestLoadPreferences:
    def test_missing_file_creates_default(self, tmp_path):
        path = tmp_path / "nested" / "preferences.yaml"
        prefs = load_preferences(path)
        assert path.exists()
        assert prefs == Preferences()
        data = yaml.safe_load(path.read_text())
        assert data["layout"]["direction"] == "horizontal"
        assert data["display"]["theme"] == "dark"

    def test_values_loaded(self, tmp_path):
        path = _write(
            tmp_path / "p.yaml",
            "layout:\n"
            "  direction: tabbed\n"
            "  split_size: 40\n"
            "  sidebar_open: false\n"
            "  sidebar_width: 28\n"
            "execution:\n"
            "  history_limit: 10\n"
            "  confirm_clear: false\n"
            "display:\n"
            "  theme: solarized\n"
            "  max_rows: 200\n",
        )
        prefs = load_preferences(path)
        assert prefs.layout.direction == "tabbed"
        assert prefs.layout.split_size == 40.0
        assert prefs.layout.sidebar_open is False
        assert prefs.layout.sidebar_width == 28
        assert prefs.execution.history_limit == 10
        assert prefs.execution.confirm_clear is False
        assert prefs.display.theme == "solarized"
        assert prefs.display.max_rows == 200

    def test_unknown_values_ignored(self, tmp_path):
        path = _write(
            tmp_path / "p.yaml",
            "layout:\n  direction: diagonal\ndisplay:\n  theme: neon\n",
        )
        prefs = load_preferences(path)
        assert prefs.layout.direction == "horizontal"
        assert prefs.display.theme == "dark"

    def test_limits_clamped(self, tmp_path):
        path = _write(
            tmp_path / "p.yaml",
            "execution:\n  history_limit: 0\ndisplay:\n  max_rows: -5\n",
        )
        prefs = load_preferences(path)
        assert prefs.execution.history_limit == 1
        assert prefs.display.max_rows == 1

    def test_inverted_bounds_reset(self, tmp_path):
        path = _write(
            tmp_path / "p.yaml",
            "layout:\n  split_min: 90\n  split_max: 10\n"
            "  sidebar_min: 50\n  sidebar_max: 30\n",
        )
        prefs = load_preferences(path)
        assert prefs.layout.split_min < prefs.layout.split_max
        assert prefs.layout.sidebar_min < prefs.layout.sidebar_max

    def test_invalid_yaml_falls_back(self, tmp_path):
        path = _write(tmp_path / "p.yaml", "layout: [unclosed\n")
        assert load_preferences(path) == Preferences()

    def test_wrong_types_fall_back(self, tmp_path):
        path = _write(tmp_path / "p.yaml", "layout:\n  split_size: wide\n")
        assert load_preferences(path) == Preferences()

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path / "p.yaml", "")
        assert load_preferences(path) == Preferences()


# -- build_layout ------------------------------------------------------------


class TestBuildLayout:
    def test_seeded_from_preferences(self):
        prefs = Preferences()
        prefs.layout.direction = "vertical"
        prefs.layout.split_size = 30
        prefs.layout.sidebar_open = False
        layout = prefs.build_layout()
        assert layout.direction is LayoutDirection.VERTICAL
        assert layout.split_size == 30
        assert not layout.sidebar_open

    def test_flag_overrides_direction(self):
        layout = Preferences().build_layout("tabbed")
        assert layout.direction is LayoutDirection.TABBED

    def test_bounds_applied(self):
        prefs = Preferences()
        prefs.layout.split_size = 95
        prefs.layout.sidebar_width = 100
        layout = prefs.build_layout()
        assert layout.split_size == prefs.layout.split_max
        assert layout.sidebar_width == prefs.layout.sidebar_max


# -- save helpers -----------------------------------------------------------


class TestSaveLayout:
    def test_round_trip_preserves_comments(self, tmp_path):
        path = tmp_path / "p.yaml"
        load_preferences(path)
        layout = LayoutController(
            direction=LayoutDirection.VERTICAL, split_size=37.5, sidebar_open=False
        )
        save_layout(layout, path)
        text = path.read_text()
        assert "direction: vertical" in text
        assert "# horizontal | vertical | tabbed" in text
        assert "# Delete this file to reset to defaults." in text
        prefs = load_preferences(path)
        assert prefs.layout.direction == "vertical"
        assert prefs.layout.split_size == 37.5
        assert prefs.layout.sidebar_open is False

    def test_missing_keys_added(self, tmp_path):
        path = _write(tmp_path / "p.yaml", "display:\n  theme: light\n")
        save_layout(LayoutController(split_size=60), path)
        data = yaml.safe_load(path.read_text())
        assert data["layout"]["split_size"] == 60
        assert data["display"]["theme"] == "light"

    def test_missing_file_written(self, tmp_path):
        path = tmp_path / "fresh.yaml"
        save_layout(LayoutController(direction=LayoutDirection.TABBED), path)
        assert yaml.safe_load(path.read_text())["layout"]["direction"] == "tabbed"


class TestSaveTheme:
    def test_theme_saved(self, tmp_path):
        path = tmp_path / "p.yaml"
        load_preferences(path)
        save_theme_name("light", path)
        assert load_preferences(path).display.theme == "light"
        assert "max_rows: 1000" in path.read_text()
