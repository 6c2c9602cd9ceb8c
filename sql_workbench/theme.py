"""Theme definitions for SQL Workbench.

Each preset is a Textual Theme controlling the base UI colors ($background,
$surface, $panel, $primary, ...) used by styles.tcss.  The preset name is
stored under ``display.theme`` in preferences.yaml.
"""

from textual.theme import Theme

DEFAULT_THEME = "dark"

TEXTUAL_THEMES: dict[str, Theme] = {
    "dark": Theme(
        name="workbench-dark",
        primary="#3d8fd1",
        secondary="#cc7700",
        accent="#8957e5",
        background="#0d1117",
        surface="#161b22",
        panel="#30363d",
        success="#3fb950",
        warning="#d29922",
        error="#f85149",
        dark=True,
    ),
    "light": Theme(
        name="workbench-light",
        primary="#0969da",
        secondary="#bc4c00",
        accent="#8250df",
        background="#ffffff",
        surface="#f6f8fa",
        panel="#d0d7de",
        success="#1a7f37",
        warning="#9a6700",
        error="#cf222e",
        dark=False,
    ),
    "solarized": Theme(
        name="workbench-solarized",
        primary="#268bd2",
        secondary="#b58900",
        accent="#6c71c4",
        background="#002b36",
        surface="#073642",
        panel="#586e75",
        success="#859900",
        warning="#cb4b16",
        error="#dc322f",
        dark=True,
    ),
}

THEME_DESCRIPTIONS: dict[str, str] = {
    "dark": "Dark editor palette (default)",
    "light": "Light background for bright terminals",
    "solarized": "Solarized dark",
}
