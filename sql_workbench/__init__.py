"""SQL Workbench - a terminal SQL workbench with tabbed editors and results."""

__version__ = "0.1.0"
