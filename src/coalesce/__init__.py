"""Coalesce - live backlink excerpts for every open pane."""

__version__ = "0.3.0"
