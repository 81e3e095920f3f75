"""Markdown link rewriting and summary generation utilities."""

__version__ = "0.1.0"
