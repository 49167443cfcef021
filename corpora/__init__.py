"""Manage and process text corpora with a Corpora server."""

__version__ = "0.1.0"