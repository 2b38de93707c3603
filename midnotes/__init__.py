"""Notes on SQLite with encryption, tags, backlinks, history, search and export."""

__version__ = "0.1.0"