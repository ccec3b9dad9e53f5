"""Personal task tracker: SQLite-backed REST API plus a console client."""

__version__ = "0.1.0"
