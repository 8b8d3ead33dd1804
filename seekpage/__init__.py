"""seekpage: keyset (cursor) pagination for async SQLAlchemy services."""

__version__ = "0.1.0"
