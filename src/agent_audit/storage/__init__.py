"""SQLite-backed catalog store."""

from agent_audit.storage.database import CatalogDatabase

__all__ = ["CatalogDatabase"]
