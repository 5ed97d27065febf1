"""CatalogDatabase: upsert-by-name persistence for agents, commands and workflows."""

from __future__ import annotations

import json
import sqlite3
from typing import Any

from agent_audit.catalog.models import EntityKind
from agent_audit.storage.schema import ENTITY_TABLES, run_migrations


def _table(kind: EntityKind | str) -> str:
    try:
        return ENTITY_TABLES[str(kind)]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}") from None


class CatalogDatabase:
    def __init__(self, path: str = ":memory:") -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        run_migrations(self._conn)

    def close(self) -> None:
        self._conn.close()

    def get_entity(self, kind: EntityKind, name: str) -> dict[str, Any] | None:
        row = self._conn.execute(
            f"SELECT payload FROM {_table(kind)} WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        return json.loads(row["payload"])

    def upsert_entity(self, kind: EntityKind, name: str, payload: dict[str, Any]) -> None:
        """Insert or update (on name conflict) one entity."""
        self._conn.execute(
            f"""INSERT INTO {_table(kind)} (name, payload)
                VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET
                 payload=excluded.payload,
                 updated_at=strftime('%Y-%m-%dT%H:%M:%fZ', 'now')""",
            (name, json.dumps(payload, sort_keys=True)),
        )
        self._conn.commit()

    def get_stats(self) -> dict[str, int]:
        stats: dict[str, int] = {}
        for table in ENTITY_TABLES.values():
            row = self._conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            stats[table] = row[0]
        return stats
