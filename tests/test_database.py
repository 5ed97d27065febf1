"""Tests for CatalogDatabase upsert-by-name persistence."""

import pytest

from agent_audit.catalog.models import EntityKind
from agent_audit.storage.database import CatalogDatabase


@pytest.fixture
def db():
    database = CatalogDatabase(":memory:")
    yield database
    database.close()


class TestUpsertEntity:
    def test_insert_and_get(self, db: CatalogDatabase):
        db.upsert_entity(EntityKind.AGENT, "qa-expert", {"name": "qa-expert", "tools": ["Read"]})
        assert db.get_entity(EntityKind.AGENT, "qa-expert") == {
            "name": "qa-expert",
            "tools": ["Read"],
        }

    def test_missing_is_none(self, db: CatalogDatabase):
        assert db.get_entity(EntityKind.COMMAND, "nothing") is None

    def test_update_on_name_conflict(self, db: CatalogDatabase):
        db.upsert_entity(EntityKind.COMMAND, "feature", {"min_agents": 1})
        db.upsert_entity(EntityKind.COMMAND, "feature", {"min_agents": 2})
        assert db.get_entity(EntityKind.COMMAND, "feature") == {"min_agents": 2}
        assert db.get_stats()["commands"] == 1

    def test_kinds_are_separate(self, db: CatalogDatabase):
        db.upsert_entity(EntityKind.COMMAND, "feature", {"kind": "command"})
        db.upsert_entity(EntityKind.WORKFLOW, "feature", {"kind": "workflow"})
        assert db.get_entity(EntityKind.COMMAND, "feature") == {"kind": "command"}
        assert db.get_entity(EntityKind.WORKFLOW, "feature") == {"kind": "workflow"}

    def test_unknown_kind_raises(self, db: CatalogDatabase):
        with pytest.raises(ValueError, match="Unknown entity kind"):
            db.get_entity("skill", "x")  # type: ignore[arg-type]


class TestStats:
    def test_counts_per_table(self, db: CatalogDatabase):
        db.upsert_entity(EntityKind.AGENT, "zeta", {"n": 1})
        db.upsert_entity(EntityKind.AGENT, "alpha", {"n": 2})
        db.upsert_entity(EntityKind.WORKFLOW, "feature-workflow", {})
        assert db.get_stats() == {"agents": 2, "commands": 0, "workflows": 1}

    def test_empty_stats(self, db: CatalogDatabase):
        assert db.get_stats() == {"agents": 0, "commands": 0, "workflows": 0}

    def test_file_database_persists(self, tmp_path):
        path = str(tmp_path / "catalog.db")
        first = CatalogDatabase(path)
        first.upsert_entity(EntityKind.AGENT, "qa-expert", {"name": "qa-expert"})
        first.close()
        second = CatalogDatabase(path)
        try:
            assert second.get_entity(EntityKind.AGENT, "qa-expert") == {"name": "qa-expert"}
        finally:
            second.close()
