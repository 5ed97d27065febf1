"""Tests for HTTP API server routes."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from agent_audit.config import Config
from agent_audit.server.app import create_app


@pytest.fixture
def client(populated_roots, tmp_path):
    app = create_app(Config(base_path=tmp_path), db_path=":memory:")
    with TestClient(app) as c:
        yield c


@pytest.fixture
def empty_client(tmp_path):
    app = create_app(Config(base_path=tmp_path / "empty"), db_path=":memory:")
    with TestClient(app) as c:
        yield c


class TestSystemRoutes:
    def test_health(self, client: TestClient):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_version(self, client: TestClient):
        resp = client.get("/api/version")
        assert resp.status_code == 200
        assert "version" in resp.json()

    def test_stats_before_sync(self, client: TestClient):
        resp = client.get("/api/stats")
        assert resp.json() == {"agents": 0, "commands": 0, "workflows": 0}


class TestCatalogRoutes:
    def test_catalog_snapshot(self, client: TestClient):
        resp = client.get("/api/audit/catalog")
        assert resp.status_code == 200
        assert resp.headers["cache-control"] == "no-store, must-revalidate"
        data = resp.json()
        assert [a["name"] for a in data["agents"]] == ["api-designer", "backend-developer"]
        assert [c["name"] for c in data["commands"]] == ["explain", "feature"]
        assert data["workflows"][0]["type"] == "sequential"
        assert data["errors"] == []
        assert data["timestamp"]

    def test_list_agents(self, client: TestClient):
        data = client.get("/api/audit/agents").json()
        assert data["count"] == 2
        assert data["agents"][1]["tools"] == ["Read", "Write"]
        assert data["errors"] == []

    def test_get_agent(self, client: TestClient):
        resp = client.get("/api/audit/agents/backend-developer")
        assert resp.status_code == 200
        assert resp.json()["description"] == "Senior backend engineer"

    def test_get_agent_not_found(self, client: TestClient):
        resp = client.get("/api/audit/agents/nobody")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Agent 'nobody' not found"}

    def test_list_commands(self, client: TestClient):
        data = client.get("/api/audit/commands").json()
        assert data["count"] == 2
        assert data["commands"][1]["workflow_ref"] == "feature-workflow"

    def test_get_command(self, client: TestClient):
        resp = client.get("/api/audit/commands/feature")
        assert resp.status_code == 200
        assert resp.json()["min_agents"] == 1

    def test_get_command_not_found(self, client: TestClient):
        assert client.get("/api/audit/commands/nothing").status_code == 404

    def test_list_workflows(self, client: TestClient):
        data = client.get("/api/audit/workflows").json()
        assert data["count"] == 1
        assert data["workflows"][0]["steps"][0] == {
            "order": 1,
            "agent": "api-designer",
            "action": "Define schema",
        }

    def test_empty_collections(self, empty_client: TestClient):
        data = empty_client.get("/api/audit/catalog").json()
        assert data["agents"] == []
        assert data["commands"] == []


class TestSyncRoute:
    def test_sync_then_stats(self, client: TestClient):
        resp = client.post("/api/audit/sync")
        assert resp.status_code == 200
        data = resp.json()
        assert data["agents_created"] == 2
        assert data["commands_created"] == 2
        assert data["workflows_created"] == 1
        assert data["synced"] == 4
        assert data["errors"] == []
        assert client.get("/api/stats").json() == {"agents": 2, "commands": 2, "workflows": 1}

    def test_second_sync_unchanged(self, client: TestClient):
        client.post("/api/audit/sync")
        data = client.post("/api/audit/sync").json()
        assert data["unchanged"] == 5
        assert data["agents_created"] == 0

    def test_sync_requires_post(self, client: TestClient):
        assert client.get("/api/audit/sync").status_code == 405
