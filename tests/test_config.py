"""Tests for config loading and constants."""

import json
from pathlib import Path

from agent_audit.config import (
    DEFAULT_AGENTS_DIR,
    DEFAULT_COMMANDS_DIR,
    DEFAULT_PORT,
    CatalogRoots,
    Config,
    get_data_dir,
    load_config,
)


class TestConstants:
    def test_default_port(self):
        assert DEFAULT_PORT == 41888

    def test_collection_dirs(self):
        assert DEFAULT_AGENTS_DIR == ".claude/agents"
        assert DEFAULT_COMMANDS_DIR == ".claude/commands"


class TestGetDataDir:
    def test_default_path(self, monkeypatch):
        monkeypatch.delenv("AGENT_AUDIT_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".agent-audit" / "data"

    def test_env_override(self, monkeypatch, tmp_path):
        custom_dir = tmp_path / "custom-data"
        monkeypatch.setenv("AGENT_AUDIT_DATA_DIR", str(custom_dir))
        assert get_data_dir() == custom_dir


class TestRoots:
    def test_from_base(self, tmp_path):
        roots = CatalogRoots.from_base(tmp_path)
        assert roots.agents_dir == tmp_path / ".claude" / "agents"
        assert roots.commands_dir == tmp_path / ".claude" / "commands"

    def test_config_roots_default_to_cwd(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert Config().roots.agents_dir == tmp_path / DEFAULT_AGENTS_DIR

    def test_config_roots_custom_dirs(self, tmp_path):
        config = Config(base_path=tmp_path, agents_dir="agents", commands_dir="cmds")
        assert config.roots == CatalogRoots(tmp_path / "agents", tmp_path / "cmds")

    def test_db_path_in_data_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AGENT_AUDIT_DATA_DIR", str(tmp_path))
        assert Config(db_name="x.db").db_path == tmp_path / "x.db"


class TestLoadConfig:
    def test_defaults(self, monkeypatch):
        for var in ("AGENT_AUDIT_PORT", "AGENT_AUDIT_BASE_PATH", "AGENT_AUDIT_MAX_WORKERS"):
            monkeypatch.delenv(var, raising=False)
        config = load_config()
        assert config.port == DEFAULT_PORT
        assert config.base_path is None
        assert config.parallel_commands == []
        assert config.max_workers == 1

    def test_from_json_file(self, tmp_path):
        config_file = tmp_path / ".agent-audit.json"
        config_file.write_text(
            json.dumps(
                {
                    "port": 9999,
                    "catalog": {
                        "agents_dir": "agents",
                        "parallel_commands": ["spot"],
                        "max_workers": 4,
                    },
                }
            )
        )
        config = load_config(config_file)
        assert config.port == 9999
        assert config.agents_dir == "agents"
        assert config.parallel_commands == ["spot"]
        assert config.max_workers == 4

    def test_wrong_types_are_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"port": "high", "parallel_commands": "spot"}))
        config = load_config(config_file)
        assert config.port == DEFAULT_PORT
        assert config.parallel_commands == []

    def test_invalid_json_falls_back_to_defaults(self, tmp_path, caplog):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        config = load_config(config_file)
        assert config.port == DEFAULT_PORT
        assert "Failed to load config" in caplog.text

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.json").port == DEFAULT_PORT

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AGENT_AUDIT_PORT", "5555")
        monkeypatch.setenv("AGENT_AUDIT_BASE_PATH", str(tmp_path))
        monkeypatch.setenv("AGENT_AUDIT_MAX_WORKERS", "0")
        config = load_config()
        assert config.port == 5555
        assert config.base_path == tmp_path
        assert config.max_workers == 1

    def test_bad_port_env_keeps_file_value(self, monkeypatch, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"port": 7000}))
        monkeypatch.setenv("AGENT_AUDIT_PORT", "not-a-number")
        assert load_config(config_file).port == 7000
