"""Configuration constants, config file loading, and environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Server defaults
DEFAULT_PORT = 41888
DEFAULT_DB_NAME = "catalog.db"

# Collection layout, relative to the project base path
DEFAULT_AGENTS_DIR = ".claude/agents"
DEFAULT_COMMANDS_DIR = ".claude/commands"

CONFIG_FILENAME = ".agent-audit.json"


def get_data_dir() -> Path:
    env = os.environ.get("AGENT_AUDIT_DATA_DIR")
    if env:
        return Path(env)
    return Path.home() / ".agent-audit" / "data"


def _safe_int(value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class CatalogRoots:
    """Directories holding the two document collections."""

    agents_dir: Path
    commands_dir: Path

    @classmethod
    def from_base(
        cls,
        base_path: Path,
        agents_dir: str = DEFAULT_AGENTS_DIR,
        commands_dir: str = DEFAULT_COMMANDS_DIR,
    ) -> CatalogRoots:
        return cls(agents_dir=base_path / agents_dir, commands_dir=base_path / commands_dir)


@dataclass
class Config:
    port: int = DEFAULT_PORT
    db_name: str = DEFAULT_DB_NAME
    base_path: Path | None = None  # None = current working directory
    agents_dir: str = DEFAULT_AGENTS_DIR
    commands_dir: str = DEFAULT_COMMANDS_DIR
    parallel_commands: list[str] = field(default_factory=list)
    max_workers: int = 1

    @property
    def db_path(self) -> Path:
        return get_data_dir() / self.db_name

    @property
    def roots(self) -> CatalogRoots:
        base = self.base_path if self.base_path is not None else Path.cwd()
        return CatalogRoots.from_base(base, self.agents_dir, self.commands_dir)


def load_config(path: Path | None = None) -> Config:
    """Load config from JSON file with env var overrides."""
    config = Config()

    if path and path.exists():
        try:
            data = json.loads(path.read_text())
            if isinstance(data, dict):
                _apply(config, data)
                section = data.get("catalog", {})
                if isinstance(section, dict):
                    _apply(config, section)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")

    # Env var overrides
    port_env = os.environ.get("AGENT_AUDIT_PORT")
    if port_env:
        config.port = _safe_int(port_env, config.port)
    if base_env := os.environ.get("AGENT_AUDIT_BASE_PATH"):
        config.base_path = Path(base_env)
    workers_env = os.environ.get("AGENT_AUDIT_MAX_WORKERS")
    if workers_env:
        config.max_workers = max(1, _safe_int(workers_env, config.max_workers))

    return config


def _apply(config: Config, data: dict[str, object]) -> None:
    if "port" in data and isinstance(data["port"], int):
        config.port = data["port"]
    if "db_name" in data and isinstance(data["db_name"], str):
        config.db_name = data["db_name"]
    if "base_path" in data and isinstance(data["base_path"], str):
        config.base_path = Path(data["base_path"])
    if "agents_dir" in data and isinstance(data["agents_dir"], str):
        config.agents_dir = data["agents_dir"]
    if "commands_dir" in data and isinstance(data["commands_dir"], str):
        config.commands_dir = data["commands_dir"]
    if "parallel_commands" in data and isinstance(data["parallel_commands"], list):
        config.parallel_commands = [str(c) for c in data["parallel_commands"]]
    if "max_workers" in data and isinstance(data["max_workers"], int):
        config.max_workers = max(1, data["max_workers"])
