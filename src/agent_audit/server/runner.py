"""Uvicorn launcher."""

from __future__ import annotations

from pathlib import Path

from agent_audit.config import CONFIG_FILENAME, Config, load_config


def run_server(config: Config | None = None) -> None:
    """Start the HTTP API server with uvicorn."""
    import uvicorn

    from agent_audit.server.app import create_app

    if config is None:
        config = load_config(Path.cwd() / CONFIG_FILENAME)

    config.db_path.parent.mkdir(parents=True, exist_ok=True)

    uvicorn.run(
        create_app(config, db_path=str(config.db_path)),
        host="127.0.0.1",
        port=config.port,
    )
