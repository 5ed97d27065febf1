"""Starlette app factory with lifespan for parser and database management."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from starlette.applications import Starlette

from agent_audit.catalog.parser import CatalogParser
from agent_audit.config import Config, load_config
from agent_audit.server.routes_catalog import routes as catalog_routes
from agent_audit.server.routes_system import routes as system_routes
from agent_audit.storage.database import CatalogDatabase


def create_app(
    config: Config | None = None,
    db_path: str = ":memory:",
) -> Starlette:
    """Create a Starlette app reading collections from ``config.roots``."""
    if config is None:
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        app.state.config = config
        app.state.parser = CatalogParser(
            config.roots,
            parallel_commands=config.parallel_commands,
            max_workers=config.max_workers,
        )
        app.state.db = CatalogDatabase(db_path)

        yield

        app.state.db.close()

    return Starlette(routes=system_routes + catalog_routes, lifespan=lifespan)
