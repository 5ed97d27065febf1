"""Catalog routes: parsed agents, commands, workflows, and sync into the store."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from agent_audit.catalog.parser import CatalogParser
from agent_audit.catalog.sync import SyncPlanner

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store, must-revalidate"}


def _parser(request: Request) -> CatalogParser:
    return request.app.state.parser


def _server_error(operation: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed: %s", operation, exc)
    return JSONResponse(
        {"error": "Internal Server Error", "message": f"{operation} failed: {exc}"},
        status_code=500,
    )


async def get_catalog(request: Request) -> JSONResponse:
    """GET /api/audit/catalog — agents, commands, workflows, errors and timestamp."""
    try:
        snapshot = _parser(request).parse_all()
    except Exception as e:
        return _server_error("Catalog parse", e)
    return JSONResponse(snapshot.model_dump(mode="json"), headers=NO_STORE)


async def list_agents(request: Request) -> JSONResponse:
    """GET /api/audit/agents"""
    try:
        result = _parser(request).parse_agents()
    except Exception as e:
        return _server_error("Agent parse", e)
    return JSONResponse(
        {
            "agents": [a.model_dump(mode="json") for a in result.agents],
            "count": len(result.agents),
            "errors": [e.model_dump(mode="json") for e in result.errors],
        },
        headers=NO_STORE,
    )


async def get_agent(request: Request) -> JSONResponse:
    """GET /api/audit/agents/{name} — one agent by name or file stem."""
    name = request.path_params["name"]
    agent = _parser(request).find_agent(name)
    if agent is None:
        return JSONResponse({"error": f"Agent '{name}' not found"}, status_code=404)
    return JSONResponse(agent.model_dump(mode="json"), headers=NO_STORE)


async def list_commands(request: Request) -> JSONResponse:
    """GET /api/audit/commands"""
    try:
        result = _parser(request).parse_commands()
    except Exception as e:
        return _server_error("Command parse", e)
    return JSONResponse(
        {
            "commands": [c.model_dump(mode="json") for c in result.commands],
            "count": len(result.commands),
            "errors": [e.model_dump(mode="json") for e in result.errors],
        },
        headers=NO_STORE,
    )


async def get_command(request: Request) -> JSONResponse:
    """GET /api/audit/commands/{name}"""
    name = request.path_params["name"]
    command = _parser(request).find_command(name)
    if command is None:
        return JSONResponse({"error": f"Command '{name}' not found"}, status_code=404)
    return JSONResponse(command.model_dump(mode="json"), headers=NO_STORE)


async def list_workflows(request: Request) -> JSONResponse:
    """GET /api/audit/workflows — workflows synthesized from commands."""
    try:
        result = _parser(request).parse_commands()
    except Exception as e:
        return _server_error("Workflow parse", e)
    return JSONResponse(
        {
            "workflows": [w.model_dump(mode="json") for w in result.workflows],
            "count": len(result.workflows),
        },
        headers=NO_STORE,
    )


async def sync_catalog(request: Request) -> JSONResponse:
    """POST /api/audit/sync — re-parse both collections and upsert into the store."""
    try:
        snapshot = _parser(request).parse_all()
        result = SyncPlanner(request.app.state.db).sync(snapshot)
    except Exception as e:
        return _server_error("Sync operation", e)
    body = result.model_dump(mode="json")
    body["agents"] = len(snapshot.agents)
    body["commands"] = len(snapshot.commands)
    body["workflows"] = len(snapshot.workflows)
    body["synced"] = len(snapshot.agents) + len(snapshot.commands)
    return JSONResponse(body, headers=NO_STORE)


routes = [
    Route("/api/audit/catalog", get_catalog),
    Route("/api/audit/agents", list_agents),
    Route("/api/audit/agents/{name}", get_agent),
    Route("/api/audit/commands", list_commands),
    Route("/api/audit/commands/{name}", get_command),
    Route("/api/audit/workflows", list_workflows),
    Route("/api/audit/sync", sync_catalog, methods=["POST"]),
]
