"""CLI entry point for agent-audit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import cast

from agent_audit import __version__
from agent_audit.catalog.parser import CatalogParser
from agent_audit.catalog.sync import SyncPlanner
from agent_audit.config import CONFIG_FILENAME, Config, load_config
from agent_audit.storage.database import CatalogDatabase


def _load(args: argparse.Namespace) -> Config:
    base = cast(Path | None, args.base)
    config = load_config((base or Path.cwd()) / CONFIG_FILENAME)
    if base is not None:
        config.base_path = base
    return config


def _parser_for(config: Config) -> CatalogParser:
    return CatalogParser(
        config.roots,
        parallel_commands=config.parallel_commands,
        max_workers=config.max_workers,
    )


def _cmd_parse(args: argparse.Namespace) -> None:
    parser = _parser_for(_load(args))
    kind = cast(str, args.kind)
    if kind == "agents":
        result = parser.parse_agents()
    elif kind == "commands":
        result = parser.parse_commands()
    else:
        result = parser.parse_all()
    print(json.dumps(result.model_dump(mode="json"), indent=2))


def _cmd_sync(args: argparse.Namespace) -> None:
    config = _load(args)
    db_arg = cast(Path | None, args.db)
    db_path = db_arg if db_arg is not None else config.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    snapshot = _parser_for(config).parse_all()
    db = CatalogDatabase(str(db_path))
    try:
        result = SyncPlanner(db).sync(snapshot)
    finally:
        db.close()

    print(json.dumps(result.model_dump(mode="json"), indent=2))
    if result.errors:
        print(f"Sync finished with {len(result.errors)} error(s)", file=sys.stderr)
        sys.exit(1)


def _cmd_serve(args: argparse.Namespace) -> None:
    from agent_audit.server.runner import run_server

    run_server(_load(args))


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="agent-audit",
        description="Extract agents, commands and workflows from markdown definitions",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"agent-audit {__version__}"
    )
    _ = parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    def _with_base(p: argparse.ArgumentParser) -> argparse.ArgumentParser:
        _ = p.add_argument(
            "--base",
            type=Path,
            default=None,
            help="Project directory containing .claude/ (default: cwd)",
        )
        return p

    # parse subcommand
    parse_p = _with_base(subparsers.add_parser("parse", help="Parse collections and print JSON"))
    _ = parse_p.add_argument(
        "--kind",
        choices=["agents", "commands", "all"],
        default="all",
        help="Which collection to parse (default: all)",
    )

    # sync subcommand
    sync_p = _with_base(subparsers.add_parser("sync", help="Parse and upsert into the database"))
    _ = sync_p.add_argument("--db", type=Path, default=None, help="SQLite database path")

    # serve subcommand
    _ = _with_base(subparsers.add_parser("serve", help="Start the HTTP API server"))

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    dispatch = {
        "parse": _cmd_parse,
        "sync": _cmd_sync,
        "serve": _cmd_serve,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)
