"""CatalogParser: parse whole collections, isolating per-file failures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import TypeVar

from agent_audit.catalog.assembler import build_agent, build_command
from agent_audit.catalog.extractors import normalize_name
from agent_audit.catalog.loader import list_markdown_files, load_document
from agent_audit.catalog.models import (
    AgentRecord,
    CatalogSnapshot,
    CommandRecord,
    EntityKind,
    ParseAgentsResult,
    ParseCommandsResult,
    ParseError,
    WorkflowRecord,
)
from agent_audit.config import CatalogRoots

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Outcome of one file: either a value or the error that replaced it.
_Outcome = tuple[Path, _T | None, ParseError | None]

_CommandParts = tuple[CommandRecord, WorkflowRecord | None]


def _sort_key(name: str) -> tuple[str, str]:
    return name.casefold(), name


class CatalogParser:
    """Parse the agent and command collections under the given roots.

    Every document is processed independently: an exception while reading or
    assembling one file becomes a ``ParseError`` for that path and the batch
    continues. None of the ``parse_*`` methods raise.
    """

    def __init__(
        self,
        roots: CatalogRoots,
        *,
        parallel_commands: Collection[str] = (),
        max_workers: int = 1,
    ) -> None:
        self._roots = roots
        self._parallel_commands = frozenset(parallel_commands)
        self._max_workers = max(1, max_workers)

    @property
    def roots(self) -> CatalogRoots:
        return self._roots

    def _run(
        self,
        paths: list[Path],
        parse_one: Callable[[Path], _T],
        kind: EntityKind,
    ) -> list[_Outcome]:
        def guarded(path: Path) -> _Outcome:
            try:
                return path, parse_one(path), None
            except Exception as e:
                logger.warning(f"Failed to parse {kind} file {path}: {e}")
                error = ParseError(
                    source_path=str(path),
                    message=str(e) or type(e).__name__,
                    cause=type(e).__name__,
                    kind=kind,
                )
                return path, None, error

        if self._max_workers > 1 and len(paths) > 1:
            workers = min(self._max_workers, len(paths))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(guarded, paths))
        return [guarded(p) for p in paths]

    def _parse_agent(self, path: Path) -> AgentRecord:
        return build_agent(load_document(path))

    def _parse_command(self, path: Path) -> _CommandParts:
        command, _metadata, workflow = build_command(load_document(path), self._parallel_commands)
        return command, workflow

    def parse_agents(self) -> ParseAgentsResult:
        paths = list_markdown_files(self._roots.agents_dir)
        outcomes = self._run(paths, self._parse_agent, EntityKind.AGENT)

        agents: list[AgentRecord] = []
        errors: list[ParseError] = []
        for _path, agent, error in outcomes:
            if error is not None:
                errors.append(error)
            elif agent is not None:
                agents.append(agent)

        agents, duplicates = _drop_duplicates(agents, EntityKind.AGENT)
        errors.extend(duplicates)
        agents.sort(key=lambda a: _sort_key(a.name))
        logger.debug(
            f"Parsed {len(agents)} agents ({len(errors)} errors) from {self._roots.agents_dir}"
        )
        return ParseAgentsResult(agents=agents, errors=errors)

    def parse_commands(self) -> ParseCommandsResult:
        paths = list_markdown_files(self._roots.commands_dir)
        outcomes = self._run(paths, self._parse_command, EntityKind.COMMAND)

        parts: dict[str, _CommandParts] = {}
        commands: list[CommandRecord] = []
        errors: list[ParseError] = []
        for _path, result, error in outcomes:
            if error is not None:
                errors.append(error)
            elif result is not None:
                command = result[0]
                commands.append(command)
                parts.setdefault(command.name, result)

        commands, duplicates = _drop_duplicates(commands, EntityKind.COMMAND)
        errors.extend(duplicates)
        commands.sort(key=lambda c: _sort_key(c.name))
        workflows = [w for c in commands if (w := parts[c.name][1]) is not None]
        logger.debug(
            f"Parsed {len(commands)} commands, {len(workflows)} workflows "
            f"({len(errors)} errors) from {self._roots.commands_dir}"
        )
        return ParseCommandsResult(commands=commands, workflows=workflows, errors=errors)

    def parse_all(self) -> CatalogSnapshot:
        agents = self.parse_agents()
        commands = self.parse_commands()
        return CatalogSnapshot(
            agents=agents.agents,
            commands=commands.commands,
            workflows=commands.workflows,
            errors=agents.errors + commands.errors,
            timestamp=datetime.now(UTC).isoformat(),
        )

    def find_agent(self, name: str) -> AgentRecord | None:
        return _find(self.parse_agents().agents, name)

    def find_command(self, name: str) -> CommandRecord | None:
        return _find(self.parse_commands().commands, name)

    def find_workflow(self, name: str) -> WorkflowRecord | None:
        wanted = normalize_name(name)
        for workflow in self.parse_commands().workflows:
            if workflow.name == wanted or workflow.command == wanted:
                return workflow
        return None


_R = TypeVar("_R", AgentRecord, CommandRecord)


def _drop_duplicates(records: Iterable[_R], kind: EntityKind) -> tuple[list[_R], list[ParseError]]:
    """Keep the first record per name (path order); report the rest."""
    first: dict[str, _R] = {}
    errors: list[ParseError] = []
    for record in records:
        existing = first.get(record.name)
        if existing is None:
            first[record.name] = record
            continue
        errors.append(
            ParseError(
                source_path=record.source_path,
                message=(
                    f"Duplicate {kind} name '{record.name}' "
                    f"(already defined in {existing.source_path})"
                ),
                kind=kind,
            )
        )
    return list(first.values()), errors


def _find(records: Iterable[_R], name: str) -> _R | None:
    wanted = normalize_name(name)
    for record in records:
        if record.name == wanted or Path(record.source_path).stem.lower() == name.lower():
            return record
    return None
