"""Merge frontmatter fields with extractor fallbacks into catalog records.

For every field the frontmatter value wins when present and non-empty;
otherwise the body extractor runs; otherwise a filename-derived default is
used (``name`` always, ``description`` for agents).
"""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from agent_audit.catalog.errors import AssemblyError, ContractViolation
from agent_audit.catalog.extractors import (
    extract_capabilities,
    extract_collaborators,
    extract_description,
    extract_gates,
    extract_referenced_agents,
    humanize_name,
    normalize_capabilities,
    normalize_collaborators,
    normalize_name,
    parse_tools,
)
from agent_audit.catalog.frontmatter import split_frontmatter
from agent_audit.catalog.models import (
    AgentFrontmatter,
    AgentRecord,
    CommandFrontmatter,
    CommandMetadata,
    CommandRecord,
    SourceDocument,
    WorkflowRecord,
)
from agent_audit.catalog.steps import extract_steps_detailed
from agent_audit.catalog.workflow import synthesize_workflow

DEFAULT_MAX_AGENTS = 10

_F = TypeVar("_F", bound=BaseModel)


def _present(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _present_list(values: list[str] | None) -> list[str] | None:
    if not values:
        return None
    cleaned = [v for v in values if v.strip()]
    return cleaned or None


def _validate(model: type[_F], fields: dict[str, Any], path: Path) -> _F:
    try:
        return model.model_validate(fields)
    except ValidationError as exc:
        raise AssemblyError(f"Invalid frontmatter in {path}: {exc}") from exc


def _derive_name(declared: str | None, document: SourceDocument) -> str:
    name = normalize_name(_present(declared) or document.stem)
    if not name:
        raise AssemblyError(f"Cannot derive a name for {document.path}")
    return name


def build_agent(document: SourceDocument) -> AgentRecord:
    fields, body = split_frontmatter(document.text, document.path)
    fm = _validate(AgentFrontmatter, fields, document.path)
    name = _derive_name(fm.name, document)

    capabilities = _present_list(fm.capabilities)
    collaborators = _present_list(fm.collaborators)

    return AgentRecord(
        name=name,
        human_name=_present(fm.human_name),
        color=_present(fm.color),
        description=(
            _present(fm.description) or extract_description(body) or humanize_name(name)
        ),
        tools=parse_tools(fm.tools),
        capabilities=(
            normalize_capabilities(capabilities)
            if capabilities
            else extract_capabilities(body)
        ),
        collaborators=(
            normalize_collaborators(collaborators)
            if collaborators
            else extract_collaborators(body)
        ),
        source_path=str(document.path),
        raw_body=body,
        created_at=document.created_at,
        updated_at=document.updated_at,
    )


def extract_command_metadata(fm: CommandFrontmatter, body: str, name: str) -> CommandMetadata:
    extraction = extract_steps_detailed(body)
    return CommandMetadata(
        name=name,
        description=_present(fm.description) or extract_description(body) or None,
        steps=extraction.steps,
        step_tier=extraction.tier,
        gates=extract_gates(body),
        referenced_agents=extract_referenced_agents(body),
    )


def derive_agent_bounds(fm: CommandFrontmatter, referenced: int) -> tuple[int, int]:
    min_agents = fm.min_agents if fm.min_agents else min(1, referenced)
    max_agents = fm.max_agents if fm.max_agents else max(referenced, DEFAULT_MAX_AGENTS)
    return min_agents, max_agents


def build_command(
    document: SourceDocument,
    parallel_commands: Collection[str] = (),
) -> tuple[CommandRecord, CommandMetadata, WorkflowRecord | None]:
    """Assemble a command record, its metadata, and its workflow if any.

    Raises:
        ContractViolation: If the derived ``min_agents`` exceeds ``max_agents``.
    """
    fields, body = split_frontmatter(document.text, document.path)
    fm = _validate(CommandFrontmatter, fields, document.path)
    name = _derive_name(fm.name, document)
    metadata = extract_command_metadata(fm, body, name)

    min_agents, max_agents = derive_agent_bounds(fm, len(metadata.referenced_agents))
    if min_agents > max_agents:
        raise ContractViolation(
            f"Command '{name}' has minAgents={min_agents} > maxAgents={max_agents}"
        )

    allows_parallel = (
        fm.allows_parallel if fm.allows_parallel is not None else name in parallel_commands
    )

    command = CommandRecord(
        name=name,
        description=metadata.description,
        workflow_ref=_present(fm.workflow_id),
        min_agents=min_agents,
        max_agents=max_agents,
        allows_parallel=allows_parallel,
        source_path=str(document.path),
        raw_body=body,
        created_at=document.created_at,
        updated_at=document.updated_at,
    )
    workflow = synthesize_workflow(command, metadata)
    if workflow is not None and command.workflow_ref is None:
        command = command.model_copy(update={"workflow_ref": workflow.name})
    return command, metadata, workflow
