"""Markdown-to-entity extraction: agents, commands, workflows and gates."""

from agent_audit.catalog.assembler import build_agent, build_command
from agent_audit.catalog.errors import (
    AssemblyError,
    CatalogError,
    ContractViolation,
    FrontmatterError,
)
from agent_audit.catalog.extractors import (
    extract_capabilities,
    extract_collaborators,
    extract_description,
    extract_gates,
    extract_referenced_agents,
    parse_tools,
)
from agent_audit.catalog.frontmatter import split_frontmatter
from agent_audit.catalog.models import (
    MAX_CAPABILITIES,
    MAX_COLLABORATORS,
    AgentRecord,
    CatalogSnapshot,
    CommandRecord,
    EntityKind,
    ParseError,
    SyncError,
    WorkflowGate,
    WorkflowRecord,
    WorkflowType,
)
from agent_audit.catalog.parser import CatalogParser
from agent_audit.catalog.steps import extract_workflow_steps
from agent_audit.catalog.sync import CatalogStore, SyncPlanner, SyncResult
from agent_audit.catalog.workflow import synthesize_workflow

__all__ = [
    "MAX_CAPABILITIES",
    "MAX_COLLABORATORS",
    "AgentRecord",
    "AssemblyError",
    "CatalogError",
    "CatalogParser",
    "CatalogSnapshot",
    "CatalogStore",
    "CommandRecord",
    "ContractViolation",
    "EntityKind",
    "FrontmatterError",
    "ParseError",
    "SyncError",
    "SyncPlanner",
    "SyncResult",
    "WorkflowGate",
    "WorkflowRecord",
    "WorkflowType",
    "build_agent",
    "build_command",
    "extract_capabilities",
    "extract_collaborators",
    "extract_description",
    "extract_gates",
    "extract_referenced_agents",
    "extract_workflow_steps",
    "parse_tools",
    "split_frontmatter",
    "synthesize_workflow",
]
