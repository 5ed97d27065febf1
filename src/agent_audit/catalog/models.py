"""Pydantic models for the agent/command catalog."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_CAPABILITIES = 12
MAX_COLLABORATORS = 15


class EntityKind(StrEnum):
    AGENT = "agent"
    COMMAND = "command"
    WORKFLOW = "workflow"


class WorkflowType(StrEnum):
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    CONDITIONAL = "conditional"
    HYBRID = "hybrid"  # never inferred, reserved for manual annotation


class SourceDocument(BaseModel):
    """Raw bytes and file timestamps of one markdown document."""

    path: Path
    raw: bytes
    created_at: datetime
    updated_at: datetime

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def text(self) -> str:
        return self.raw.decode("utf-8-sig")


# ---------------------------------------------------------------------------
# Frontmatter
# ---------------------------------------------------------------------------


class _Frontmatter(BaseModel):
    # Unknown keys are kept for forward compatibility but unused.
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


def _as_str_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return value


class AgentFrontmatter(_Frontmatter):
    """Structured preamble of an agent document. ``None`` means absent."""

    name: str | None = None
    human_name: str | None = Field(default=None, alias="humanName")
    color: str | None = None
    description: str | None = None
    tools: str | list[str] | None = None
    capabilities: list[str] | None = None
    collaborators: list[str] | None = None

    @field_validator("capabilities", "collaborators", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        return _as_str_list(value)


class CommandFrontmatter(_Frontmatter):
    """Structured preamble of a command document. ``None`` means absent."""

    name: str | None = None
    description: str | None = None
    workflow_id: str | None = Field(default=None, alias="workflowId")
    min_agents: int | None = Field(default=None, alias="minAgents", ge=0)
    max_agents: int | None = Field(default=None, alias="maxAgents", ge=0)
    allows_parallel: bool | None = Field(default=None, alias="allowsParallel")


# ---------------------------------------------------------------------------
# Assembled records
# ---------------------------------------------------------------------------


class AgentInput(BaseModel):
    """Agent value object handed to persistence (no identity fields)."""

    name: str
    human_name: str | None = None
    color: str | None = None
    description: str | None = None
    tools: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)
    collaborators: list[str] = Field(default_factory=list)
    source_path: str = ""
    content: str = ""


class AgentRecord(BaseModel):
    name: str
    human_name: str | None = None
    color: str | None = None
    description: str
    tools: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list, max_length=MAX_CAPABILITIES)
    collaborators: list[str] = Field(default_factory=list, max_length=MAX_COLLABORATORS)
    source_path: str
    raw_body: str
    created_at: datetime
    updated_at: datetime

    def to_input(self) -> AgentInput:
        return AgentInput(
            name=self.name,
            human_name=self.human_name,
            color=self.color,
            description=self.description or None,
            tools=list(self.tools),
            capabilities=list(self.capabilities),
            collaborators=list(self.collaborators),
            source_path=self.source_path,
            content=self.raw_body,
        )


class CommandMetadata(BaseModel):
    """Fields extracted from a command body before record assembly."""

    name: str
    description: str | None = None
    steps: list[str] = Field(default_factory=list)
    step_tier: str | None = None
    gates: list[str] = Field(default_factory=list)
    referenced_agents: list[str] = Field(default_factory=list)


class CommandInput(BaseModel):
    name: str
    description: str | None = None
    workflow_ref: str | None = None
    min_agents: int
    max_agents: int
    allows_parallel: bool
    content: str = ""


class CommandRecord(BaseModel):
    name: str
    description: str | None = None
    workflow_ref: str | None = None
    min_agents: int
    max_agents: int
    allows_parallel: bool = False
    source_path: str
    raw_body: str
    created_at: datetime
    updated_at: datetime

    def to_input(self) -> CommandInput:
        return CommandInput(
            name=self.name,
            description=self.description,
            workflow_ref=self.workflow_ref,
            min_agents=self.min_agents,
            max_agents=self.max_agents,
            allows_parallel=self.allows_parallel,
            content=self.raw_body,
        )


class WorkflowGate(BaseModel):
    name: str
    description: str
    required: bool = False


class WorkflowStep(BaseModel):
    order: int
    agent: str
    action: str


class WorkflowInput(BaseModel):
    name: str
    type: WorkflowType
    description: str | None = None
    agent_sequence: list[str] = Field(default_factory=list)
    gates: list[WorkflowGate] = Field(default_factory=list)


class WorkflowRecord(BaseModel):
    name: str
    type: WorkflowType
    description: str = ""
    command: str
    agent_sequence: list[str] = Field(default_factory=list)
    gates: list[WorkflowGate] = Field(default_factory=list)
    steps: list[WorkflowStep] = Field(default_factory=list, min_length=1)

    def to_input(self) -> WorkflowInput:
        return WorkflowInput(
            name=self.name,
            type=self.type,
            description=self.description or None,
            agent_sequence=list(self.agent_sequence),
            gates=[g.model_copy() for g in self.gates],
        )


# ---------------------------------------------------------------------------
# Batch results and errors
# ---------------------------------------------------------------------------


class ParseError(BaseModel):
    source_path: str
    message: str
    cause: str | None = None  # exception class name
    kind: EntityKind | None = None


class SyncError(BaseModel):
    entity_type: EntityKind | None = None
    entity_name: str
    source_path: str | None = None
    message: str
    cause: str | None = None


class ParseAgentsResult(BaseModel):
    agents: list[AgentRecord] = Field(default_factory=list)
    errors: list[ParseError] = Field(default_factory=list)


class ParseCommandsResult(BaseModel):
    commands: list[CommandRecord] = Field(default_factory=list)
    workflows: list[WorkflowRecord] = Field(default_factory=list)
    errors: list[ParseError] = Field(default_factory=list)


class CatalogSnapshot(BaseModel):
    agents: list[AgentRecord] = Field(default_factory=list)
    commands: list[CommandRecord] = Field(default_factory=list)
    workflows: list[WorkflowRecord] = Field(default_factory=list)
    errors: list[ParseError] = Field(default_factory=list)
    timestamp: str
