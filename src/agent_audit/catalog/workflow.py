"""Synthesize a workflow record from a command and its extracted metadata."""

from __future__ import annotations

import re

from agent_audit.catalog.models import (
    CommandMetadata,
    CommandRecord,
    WorkflowGate,
    WorkflowRecord,
    WorkflowStep,
    WorkflowType,
)

WORKFLOW_SUFFIX = "-workflow"
_REQUIRED_MARKERS = ("must", "require")


def workflow_name(command_name: str) -> str:
    return f"{command_name}{WORKFLOW_SUFFIX}"


def slugify_gate(text: str) -> str:
    slug = re.sub(r"\s+", "-", text.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


def build_gate(text: str) -> WorkflowGate:
    lowered = text.lower()
    return WorkflowGate(
        name=slugify_gate(text),
        description=text,
        required=any(marker in lowered for marker in _REQUIRED_MARKERS),
    )


def infer_workflow_type(allows_parallel: bool, gate_count: int) -> WorkflowType:
    # HYBRID is never inferred.
    if allows_parallel:
        return WorkflowType.PARALLEL
    if gate_count > 0:
        return WorkflowType.CONDITIONAL
    return WorkflowType.SEQUENTIAL


def structure_steps(steps: list[str]) -> list[WorkflowStep]:
    """Split ``"agent: action"`` strings into ordered step records."""
    structured: list[WorkflowStep] = []
    for index, step in enumerate(steps, start=1):
        agent, _, action = step.partition(":")
        agent = agent.strip()
        action = action.strip() or f"Execute {agent} responsibilities"
        structured.append(WorkflowStep(order=index, agent=agent.lower(), action=action))
    return structured


def synthesize_workflow(
    command: CommandRecord,
    metadata: CommandMetadata,
) -> WorkflowRecord | None:
    """Build the command's workflow, or ``None`` when no steps were found.

    ``agent_sequence`` lists who is invoked (the referenced agents), which
    can differ from the step list describing what happens.
    """
    if not metadata.steps:
        return None

    return WorkflowRecord(
        name=workflow_name(command.name),
        type=infer_workflow_type(command.allows_parallel, len(metadata.gates)),
        description=command.description or "",
        command=command.name,
        agent_sequence=list(metadata.referenced_agents),
        gates=[build_gate(g) for g in metadata.gates],
        steps=structure_steps(metadata.steps),
    )
