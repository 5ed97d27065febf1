"""Workflow step extraction as an ordered chain of named extraction tiers.

A tier is a group of strategies whose results are merged. Tiers are tried in
order and the first one producing at least one step wins; lower tiers never
contribute once a higher tier has matched.

Tier ``agent-steps`` reads numbered, agent-tagged lists::

    ## Workflow
    1. **api-designer** -> Define schema
    2. **backend-developer** -> Implement

Tier ``diagram-steps`` covers documents that only describe their flow in
ASCII diagrams (``Step 1: Select agents``) or code blocks.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

# (agent, action) pairs; rendered as "agent: action"
StepPair = tuple[str, str]

_WORKFLOW_SECTION = re.compile(r"##\s*Workflow.*?(?=\n##[^#]|\Z)", re.IGNORECASE | re.DOTALL)
_STANDARD_FLOW_SECTION = re.compile(
    r"###\s*Standard Flow.*?(?=\n###|\n##[^#]|\Z)", re.IGNORECASE | re.DOTALL
)
_NUMBERED_AGENT_STEP = re.compile(
    r"^\d+\.[ \t]*\*\*([^*\n]+)\*\*[ \t]*(?:->|→|:)[ \t]*([^\n]+)", re.MULTILINE
)
_ASCII_STEP = re.compile(r"^Step[ \t]+(\d+):[ \t]*([^\n(]+)", re.MULTILINE)
_CODE_BLOCK = re.compile(r"```.*?```", re.DOTALL)
_ORCHESTRATOR = re.compile(r"orchestrator", re.IGNORECASE)
_PARALLEL_EXECUTION = re.compile(r"agents?\s+execute\s+in\s+parallel", re.IGNORECASE)

ORCHESTRATOR_STEP: StepPair = ("orchestrator", "Craft implementation plan")
PARALLEL_STEP: StepPair = ("parallel-execution", "Selected agents run concurrently")


@dataclass(frozen=True)
class StepStrategy:
    name: str
    extract: Callable[[str], list[StepPair]]


@dataclass(frozen=True)
class StepTier:
    name: str
    strategies: tuple[StepStrategy, ...]


@dataclass(frozen=True)
class StepExtraction:
    tier: str | None
    pairs: list[StepPair]

    @property
    def steps(self) -> list[str]:
        return [format_step(agent, action) for agent, action in self.pairs]


def format_step(agent: str, action: str) -> str:
    return f"{agent}: {action}"


def _numbered_steps(section: str) -> list[StepPair]:
    return [
        (m.group(1).strip(), m.group(2).strip())
        for m in _NUMBERED_AGENT_STEP.finditer(section)
    ]


def _section_steps(pattern: re.Pattern[str]) -> Callable[[str], list[StepPair]]:
    def extract(text: str) -> list[StepPair]:
        section = pattern.search(text)
        return _numbered_steps(section.group(0)) if section else []

    return extract


def ascii_diagram_steps(text: str) -> list[StepPair]:
    pairs: list[StepPair] = []
    for match in _ASCII_STEP.finditer(text):
        description = match.group(2).strip()
        if len(description) > 3:
            pairs.append((f"Step {match.group(1)}", description))
    return pairs


def code_block_hints(text: str) -> list[StepPair]:
    pairs: list[StepPair] = []
    for block in _CODE_BLOCK.findall(text):
        if _ORCHESTRATOR.search(block):
            pairs.append(ORCHESTRATOR_STEP)
        if _PARALLEL_EXECUTION.search(block):
            pairs.append(PARALLEL_STEP)
    return pairs


workflow_section_steps = _section_steps(_WORKFLOW_SECTION)
standard_flow_steps = _section_steps(_STANDARD_FLOW_SECTION)

DEFAULT_TIERS: tuple[StepTier, ...] = (
    StepTier(
        "agent-steps",
        (
            StepStrategy("workflow-section", workflow_section_steps),
            StepStrategy("standard-flow", standard_flow_steps),
        ),
    ),
    StepTier(
        "diagram-steps",
        (
            StepStrategy("ascii-steps", ascii_diagram_steps),
            StepStrategy("code-block-hints", code_block_hints),
        ),
    ),
)


def _step_key(agent: str, action: str) -> tuple[str, str]:
    return agent.strip().lower(), action.strip().lower()


def run_tier(tier: StepTier, text: str) -> list[StepPair]:
    """Merge the tier's strategies, dropping repeated (agent, action) pairs.

    The same agent may appear more than once as long as its action differs.
    """
    seen: set[tuple[str, str]] = set()
    pairs: list[StepPair] = []
    for strategy in tier.strategies:
        for agent, action in strategy.extract(text):
            key = _step_key(agent, action)
            if not agent or key in seen:
                continue
            seen.add(key)
            pairs.append((agent, action))
    return pairs


def first_non_empty(tiers: Sequence[StepTier], text: str) -> StepExtraction:
    for tier in tiers:
        pairs = run_tier(tier, text)
        if pairs:
            return StepExtraction(tier=tier.name, pairs=pairs)
    return StepExtraction(tier=None, pairs=[])


def extract_steps_detailed(
    text: str, tiers: Sequence[StepTier] = DEFAULT_TIERS
) -> StepExtraction:
    return first_non_empty(tiers, text)


def extract_workflow_steps(text: str, tiers: Sequence[StepTier] = DEFAULT_TIERS) -> list[str]:
    """Ordered ``"agent: action"`` step strings for a command body."""
    return first_non_empty(tiers, text).steps
