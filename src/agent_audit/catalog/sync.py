"""SyncPlanner: diff a catalog snapshot against a store and upsert by name."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, Field

from agent_audit.catalog.models import (
    CatalogSnapshot,
    EntityKind,
    ParseError,
    SyncError,
)

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Persistence collaborator keyed by ``(kind, name)``."""

    def get_entity(self, kind: EntityKind, name: str) -> dict[str, Any] | None: ...

    def upsert_entity(self, kind: EntityKind, name: str, payload: dict[str, Any]) -> None: ...


class SyncAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    UNCHANGED = "unchanged"


class SyncOperation(BaseModel):
    kind: EntityKind
    name: str
    action: SyncAction
    payload: dict[str, Any]
    source_path: str | None = None


class SyncPlan(BaseModel):
    operations: list[SyncOperation] = Field(default_factory=list)
    errors: list[SyncError] = Field(default_factory=list)
    timestamp: str = ""

    def count(self, kind: EntityKind, action: SyncAction) -> int:
        return sum(1 for op in self.operations if op.kind == kind and op.action == action)


class SyncResult(BaseModel):
    agents_created: int = 0
    agents_updated: int = 0
    commands_created: int = 0
    commands_updated: int = 0
    workflows_created: int = 0
    workflows_updated: int = 0
    unchanged: int = 0
    errors: list[SyncError] = Field(default_factory=list)
    timestamp: str = ""

    def record(self, kind: EntityKind, action: SyncAction) -> None:
        if action == SyncAction.UNCHANGED:
            self.unchanged += 1
            return
        field_name = f"{kind}s_{'created' if action == SyncAction.CREATE else 'updated'}"
        setattr(self, field_name, getattr(self, field_name) + 1)


def parse_error_to_sync_error(error: ParseError) -> SyncError:
    return SyncError(
        entity_type=error.kind,
        entity_name=Path(error.source_path).stem,
        source_path=error.source_path,
        message=error.message,
        cause=error.cause,
    )


class SyncPlanner:
    """Plan and apply create/update operations against a ``CatalogStore``.

    No locking is done around the store; two syncs racing on the same name
    may interleave their upserts.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def _operation(
        self,
        kind: EntityKind,
        name: str,
        payload: dict[str, Any],
        source_path: str | None,
    ) -> SyncOperation:
        existing = self._store.get_entity(kind, name)
        if existing is None:
            action = SyncAction.CREATE
        elif existing == payload:
            action = SyncAction.UNCHANGED
        else:
            action = SyncAction.UPDATE
        return SyncOperation(
            kind=kind, name=name, action=action, payload=payload, source_path=source_path
        )

    def plan(self, snapshot: CatalogSnapshot) -> SyncPlan:
        plan = SyncPlan(
            errors=[parse_error_to_sync_error(e) for e in snapshot.errors],
            timestamp=snapshot.timestamp,
        )

        entries: list[tuple[EntityKind, str, dict[str, Any], str | None]] = []
        for agent in snapshot.agents:
            payload = agent.to_input().model_dump(mode="json")
            entries.append((EntityKind.AGENT, agent.name, payload, agent.source_path))

        # A command's workflow is written before the command referencing it.
        workflows = {w.command: w for w in snapshot.workflows}
        for command in snapshot.commands:
            workflow = workflows.get(command.name)
            if workflow is not None:
                payload = workflow.to_input().model_dump(mode="json")
                entries.append((EntityKind.WORKFLOW, workflow.name, payload, command.source_path))
            payload = command.to_input().model_dump(mode="json")
            entries.append((EntityKind.COMMAND, command.name, payload, command.source_path))

        for kind, name, payload, source_path in entries:
            try:
                plan.operations.append(self._operation(kind, name, payload, source_path))
            except Exception as e:
                logger.warning(f"Failed to look up {kind} '{name}': {e}")
                plan.errors.append(
                    SyncError(
                        entity_type=kind,
                        entity_name=name,
                        source_path=source_path,
                        message=str(e) or type(e).__name__,
                        cause=type(e).__name__,
                    )
                )
        return plan

    def apply(self, plan: SyncPlan) -> SyncResult:
        result = SyncResult(
            errors=list(plan.errors),
            timestamp=plan.timestamp or datetime.now(UTC).isoformat(),
        )
        for op in plan.operations:
            if op.action == SyncAction.UNCHANGED:
                result.record(op.kind, op.action)
                continue
            try:
                self._store.upsert_entity(op.kind, op.name, op.payload)
            except Exception as e:
                logger.warning(f"Failed to {op.action} {op.kind} '{op.name}': {e}")
                result.errors.append(
                    SyncError(
                        entity_type=op.kind,
                        entity_name=op.name,
                        source_path=op.source_path,
                        message=str(e) or type(e).__name__,
                        cause=type(e).__name__,
                    )
                )
                continue
            result.record(op.kind, op.action)
        return result

    def sync(self, snapshot: CatalogSnapshot) -> SyncResult:
        return self.apply(self.plan(snapshot))
