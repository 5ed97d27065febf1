"""Shared fixtures for agent-audit tests."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from agent_audit.catalog.models import SourceDocument
from agent_audit.config import CatalogRoots

SCENARIO_A_BODY = (
    "# Feature\n"
    "\n"
    "Deliver a feature end to end with specialist agents.\n"
    "\n"
    "## Workflow\n"
    "1. **api-designer** -> Define schema\n"
    "2. **backend-developer** -> Implement\n"
)


def _frontmatter(fields: dict[str, str]) -> str:
    lines = ["---"]
    for k, v in fields.items():
        lines.append(f"{k}: {v}")
    lines.append("---")
    return "\n".join(lines) + "\n"


def write_doc(
    directory: Path,
    stem: str,
    body: str,
    frontmatter: dict[str, str] | None = None,
) -> Path:
    """Helper: write ``<stem>.md`` with optional key: value frontmatter."""
    directory.mkdir(parents=True, exist_ok=True)
    text = (_frontmatter(frontmatter) if frontmatter is not None else "") + body
    path = directory / f"{stem}.md"
    path.write_text(text)
    return path


def make_document(text: str, stem: str = "doc") -> SourceDocument:
    """Build an in-memory SourceDocument without touching the filesystem."""
    ts = datetime(2026, 2, 15, 12, 0, tzinfo=UTC)
    return SourceDocument(
        path=Path(f"/virtual/{stem}.md"),
        raw=text.encode("utf-8"),
        created_at=ts,
        updated_at=ts,
    )


@pytest.fixture
def roots(tmp_path: Path) -> CatalogRoots:
    """Empty .claude/agents and .claude/commands under tmp_path."""
    r = CatalogRoots.from_base(tmp_path)
    r.agents_dir.mkdir(parents=True)
    r.commands_dir.mkdir(parents=True)
    return r


@pytest.fixture
def populated_roots(roots: CatalogRoots) -> CatalogRoots:
    """Two agents and two commands, one of which has a workflow."""
    write_doc(
        roots.agents_dir,
        "backend-developer",
        "You build APIs.\n\n- API Design: REST and GraphQL\n- Testing: unit and integration\n",
        {
            "name": "backend-developer",
            "description": "Senior backend engineer",
            "tools": "Read, Write",
        },
    )
    write_doc(
        roots.agents_dir,
        "api-designer",
        "# API Designer\n\nDesigns contracts and works with the backend-developer.\n",
    )
    write_doc(roots.commands_dir, "feature", SCENARIO_A_BODY)
    write_doc(
        roots.commands_dir,
        "explain",
        "# Explain\n\nExplain a part of the codebase in plain words.\n",
    )
    return roots
