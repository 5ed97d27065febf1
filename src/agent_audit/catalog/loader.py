"""Enumerate and read markdown documents from a collection directory."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from agent_audit.catalog.models import SourceDocument

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


def list_markdown_files(directory: Path) -> list[Path]:
    """Return the ``*.md`` files directly inside ``directory``, sorted by path.

    A missing or unreadable directory yields an empty list; a missing
    collection must not fail the whole sync.
    """
    try:
        return [
            p
            for p in sorted(directory.iterdir())
            if p.name.endswith(MARKDOWN_SUFFIX) and p.is_file()
        ]
    except OSError as e:
        logger.warning(f"Cannot read collection directory {directory}: {e}")
        return []


def _file_times(path: Path) -> tuple[datetime, datetime]:
    try:
        stats = path.stat()
    except OSError:
        now = datetime.now(UTC)
        return now, now
    born = getattr(stats, "st_birthtime", None)
    created = born if born is not None else stats.st_ctime
    return (
        datetime.fromtimestamp(created, UTC),
        datetime.fromtimestamp(stats.st_mtime, UTC),
    )


def load_document(path: Path) -> SourceDocument:
    """Read one document. A single attempt; ``OSError`` propagates."""
    raw = path.read_bytes()
    created_at, updated_at = _file_times(path)
    return SourceDocument(path=path, raw=raw, created_at=created_at, updated_at=updated_at)
