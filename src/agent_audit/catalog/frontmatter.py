"""Split an optional YAML preamble from a markdown body."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from agent_audit.catalog.errors import FrontmatterError

DELIMITER = "---"


def split_frontmatter(text: str, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split text into parsed frontmatter fields and the markdown body.

    The preamble is enclosed between two ``---`` lines at the very start of
    the document. Without one, the fields are empty and the body is the whole
    text.

    Raises:
        FrontmatterError: If the preamble is unterminated, is not valid YAML,
            or does not parse to a mapping.
    """
    where = f": {path}" if path is not None else ""
    lines = text.split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        return {}, text

    closing = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == DELIMITER:
            closing = i
            break
    if closing is None:
        raise FrontmatterError(f"Missing closing '{DELIMITER}' for frontmatter{where}")

    raw = "\n".join(lines[1:closing])
    try:
        fields = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML frontmatter{where}: {exc}") from exc

    if fields is None:
        fields = {}
    if not isinstance(fields, dict):
        raise FrontmatterError(
            f"Frontmatter must be a mapping, got {type(fields).__name__}{where}"
        )

    body = "\n".join(lines[closing + 1 :])
    return {str(k): v for k, v in fields.items()}, body
