"""Stateless extractors: markdown body -> ordered, deduplicated strings.

Each extractor is only consulted when the corresponding frontmatter field is
absent. They are low-precision pattern matchers guarded by length and shape
limits.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from agent_audit.catalog.models import MAX_CAPABILITIES, MAX_COLLABORATORS

# "- Capability name: explanation" or "- Uptime maintained above 99%"
_CAPABILITY_ITEM = re.compile(
    r"^[-*][ \t]+([A-Z][a-zA-Z \t]+?)"
    r"(?:[ \t]*[-:>]|achieved|maintained|tracked|enabled|controlled|documented)",
    re.MULTILINE,
)
# "API design:" alone on its line
_CAPABILITY_HEADING = re.compile(r"^([A-Z][a-zA-Z \t]+):\r?$", re.MULTILINE)

# Blank lines right after the heading line are not a section boundary.
_INTEGRATION_SECTION = re.compile(
    r"(?i:integration with other agents):?[^\n]*(?:\n(?=\n))*.*?(?=\n\n[A-Z]|\n##|\Z)",
    re.DOTALL,
)
_COLLABORATION_VERB = re.compile(
    r"(?:with|support|help|partner|coordinate|consult|sync|engage|align)\s+"
    r"(?:with\s+)?([a-z]+-[a-z]+(?:-[a-z]+)?)",
    re.IGNORECASE,
)
ROLE_SUFFIXES = (
    "developer",
    "designer",
    "engineer",
    "expert",
    "auditor",
    "specialist",
    "manager",
    "architect",
    "pro",
)
_ROLE_MENTION = re.compile(
    r"\b([a-z]+-(?:" + "|".join(ROLE_SUFFIXES) + r"))\b",
    re.IGNORECASE,
)

_GATES_SECTION = re.compile(r"##[ \t]*Gates.*?(?=##|\Z)", re.IGNORECASE | re.DOTALL)
_GATE_ITEM = re.compile(
    r"^[ \t]*[-*][ \t]+(?:\[[ xX]\][ \t]*)?(?:(?i:gates?):[ \t]*)?(.+?)[ \t]*\r?$",
    re.MULTILINE,
)
_EMPHASIS_EDGES = re.compile(r"^[*_]+|[*_]+$")
MIN_GATE_LENGTH = 5

_BOLD_AGENT = re.compile(r"\*\*([a-z]+-[a-z]+(?:-[a-z]+)?)\*\*", re.IGNORECASE)

_H1_PARAGRAPH = re.compile(r"^#[ \t]+[^\n]+\n+([^\n#]+)", re.MULTILINE)
_PARAGRAPH_BREAK = re.compile(r"\n\n+")
_PARAGRAPH_LEAD = re.compile(r"^[#*\-\s]+")


class _Collector:
    """Insertion-ordered set with an optional cap and a dedupe key."""

    def __init__(self, limit: int | None = None, key: Callable[[str], str] = str) -> None:
        self._limit = limit
        self._key = key
        self._seen: set[str] = set()
        self.items: list[str] = []

    @property
    def full(self) -> bool:
        return self._limit is not None and len(self.items) >= self._limit

    def add(self, value: str) -> None:
        if not value or self.full:
            return
        k = self._key(value)
        if k in self._seen:
            return
        self._seen.add(k)
        self.items.append(value)

    def extend(self, values: Iterable[str]) -> None:
        for value in values:
            self.add(value)


def extract_capabilities(text: str, limit: int = MAX_CAPABILITIES) -> list[str]:
    """Capabilities from bullet items and stand-alone ``Title Case:`` lines."""
    found = _Collector(limit)
    for match in _CAPABILITY_ITEM.finditer(text):
        capability = match.group(1).strip()
        if 2 < len(capability) < 60:
            found.add(capability)
    for match in _CAPABILITY_HEADING.finditer(text):
        section = match.group(1).strip()
        if 2 < len(section) < 50:
            found.add(section)
    return found.items


def extract_collaborators(text: str, limit: int = MAX_COLLABORATORS) -> list[str]:
    """Collaborating agent names, lowercased.

    Names introduced by a collaboration verb inside an "Integration with
    other agents" section come first, followed by any ``<word>-<role>`` token
    found anywhere in the document.
    """
    found = _Collector(limit)
    section = _INTEGRATION_SECTION.search(text)
    if section:
        for match in _COLLABORATION_VERB.finditer(section.group(0)):
            found.add(match.group(1).lower())
    for match in _ROLE_MENTION.finditer(text):
        found.add(match.group(1).lower())
    return found.items


def normalize_collaborators(values: Iterable[str], limit: int = MAX_COLLABORATORS) -> list[str]:
    found = _Collector(limit)
    found.extend(v.strip().lower() for v in values)
    return found.items


def normalize_capabilities(values: Iterable[str], limit: int = MAX_CAPABILITIES) -> list[str]:
    found = _Collector(limit)
    found.extend(v.strip() for v in values)
    return found.items


def extract_gates(text: str) -> list[str]:
    """Bullet items of the ``## Gates`` section. No section means no gates."""
    section = _GATES_SECTION.search(text)
    if not section:
        return []
    found = _Collector()
    for match in _GATE_ITEM.finditer(section.group(0)):
        gate = _EMPHASIS_EDGES.sub("", match.group(1).strip()).strip()
        if len(gate) > MIN_GATE_LENGTH:
            found.add(gate)
    return found.items


def extract_referenced_agents(text: str) -> list[str]:
    """Bold ``**agent-name**`` tokens in document order, lowercased."""
    found = _Collector()
    for match in _BOLD_AGENT.finditer(text):
        found.add(match.group(1).lower())
    return found.items


def extract_description(text: str) -> str:
    """First paragraph after the title heading, else the first substantive paragraph."""
    heading = _H1_PARAGRAPH.search(text)
    if heading:
        desc = heading.group(1).replace("**", "").strip()
        if len(desc) > 10:
            return desc

    for paragraph in _PARAGRAPH_BREAK.split(text):
        clean = _PARAGRAPH_LEAD.sub("", paragraph).strip()
        if 20 < len(clean) < 300 and not clean.startswith(("|", "[")):
            return clean

    return ""


def parse_tools(value: str | list[str] | None) -> list[str]:
    """Parse a tools field: ``"Read, Write"``, ``"Read Write"`` or a YAML list."""
    if not value:
        return []
    if isinstance(value, list):
        parts = [str(v).strip() for v in value]
    elif "," in value:
        parts = [t.strip() for t in value.split(",")]
    else:
        parts = value.split()
    found = _Collector()
    found.extend(parts)
    return found.items


def normalize_name(value: str) -> str:
    name = value.strip().lower()
    name = re.sub(r"[\s_]+", "-", name)
    name = re.sub(r"[^a-z0-9-]", "", name)
    name = re.sub(r"-{2,}", "-", name)
    return name.strip("-")


def humanize_name(name: str) -> str:
    """``backend-developer`` -> ``Backend Developer``."""
    return " ".join(w.capitalize() for w in re.split(r"[-_\s]+", name) if w)
