"""Exceptions raised while turning a single document into records."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for per-document extraction failures."""


class FrontmatterError(CatalogError):
    """The structured preamble is unterminated or not a YAML mapping."""


class AssemblyError(CatalogError):
    """A document cannot be assembled into a record."""


class ContractViolation(AssemblyError):
    """Derived values break a record invariant (e.g. min_agents > max_agents)."""
