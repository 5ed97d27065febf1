"""agent-audit: extract agents, commands and workflows from markdown definitions."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("agent-audit")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
