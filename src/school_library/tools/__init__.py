"""
MCP Tools for the School Library Server.

Tools are the actions with side effects. Every tool is bound to the
engine created at startup, so a handler never reaches for a global.
"""

from typing import Any

from ..engine import LibraryEngine
from .backup import backup_tools
from .catalog import catalog_tools
from .circulation import circulation_tools
from .search import search_tools


def all_tools(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Every tool definition, bound to ``engine``."""
    return (
        catalog_tools(engine)
        + circulation_tools(engine)
        + search_tools(engine)
        + backup_tools(engine)
    )


__all__ = [
    "all_tools",
    "backup_tools",
    "catalog_tools",
    "circulation_tools",
    "search_tools",
]
