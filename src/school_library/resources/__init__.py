"""School Library MCP Resources Package

Resources are the read-only side of the server: lists and the dashboard,
all served from the engine's in-memory snapshot. Changes go through tools.
"""

from typing import Any

from ..engine import LibraryEngine
from .dashboard import dashboard_resources
from .records import record_resources


def all_resources(engine: LibraryEngine) -> list[dict[str, Any]]:
    return record_resources(engine) + dashboard_resources(engine)


__all__ = [
    "all_resources",
    "dashboard_resources",
    "record_resources",
]
