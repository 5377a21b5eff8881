"""
Search tool for the School Library MCP Server.

Runs the list filters over the current snapshot. Loans come back with
their status at the time of the search.
"""

import enum
import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..engine import LibraryEngine
from ..search import filter_books, filter_loans, filter_students
from .responses import bind_handler, error_response, success_response

logger = logging.getLogger(__name__)


class SearchScope(str, enum.Enum):
    """Which lists to search."""

    ALL = "all"
    BOOKS = "books"
    STUDENTS = "students"
    LOANS = "loans"


class SearchLibraryInput(BaseModel):
    """Input schema for the search_library tool."""

    term: str = Field(default="", max_length=200, description="Text to look for; empty lists all")
    scope: SearchScope = Field(default=SearchScope.ALL, description="Lists to search")


async def search_library_handler(
    engine: LibraryEngine, arguments: dict[str, Any]
) -> dict[str, Any]:
    """Handler for the search_library tool."""
    try:
        params = SearchLibraryInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid search parameters: {e}")

    snapshot = engine.snapshot
    term = params.term.strip()
    data: dict[str, Any] = {}

    if params.scope in (SearchScope.ALL, SearchScope.BOOKS):
        data["books"] = [b.to_wire() for b in filter_books(snapshot.books, term)]
    if params.scope in (SearchScope.ALL, SearchScope.STUDENTS):
        data["students"] = [s.to_wire() for s in filter_students(snapshot.students, term)]
    if params.scope in (SearchScope.ALL, SearchScope.LOANS):
        now = engine.clock()
        data["loans"] = [
            {**loan.to_wire(), "status": loan.standing(now).status.value}
            for loan in filter_loans(snapshot.loans, term)
        ]

    summary = ", ".join(f"{len(items)} {name}" for name, items in data.items())
    logger.debug("Search '%s' (%s): %s", term, params.scope.value, summary)
    return success_response(f"Found {summary}", data)


search_tool_definition = {
    "name": "search_library",
    "description": (
        "Search books (title, author, ISBN), students (name, class) and loans "
        "(student, book title). Matching ignores case."
    ),
}


def search_tools(engine: LibraryEngine) -> list[dict[str, Any]]:
    handler = bind_handler(search_library_handler, engine, SearchLibraryInput)
    return [{**search_tool_definition, "handler": handler}]
