"""Record Resources - Catalog, Roster and Loan Lists

Read-only views of the in-memory snapshot, in the order the store
returns them.

Resources:
- library://books/list - Catalog sorted by title
- library://students/list - Roster sorted by class, then name
- library://loans/list - Loans, newest first, each with its current status
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError

from ..engine import LibraryEngine

logger = logging.getLogger(__name__)


def record_resources(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Resource definitions reading from ``engine``'s snapshot."""

    async def list_books_handler() -> dict[str, Any]:
        """Returns the whole catalog."""
        try:
            books = engine.snapshot.books
            logger.debug("MCP Resource Request - books/list: %d books", len(books))
            return {"books": [book.to_wire() for book in books], "total": len(books)}
        except Exception as e:
            logger.exception("Error in books/list resource")
            raise ResourceError(f"Failed to retrieve book list: {e!s}") from e

    async def list_students_handler() -> dict[str, Any]:
        """Returns the student roster."""
        try:
            students = engine.snapshot.students
            logger.debug("MCP Resource Request - students/list: %d students", len(students))
            return {
                "students": [student.to_wire() for student in students],
                "total": len(students),
            }
        except Exception as e:
            logger.exception("Error in students/list resource")
            raise ResourceError(f"Failed to retrieve student list: {e!s}") from e

    async def list_loans_handler() -> dict[str, Any]:
        """Returns every loan with its status as of now."""
        try:
            now = engine.clock()
            loans = []
            for loan in engine.snapshot.loans:
                standing = loan.standing(now)
                loans.append(
                    {
                        **loan.to_wire(),
                        "status": standing.status.value,
                        "daysOverdue": standing.days_overdue,
                    }
                )
            logger.debug("MCP Resource Request - loans/list: %d loans", len(loans))
            return {"loans": loans, "total": len(loans), "asOf": now.isoformat()}
        except Exception as e:
            logger.exception("Error in loans/list resource")
            raise ResourceError(f"Failed to retrieve loan list: {e!s}") from e

    return [
        {
            "uri": "library://books/list",
            "name": "Book Catalog",
            "description": "All books in the catalog, sorted by title.",
            "mime_type": "application/json",
            "handler": list_books_handler,
        },
        {
            "uri": "library://students/list",
            "name": "Student Roster",
            "description": "All registered students, sorted by class and then name.",
            "mime_type": "application/json",
            "handler": list_students_handler,
        },
        {
            "uri": "library://loans/list",
            "name": "Loan Records",
            "description": (
                "All loans, newest first. Each loan carries its status "
                "(open, overdue or returned) and days overdue."
            ),
            "mime_type": "application/json",
            "handler": list_loans_handler,
        },
    ]
