"""
Catalog and roster tools for the School Library MCP Server.

Books and students are created and updated as whole records from their
forms. Deleting either never touches loans: a loan keeps the title and
borrower it was written with.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..database.errors import NotFoundError, RepositoryException
from ..engine import LibraryEngine
from ..models.forms import BookInput, StudentInput
from .responses import bind_handler, error_response, success_response

logger = logging.getLogger(__name__)


class UpdateBookInput(BookInput):
    """Input schema for update_book: the full form plus the book id."""

    book_id: str = Field(..., min_length=1, description="Id of the book to update")


class UpdateStudentInput(StudentInput):
    """Input schema for update_student: the full form plus the student id."""

    student_id: str = Field(..., min_length=1, description="Id of the student to update")


class RecordIdInput(BaseModel):
    """Input schema for delete tools."""

    id: str = Field(..., min_length=1, description="Id of the record to delete")


async def add_book_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the add_book tool."""
    try:
        params = BookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid book form: %s", e)
        return error_response(f"Invalid book parameters: {e}")

    try:
        book = engine.add_book(params.to_data())
    except RepositoryException as e:
        logger.error("Book could not be saved: %s", e)
        return error_response(f"Could not save book: {e}")

    return success_response(f"Added '{book.title}' to the catalog", {"book": book.to_wire()})


async def update_book_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the update_book tool."""
    try:
        params = UpdateBookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid book form: %s", e)
        return error_response(f"Invalid book parameters: {e}")

    try:
        book = engine.update_book(params.book_id, params.to_data())
    except NotFoundError as e:
        return error_response(str(e))
    except RepositoryException as e:
        logger.error("Book update failed: %s", e)
        return error_response(f"Could not save book: {e}")

    return success_response(f"Updated '{book.title}'", {"book": book.to_wire()})


async def delete_book_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the delete_book tool."""
    try:
        params = RecordIdInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid delete parameters: {e}")

    try:
        removed = engine.delete_book(params.id)
    except RepositoryException as e:
        logger.error("Book delete failed: %s", e)
        return error_response(f"Could not delete book: {e}")

    if not removed:
        return error_response(f"Book {params.id} not found")
    return success_response(f"Book {params.id} deleted", {"book_id": params.id})


async def add_student_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the add_student tool."""
    try:
        params = StudentInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid student form: %s", e)
        return error_response(f"Invalid student parameters: {e}")

    try:
        student = engine.add_student(params.to_data())
    except RepositoryException as e:
        logger.error("Student could not be saved: %s", e)
        return error_response(f"Could not save student: {e}")

    return success_response(
        f"Added {student.name} ({student.class_name}) to the roster",
        {"student": student.to_wire()},
    )


async def update_student_handler(
    engine: LibraryEngine, arguments: dict[str, Any]
) -> dict[str, Any]:
    """Handler for the update_student tool."""
    try:
        params = UpdateStudentInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid student form: %s", e)
        return error_response(f"Invalid student parameters: {e}")

    try:
        student = engine.update_student(params.student_id, params.to_data())
    except NotFoundError as e:
        return error_response(str(e))
    except RepositoryException as e:
        logger.error("Student update failed: %s", e)
        return error_response(f"Could not save student: {e}")

    return success_response(
        f"Updated {student.name} ({student.class_name})", {"student": student.to_wire()}
    )


async def delete_student_handler(
    engine: LibraryEngine, arguments: dict[str, Any]
) -> dict[str, Any]:
    """Handler for the delete_student tool."""
    try:
        params = RecordIdInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid delete parameters: {e}")

    try:
        removed = engine.delete_student(params.id)
    except RepositoryException as e:
        logger.error("Student delete failed: %s", e)
        return error_response(f"Could not delete student: {e}")

    if not removed:
        return error_response(f"Student {params.id} not found")
    return success_response(f"Student {params.id} deleted", {"student_id": params.id})


def catalog_tools(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Tool definitions bound to the engine, ready for server registration."""
    return [
        {
            "name": "add_book",
            "description": (
                "Add a book to the catalog. Set has_barcode with barcode, and "
                "in_collection with collection_name, for the optional fields."
            ),
            "handler": bind_handler(add_book_handler, engine, BookInput),
        },
        {
            "name": "update_book",
            "description": "Replace all fields of a catalog entry. Existing loans keep their title.",
            "handler": bind_handler(update_book_handler, engine, UpdateBookInput),
        },
        {
            "name": "delete_book",
            "description": "Delete a book. Loans that mention it are kept unchanged.",
            "handler": bind_handler(delete_book_handler, engine, RecordIdInput),
        },
        {
            "name": "add_student",
            "description": "Register a student on the roster.",
            "handler": bind_handler(add_student_handler, engine, StudentInput),
        },
        {
            "name": "update_student",
            "description": "Change a student's name or class. Existing loans are not renamed.",
            "handler": bind_handler(update_student_handler, engine, UpdateStudentInput),
        },
        {
            "name": "delete_student",
            "description": "Delete a student. Their loans are kept unchanged.",
            "handler": bind_handler(delete_student_handler, engine, RecordIdInput),
        },
    ]
