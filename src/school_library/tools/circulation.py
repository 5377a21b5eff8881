"""
Circulation tools for the School Library MCP Server.

1. create_loan: Lend a book, registering the student if needed
2. edit_loan: Change a loan's student or book (dates stay fixed)
3. return_loan: Record a return
4. delete_loan: Remove a loan record

Each handler is an action boundary: every failure is logged and turned
into an ``isError`` response. Nothing propagates to the server and
nothing is retried.
"""

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..database.errors import RepositoryException
from ..engine import LibraryEngine, LoanValidationError
from ..models.loan import Loan
from .responses import bind_handler, error_response, success_response

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"


class CreateLoanInput(BaseModel):
    """Input schema for the create_loan tool."""

    student_name: str = Field(
        ...,
        description="Borrower's full name; matched to the roster ignoring case",
        examples=["Ana Silva"],
    )

    student_class: str = Field(
        ...,
        description="Borrower's class or grade label",
        examples=["9A"],
    )

    book_id: str = Field(
        ...,
        min_length=1,
        description="Id of the book being lent",
    )


class EditLoanInput(CreateLoanInput):
    """Input schema for the edit_loan tool."""

    loan_id: str = Field(..., min_length=1, description="Id of the loan to edit")


class LoanIdInput(BaseModel):
    """Input schema for tools acting on one loan."""

    loan_id: str = Field(..., min_length=1, description="Id of the loan")


def _local_date(engine: LibraryEngine, value: datetime) -> str:
    """Format a stored timestamp as a date in the clock's timezone."""
    return value.astimezone(engine.clock().tzinfo).strftime(DATE_FORMAT)


def _loan_data(engine: LibraryEngine, loan: Loan) -> dict[str, Any]:
    standing = loan.standing(engine.clock())
    return {
        "loan": loan.to_wire(),
        "status": standing.status.value,
        "days_overdue": standing.days_overdue,
    }


async def create_loan_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Handler for the create_loan tool.

    Validates the arguments, lets the engine find or register the student
    and records the loan with its due date.
    """
    try:
        params = CreateLoanInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid loan parameters: %s", e)
        return error_response(f"Invalid loan parameters: {e}")

    try:
        loan = engine.create_loan(params.student_name, params.student_class, params.book_id)
    except LoanValidationError as e:
        logger.info("Loan rejected: %s", e)
        return error_response(str(e))
    except RepositoryException as e:
        logger.error("Loan could not be saved: %s", e)
        return error_response(f"Could not save loan: {e}")

    message = (
        f"Lent '{loan.book_title}' to {loan.student_name} ({loan.student_class}). "
        f"Due date: {_local_date(engine, loan.due_date)}"
    )
    student_created = engine.registered_student is not None
    if student_created:
        message += f". {loan.student_name} was added to the student roster"

    data = _loan_data(engine, loan)
    data["student_created"] = student_created
    return success_response(message, data)


async def edit_loan_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the edit_loan tool."""
    try:
        params = EditLoanInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid loan parameters: %s", e)
        return error_response(f"Invalid loan parameters: {e}")

    try:
        loan = engine.edit_loan(
            params.loan_id, params.student_name, params.student_class, params.book_id
        )
    except LoanValidationError as e:
        logger.info("Loan edit rejected: %s", e)
        return error_response(str(e))
    except RepositoryException as e:
        logger.error("Loan edit could not be saved: %s", e)
        return error_response(f"Could not save loan: {e}")

    return success_response(
        f"Loan updated: '{loan.book_title}' with {loan.student_name} ({loan.student_class})",
        _loan_data(engine, loan),
    )


async def return_loan_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Handler for the return_loan tool.

    A loan that is already returned is refused here; the engine itself
    would move the return date forward.
    """
    try:
        params = LoanIdInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid return parameters: {e}")

    current = engine.snapshot.find_loan(params.loan_id)
    if current is not None and current.is_returned:
        return error_response(
            f"Loan {params.loan_id} was already returned on "
            f"{_local_date(engine, current.return_date)}"
        )

    try:
        loan = engine.return_loan(params.loan_id)
    except LoanValidationError as e:
        logger.info("Return rejected: %s", e)
        return error_response(str(e))
    except RepositoryException as e:
        logger.error("Return could not be saved: %s", e)
        return error_response(f"Could not record return: {e}")

    return success_response(
        f"'{loan.book_title}' returned by {loan.student_name}",
        _loan_data(engine, loan),
    )


async def delete_loan_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the delete_loan tool."""
    try:
        params = LoanIdInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid delete parameters: {e}")

    try:
        removed = engine.delete_loan(params.loan_id)
    except RepositoryException as e:
        logger.error("Loan delete failed: %s", e)
        return error_response(f"Could not delete loan: {e}")

    if not removed:
        return error_response(f"Loan {params.loan_id} not found")
    return success_response(f"Loan {params.loan_id} deleted", {"loan_id": params.loan_id})


def circulation_tools(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Tool definitions bound to the engine, ready for server registration."""
    return [
        {
            "name": "create_loan",
            "description": (
                "Lend a book to a student for the standard loan period. The student is "
                "looked up by name and class ignoring case and registered if unknown."
            ),
            "handler": bind_handler(create_loan_handler, engine, CreateLoanInput),
        },
        {
            "name": "edit_loan",
            "description": (
                "Change the student or book of an existing loan. Loan, due and "
                "return dates are not changed."
            ),
            "handler": bind_handler(edit_loan_handler, engine, EditLoanInput),
        },
        {
            "name": "return_loan",
            "description": "Record that the book of an outstanding loan was returned today.",
            "handler": bind_handler(return_loan_handler, engine, LoanIdInput),
        },
        {
            "name": "delete_loan",
            "description": "Permanently delete a loan record.",
            "handler": bind_handler(delete_loan_handler, engine, LoanIdInput),
        },
    ]
