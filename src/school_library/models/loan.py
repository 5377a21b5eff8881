"""
Loan model for the School Library MCP Server.

A loan records one book held by one student. Student and book details are
copied onto the loan when it is written, so later edits or deletions of
the book or student leave the loan readable.

Only the return is stored as state. Whether an outstanding loan is open
or overdue is derived from the due date and an explicit ``now``, so the
same stored loan can read as open today and overdue tomorrow.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .base import LibraryModel

LOAN_PERIOD_DAYS = 7

ONE_DAY = timedelta(days=1)


class LoanStatus(str, Enum):
    """Status of a loan as seen at a given moment."""

    OPEN = "open"
    OVERDUE = "overdue"
    RETURNED = "returned"


class LoanStanding(BaseModel):
    """Result of classifying a loan against a point in time."""

    status: LoanStatus
    days_overdue: int = Field(default=0, ge=0)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def due_date_for(loan_date: datetime, period_days: int = LOAN_PERIOD_DAYS) -> datetime:
    """Due date is a fixed number of calendar days after the loan date."""
    return loan_date + timedelta(days=period_days)


class LoanData(LibraryModel):
    """
    Fields of a loan transaction, without identity.

    ``return_date`` is None while the book is out. Setting it is the only
    state transition a loan goes through.
    """

    student_name: str = Field(..., description="Borrower name, copied at write time")

    student_class: str = Field(..., description="Borrower class, copied at write time")

    book_id: str | None = Field(
        default=None,
        description="Id of the borrowed book; may no longer resolve if the book was deleted",
    )

    book_title: str = Field(..., description="Book title, copied at write time")

    loan_date: datetime = Field(..., description="When the book was lent")

    due_date: datetime = Field(..., description="When the book should be back")

    return_date: datetime | None = Field(
        default=None,
        description="When the book came back; null while outstanding",
    )

    @field_validator("loan_date", "due_date", "return_date")
    @classmethod
    def normalize_timezone(cls, v: datetime | None) -> datetime | None:
        return ensure_aware(v) if v is not None else None

    @property
    def is_returned(self) -> bool:
        return self.return_date is not None

    @property
    def is_active(self) -> bool:
        return self.return_date is None

    def standing(self, now: datetime) -> LoanStanding:
        """Classify this loan at ``now``."""
        return loan_status(self, now)


class Loan(LoanData):
    """Represents a loan transaction."""

    id: str = Field(..., description="Opaque unique identifier assigned by the store")


def loan_status(loan: LoanData, now: datetime) -> LoanStanding:
    """
    Classify a loan at the given moment.

    Args:
        loan: The loan to classify
        now: The reference time; naive values are taken as UTC

    Returns:
        RETURNED if a return date is set, OVERDUE if ``now`` is strictly
        after the due date, otherwise OPEN. A loan due exactly at ``now``
        is still OPEN.
    """
    if loan.return_date is not None:
        return LoanStanding(status=LoanStatus.RETURNED)

    now = ensure_aware(now)
    if now > loan.due_date:
        return LoanStanding(
            status=LoanStatus.OVERDUE,
            days_overdue=(now - loan.due_date) // ONE_DAY,
        )

    return LoanStanding(status=LoanStatus.OPEN)
