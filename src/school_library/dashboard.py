"""Dashboard aggregation - counts and due-soon reminders.

Everything here is derived from a snapshot and an explicit ``now``; no
function reads the clock or the store. The engine recomputes the
dashboard on request, so it is never staler than the last reload.

Due-soon window: a loan that is still out is due soon when its due date
falls on today or one of the next ``due_soon_days`` days, counting in
whole days from the start of today in ``now``'s timezone. With today
2024-06-10 and the default window of 2, anything due from 06-10 00:00 up
to (not including) 06-13 00:00 qualifies.
"""

from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field

from .models.base import LibraryModel
from .models.loan import Loan, ensure_aware
from .models.snapshot import LibrarySnapshot

DUE_SOON_DAYS = 2

DUE_DATE_FORMAT = "%d/%m/%Y"


class DueSoonNotice(LibraryModel):
    """Reminder for a loan that is about to fall due."""

    loan_id: str = Field(..., description="Loan the reminder refers to")
    kind: Literal["warning"] = Field(default="warning", description="Notification severity")
    message: str = Field(..., description="Human-readable reminder")
    due_date: datetime = Field(..., description="When the loan is due")


class Dashboard(BaseModel):
    """Derived view of a snapshot at a point in time."""

    computed_at: datetime = Field(..., description="The `now` the dashboard was computed for")

    total_books: int = Field(..., description="Books in the catalog")
    total_students: int = Field(..., description="Students on the roster")
    total_loans: int = Field(..., description="Loans ever recorded")

    active_loans: list[Loan] = Field(..., description="Loans not yet returned")
    returned_loans: list[Loan] = Field(..., description="Loans already returned")
    overdue_loans: list[Loan] = Field(..., description="Active loans past their due date")

    notifications: list[DueSoonNotice] = Field(..., description="Due-soon reminders")

    def counts(self) -> dict[str, int]:
        """Headline numbers for the stats card."""
        return {
            "totalBooks": self.total_books,
            "totalStudents": self.total_students,
            "totalLoans": self.total_loans,
            "activeLoans": len(self.active_loans),
            "overdueLoans": len(self.overdue_loans),
        }


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def is_due_soon(loan: Loan, now: datetime, window_days: int = DUE_SOON_DAYS) -> bool:
    """True for an active loan due between the start of today and the end of the window."""
    if loan.return_date is not None:
        return False
    today_start = start_of_day(ensure_aware(now))
    window_end = today_start + timedelta(days=window_days + 1)
    return today_start <= loan.due_date < window_end


def due_soon_notice(loan: Loan, now: datetime) -> DueSoonNotice:
    local_due = loan.due_date.astimezone(ensure_aware(now).tzinfo)
    return DueSoonNotice(
        loan_id=loan.id,
        message=(
            f'The book "{loan.book_title}" lent to {loan.student_name} '
            f"is due soon ({local_due.strftime(DUE_DATE_FORMAT)})!"
        ),
        due_date=loan.due_date,
    )


def due_soon_notices(
    loans: list[Loan], now: datetime, window_days: int = DUE_SOON_DAYS
) -> list[DueSoonNotice]:
    return [due_soon_notice(loan, now) for loan in loans if is_due_soon(loan, now, window_days)]


def build_dashboard(
    snapshot: LibrarySnapshot, now: datetime, due_soon_days: int = DUE_SOON_DAYS
) -> Dashboard:
    """
    Compute dashboard counts and reminders.

    Args:
        snapshot: The books, students and loans to summarize
        now: Reference time for overdue and due-soon checks
        due_soon_days: Reminder window length in days after today

    Returns:
        Dashboard where active + returned loans add up to all loans and
        overdue loans are a subset of the active ones
    """
    now = ensure_aware(now)
    active = [loan for loan in snapshot.loans if loan.return_date is None]
    returned = [loan for loan in snapshot.loans if loan.return_date is not None]
    overdue = [loan for loan in active if now > loan.due_date]

    return Dashboard(
        computed_at=now,
        total_books=len(snapshot.books),
        total_students=len(snapshot.students),
        total_loans=len(snapshot.loans),
        active_loans=active,
        returned_loans=returned,
        overdue_loans=overdue,
        notifications=due_soon_notices(active, now, due_soon_days),
    )
