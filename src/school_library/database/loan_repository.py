"""
Loan repository implementation for the School Library MCP Server.

Loans are listed newest first. Besides the generic operations this
repository offers the two partial writes the loan lifecycle needs:
recording a return and re-pointing a loan at another student or book.
"""

from datetime import datetime

from sqlalchemy import ColumnElement

from ..models.loan import Loan, LoanData
from .mapper import loan_to_row, row_to_loan, to_storage_time
from .repository import BaseRepository
from .schema import Loan as LoanDB


class LoanRepository(BaseRepository[LoanDB, LoanData, Loan]):
    """Repository for loan transactions."""

    @property
    def model_class(self):
        return LoanDB

    @property
    def default_order(self) -> list[ColumnElement]:
        return [LoanDB.loan_date.desc()]

    @property
    def from_row(self):
        return row_to_loan

    @property
    def to_row(self):
        return loan_to_row

    def mark_returned(self, id: str, returned_at: datetime) -> Loan:
        """
        Set the return date of a loan.

        Raises:
            NotFoundError: If no loan has this id
        """
        return self.update_fields(id, {"return_date": to_storage_time(returned_at)})

    def reassign(
        self,
        id: str,
        *,
        student_name: str,
        student_class: str,
        book_id: str,
        book_title: str,
    ) -> Loan:
        """
        Replace the borrower and book fields, leaving all dates untouched.

        Raises:
            NotFoundError: If no loan has this id
        """
        return self.update_fields(
            id,
            {
                "student_name": student_name,
                "student_class": student_class,
                "book_id": book_id,
                "book_title": book_title,
            },
        )
