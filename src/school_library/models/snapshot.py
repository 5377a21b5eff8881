"""
Library snapshot model.

The snapshot is the complete in-memory set of books, students and loans.
It is what the engine reloads after every write, what the dashboard reads
and what a backup file contains.
"""

from pydantic import Field

from .base import LibraryModel
from .book import Book
from .loan import Loan
from .student import Student


class LibrarySnapshot(LibraryModel):
    """All books, students and loans at a point in time."""

    books: list[Book] = Field(default_factory=list)
    students: list[Student] = Field(default_factory=list)
    loans: list[Loan] = Field(default_factory=list)

    def find_book(self, book_id: str) -> Book | None:
        return next((b for b in self.books if b.id == book_id), None)

    def find_student(self, name: str, class_name: str) -> Student | None:
        """First student whose name and class match, ignoring case."""
        return next((s for s in self.students if s.matches(name, class_name)), None)

    def find_student_by_id(self, student_id: str) -> Student | None:
        return next((s for s in self.students if s.id == student_id), None)

    def find_loan(self, loan_id: str) -> Loan | None:
        return next((loan for loan in self.loans if loan.id == loan_id), None)
