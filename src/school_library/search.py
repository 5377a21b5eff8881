"""Text search over the snapshot.

The filters mirror the search box of each list: case-insensitive
substring matching on the visible text columns. An empty term keeps
everything.
"""

from .models.book import Book
from .models.loan import Loan
from .models.student import Student


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def filter_books(books: list[Book], term: str) -> list[Book]:
    """Match title or author ignoring case, or the ISBN as typed."""
    return [
        b for b in books if _contains(b.title, term) or _contains(b.author, term) or term in b.isbn
    ]


def filter_students(students: list[Student], term: str) -> list[Student]:
    return [s for s in students if _contains(s.name, term) or _contains(s.class_name, term)]


def filter_loans(loans: list[Loan], term: str) -> list[Loan]:
    """Match borrower name or book title; newest loans first."""
    matches = [
        loan
        for loan in loans
        if _contains(loan.student_name, term) or _contains(loan.book_title, term)
    ]
    return sorted(matches, key=lambda loan: loan.loan_date, reverse=True)
