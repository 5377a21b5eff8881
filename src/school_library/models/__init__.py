"""
School Library MCP Server Models.

Pydantic models for all core entities:
- Book: catalog entries, with collection membership as a tagged variant
- Student: borrowers
- Loan: lending transactions and their derived status
- LibrarySnapshot: the full in-memory data set
- BookInput, StudentInput: submitted forms with their validation rules
"""

from .book import Book, BookData, Collection, InCollection, NoCollection, collection_from_name
from .forms import BookInput, StudentInput
from .loan import (
    LOAN_PERIOD_DAYS,
    Loan,
    LoanData,
    LoanStanding,
    LoanStatus,
    due_date_for,
    loan_status,
)
from .snapshot import LibrarySnapshot
from .student import Student, StudentData

__all__ = [
    "LOAN_PERIOD_DAYS",
    "Book",
    "BookData",
    "BookInput",
    "Collection",
    "InCollection",
    "LibrarySnapshot",
    "Loan",
    "LoanData",
    "LoanStanding",
    "LoanStatus",
    "NoCollection",
    "Student",
    "StudentData",
    "StudentInput",
    "collection_from_name",
    "due_date_for",
    "loan_status",
]
