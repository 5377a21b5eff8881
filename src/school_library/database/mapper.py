"""
Record mapper between store rows and library entities.

Rows are plain mappings keyed by column name (``edition_year``, ``class``,
``student_name``...). Entities are the Pydantic models in
``school_library.models``. A null column becomes an absent value on the
entity (``None``, or ``NoCollection`` for the collection) and an absent
value is written back as null.

The ``*_to_row`` functions never emit ``id``: identity is assigned and
owned by the store. No business validation happens here.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from ..models.book import Book, BookData
from ..models.loan import Loan, LoanData
from ..models.student import Student, StudentData


def to_storage_time(value: datetime | None) -> datetime | None:
    # SQLite drops offsets, so timestamps are always stored as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def row_to_book(row: Mapping[str, Any]) -> Book:
    return Book(
        id=row.get("id"),
        title=row.get("title"),
        author=row.get("author"),
        year=row.get("year"),
        publisher=row.get("publisher"),
        isbn=row.get("isbn"),
        barcode=row.get("barcode"),
        edition_year=row.get("edition_year"),
        location=row.get("location"),
        collection=row.get("collection"),
    )


def book_to_row(book: BookData) -> dict[str, Any]:
    return {
        "title": book.title,
        "author": book.author,
        "year": book.year,
        "publisher": book.publisher,
        "isbn": book.isbn,
        "barcode": book.barcode,
        "edition_year": book.edition_year,
        "location": book.location,
        "collection": book.collection_name,
    }


def row_to_student(row: Mapping[str, Any]) -> Student:
    return Student(id=row.get("id"), name=row.get("name"), class_name=row.get("class"))


def student_to_row(student: StudentData) -> dict[str, Any]:
    return {"name": student.name, "class": student.class_name}


def row_to_loan(row: Mapping[str, Any]) -> Loan:
    return Loan(
        id=row.get("id"),
        student_name=row.get("student_name"),
        student_class=row.get("student_class"),
        book_id=row.get("book_id"),
        book_title=row.get("book_title"),
        loan_date=row.get("loan_date"),
        due_date=row.get("due_date"),
        return_date=row.get("return_date"),
    )


def loan_to_row(loan: LoanData) -> dict[str, Any]:
    return {
        "student_name": loan.student_name,
        "student_class": loan.student_class,
        "book_id": loan.book_id,
        "book_title": loan.book_title,
        "loan_date": to_storage_time(loan.loan_date),
        "due_date": to_storage_time(loan.due_date),
        "return_date": to_storage_time(loan.return_date),
    }
