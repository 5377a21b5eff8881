"""Tests for the library entity models.

Covers the wire shape (camelCase, ``class``, flattened collection) and
the loan status rules.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from school_library.models import (
    Book,
    InCollection,
    Loan,
    LoanStatus,
    NoCollection,
    Student,
    loan_status,
)
from school_library.models.book import collection_from_name
from school_library.models.loan import due_date_for, ensure_aware

DUE = datetime(2024, 1, 8, 9, 0, tzinfo=UTC)


def make_loan(**overrides) -> Loan:
    fields = {
        "id": "loan-1",
        "student_name": "Ana Silva",
        "student_class": "9A",
        "book_id": "book-1",
        "book_title": "Dune",
        "loan_date": DUE - timedelta(days=7),
        "due_date": DUE,
        "return_date": None,
    }
    fields.update(overrides)
    return Loan(**fields)


class TestBookModel:
    """Book wire shape and collection variant."""

    def test_wire_shape_uses_camel_case(self):
        book = Book(
            id="b1",
            title="Dune",
            author="Frank Herbert",
            year=1965,
            publisher="Chilton Books",
            isbn="978-0-441-17271-9",
            edition_year=2019,
            location="Shelf A3",
        )

        wire = book.to_wire()

        assert wire["editionYear"] == 2019
        assert "edition_year" not in wire
        assert wire["barcode"] is None
        assert wire["collection"] is None

    def test_collection_name_flattens_on_the_wire(self):
        book = Book.model_validate(
            {
                "id": "b2",
                "title": "The Hobbit",
                "author": "J. R. R. Tolkien",
                "year": 1937,
                "publisher": "Allen & Unwin",
                "isbn": "978-0-261-10221-7",
                "barcode": "LIB-0042",
                "editionYear": 1995,
                "location": "Shelf B1",
                "collection": "Middle-earth",
            }
        )

        assert book.collection == InCollection(name="Middle-earth")
        assert book.collection_name == "Middle-earth"
        assert book.has_barcode
        assert book.to_wire()["collection"] == "Middle-earth"

    def test_missing_collection_is_no_collection(self):
        book = Book.model_validate(
            {
                "id": "b3",
                "title": "Emma",
                "author": "Jane Austen",
                "year": 1815,
                "publisher": "John Murray",
                "isbn": "abc",
                "editionYear": 2003,
                "location": "Cabinet 3",
                "collection": None,
            }
        )

        assert isinstance(book.collection, NoCollection)
        assert book.collection_name is None
        assert not book.has_barcode

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_collection_name_means_none(self, name):
        assert collection_from_name(name) == NoCollection()

    def test_collection_name_is_trimmed(self):
        assert collection_from_name("  Classics ") == InCollection(name="Classics")

    def test_in_collection_requires_a_name(self):
        with pytest.raises(ValidationError):
            InCollection(name="")


class TestStudentModel:
    """Student wire shape and matching."""

    def test_class_alias(self):
        student = Student.model_validate({"id": "s1", "name": "Ana Silva", "class": "9A"})

        assert student.class_name == "9A"
        assert student.to_wire() == {"id": "s1", "name": "Ana Silva", "class": "9A"}

    def test_populate_by_field_name(self):
        student = Student(id="s1", name="Ana Silva", class_name="9A")
        assert student.class_name == "9A"

    def test_matches_ignores_case(self):
        student = Student(id="s1", name="Ana Silva", class_name="9A")

        assert student.matches("ana silva", "9a")
        assert student.matches("ANA SILVA", "9A")
        assert not student.matches("Ana Silva", "9B")
        assert not student.matches("Ana", "9A")


class TestLoanStatus:
    """Status is derived from the due date and an explicit now."""

    def test_due_date_is_seven_days_after_loan(self):
        loan_date = datetime(2024, 1, 1, 15, 30, tzinfo=UTC)
        assert due_date_for(loan_date) == datetime(2024, 1, 8, 15, 30, tzinfo=UTC)

    def test_open_before_due(self):
        standing = loan_status(make_loan(), DUE - timedelta(hours=1))
        assert standing.status == LoanStatus.OPEN
        assert standing.days_overdue == 0

    def test_open_exactly_at_due(self):
        assert loan_status(make_loan(), DUE).status == LoanStatus.OPEN

    def test_overdue_just_after_due(self):
        standing = loan_status(make_loan(), DUE + timedelta(seconds=1))
        assert standing.status == LoanStatus.OVERDUE
        assert standing.days_overdue == 0

    def test_days_overdue_counts_whole_days(self):
        standing = loan_status(make_loan(), DUE + timedelta(days=3, hours=5))
        assert standing.status == LoanStatus.OVERDUE
        assert standing.days_overdue == 3

    def test_returned_wins_over_overdue(self):
        loan = make_loan(return_date=DUE + timedelta(days=2))
        standing = loan_status(loan, DUE + timedelta(days=30))

        assert standing.status == LoanStatus.RETURNED
        assert standing.days_overdue == 0

    def test_standing_method_matches_function(self):
        loan = make_loan()
        now = DUE + timedelta(days=1, minutes=1)
        assert loan.standing(now) == loan_status(loan, now)

    def test_naive_times_are_utc(self):
        loan = make_loan(due_date=datetime(2024, 1, 8, 9, 0))

        assert loan.due_date.tzinfo is UTC
        assert loan_status(loan, datetime(2024, 1, 8, 9, 1)).status == LoanStatus.OVERDUE

    def test_other_offsets_compare_by_instant(self):
        plus_two = timezone(timedelta(hours=2))
        # 10:30 at +02:00 is 08:30 UTC, before the 09:00 UTC due date
        now = datetime(2024, 1, 8, 10, 30, tzinfo=plus_two)
        assert loan_status(make_loan(), now).status == LoanStatus.OPEN

    def test_ensure_aware_keeps_existing_offset(self):
        plus_two = timezone(timedelta(hours=2))
        value = datetime(2024, 1, 1, tzinfo=plus_two)
        assert ensure_aware(value) is value

    def test_active_and_returned_flags(self):
        assert make_loan().is_active
        assert make_loan(return_date=DUE).is_returned

    def test_wire_shape(self):
        wire = make_loan().to_wire()

        assert wire["studentName"] == "Ana Silva"
        assert wire["studentClass"] == "9A"
        assert wire["bookId"] == "book-1"
        assert wire["bookTitle"] == "Dune"
        assert wire["returnDate"] is None
        assert wire["dueDate"].startswith("2024-01-08T09:00:00")
