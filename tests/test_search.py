"""Tests for the list search filters."""

from datetime import UTC, datetime, timedelta

from school_library.models import Loan, Student
from school_library.search import filter_books, filter_loans, filter_students


class TestFilterBooks:
    def test_title_and_author_ignore_case(self, engine, dune, hobbit):
        books = engine.snapshot.books

        assert [b.title for b in filter_books(books, "dune")] == ["Dune"]
        assert [b.title for b in filter_books(books, "TOLKIEN")] == ["The Hobbit"]

    def test_isbn_substring(self, engine, dune, hobbit):
        assert [b.title for b in filter_books(engine.snapshot.books, "0-261")] == ["The Hobbit"]

    def test_empty_term_keeps_all(self, engine, dune, hobbit):
        assert len(filter_books(engine.snapshot.books, "")) == 2


class TestFilterStudents:
    def test_name_or_class(self):
        students = [
            Student(id="1", name="Ana Silva", class_name="9A"),
            Student(id="2", name="Bruno Costa", class_name="8B"),
        ]

        assert [s.id for s in filter_students(students, "silva")] == ["1"]
        assert [s.id for s in filter_students(students, "8b")] == ["2"]
        assert filter_students(students, "zzz") == []


class TestFilterLoans:
    def test_matches_and_orders_newest_first(self):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        loans = [
            Loan(
                id=str(day),
                student_name="Ana Silva" if day % 2 else "Bruno Costa",
                student_class="9A",
                book_title="Dune",
                loan_date=base + timedelta(days=day),
                due_date=base + timedelta(days=day + 7),
            )
            for day in range(4)
        ]

        assert [loan.id for loan in filter_loans(loans, "ana")] == ["3", "1"]
        assert [loan.id for loan in filter_loans(loans, "DUNE")] == ["3", "2", "1", "0"]
