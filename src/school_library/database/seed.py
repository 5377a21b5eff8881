"""
Sample data for the School Library MCP Server.

Generates a small school's worth of books, students and loans so the
dashboard has something to show: most loans are returned, some are
still out, a few are overdue and a few fall due in the next days.

Faker and ``random`` are seeded so every run produces the same data.
"""

import random
from datetime import datetime, timedelta

from faker import Faker

from ..models.book import Book, BookData, collection_from_name
from ..models.loan import LOAN_PERIOD_DAYS, LoanData, due_date_for
from ..models.student import Student, StudentData
from .store import LibraryStore

fake = Faker()

CLASS_NAMES = ["6A", "6B", "7A", "7B", "8A", "8B", "9A", "9B"]

COLLECTIONS = ["Classics", "Young Readers", "Science Corner", "Poetry Shelf"]

LOCATIONS = ["Shelf A1", "Shelf A2", "Shelf B1", "Shelf B2", "Reading Room", "Cabinet 3"]


def generate_isbn13() -> str:
    """Generate a valid ISBN-13 number."""
    digits = "978" + "".join(str(random.randint(0, 9)) for _ in range(9))
    total = sum(int(d) * (3 if i % 2 else 1) for i, d in enumerate(digits))
    return f"{digits}{(10 - total % 10) % 10}"


def generate_books(count: int) -> list[BookData]:
    books = []
    for _ in range(count):
        year = random.randint(1950, 2024)
        has_barcode = random.random() < 0.7
        in_collection = random.random() < 0.4
        books.append(
            BookData(
                title=fake.sentence(nb_words=random.randint(2, 5)).rstrip("."),
                author=fake.name(),
                year=year,
                publisher=fake.company(),
                isbn=generate_isbn13(),
                barcode=fake.ean8() if has_barcode else None,
                edition_year=random.randint(year, 2024),
                location=random.choice(LOCATIONS),
                collection=collection_from_name(
                    random.choice(COLLECTIONS) if in_collection else None
                ),
            )
        )
    return books


def generate_students(count: int) -> list[StudentData]:
    return [
        StudentData(name=fake.name(), class_name=random.choice(CLASS_NAMES))
        for _ in range(count)
    ]


def generate_loans(
    books: list[Book], students: list[Student], count: int, now: datetime
) -> list[LoanData]:
    """
    Loans spread over the last 60 days.

    Anything lent more than a loan period ago is usually returned, which
    leaves a handful overdue; recent loans stay open.
    """
    loans = []
    for _ in range(count):
        book = random.choice(books)
        student = random.choice(students)
        loan_date = now - timedelta(
            days=random.randint(0, 60), hours=random.randint(0, 8)
        )
        due_date = due_date_for(loan_date)

        return_date = None
        if due_date < now and random.random() < 0.8:
            return_date = loan_date + timedelta(days=random.randint(1, LOAN_PERIOD_DAYS + 3))
            return_date = min(return_date, now)

        loans.append(
            LoanData(
                student_name=student.name,
                student_class=student.class_name,
                book_id=book.id,
                book_title=book.title,
                loan_date=loan_date,
                due_date=due_date,
                return_date=return_date,
            )
        )
    return loans


def seed_library(
    store: LibraryStore,
    now: datetime,
    num_books: int = 40,
    num_students: int = 25,
    num_loans: int = 60,
    seed: int = 42,
) -> dict[str, int]:
    """
    Insert sample records in one transaction.

    Returns:
        Number of records created per collection
    """
    Faker.seed(seed)
    random.seed(seed)

    with store.unit_of_work() as uow:
        books = [uow.books.create(data) for data in generate_books(num_books)]
        students = [uow.students.create(data) for data in generate_students(num_students)]
        loans = [
            uow.loans.create(data)
            for data in generate_loans(books, students, num_loans, now)
        ]

    return {"books": len(books), "students": len(students), "loans": len(loans)}
