"""
SQLAlchemy database schema for the School Library MCP Server.

Three tables back the three record types. Column names are snake_case;
the record mapper translates rows to the camelCase entity shape.

There are deliberately no foreign keys between loans and books or
students: a loan keeps its copied display fields when the book or student
it mentions is deleted, and ``loans.book_id`` is left pointing at nothing.
"""

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Base class for all SQLAlchemy models
Base = declarative_base()


class Book(Base):
    """Books table - the library catalog."""

    __tablename__ = "books"

    id = Column(String(50), primary_key=True)
    title = Column(String(500), nullable=False)
    author = Column(String(300), nullable=False)
    year = Column(Integer, nullable=False)
    publisher = Column(String(300), nullable=False)
    isbn = Column(String(32), nullable=False)
    barcode = Column(String(100), nullable=True)
    edition_year = Column(Integer, nullable=False)
    location = Column(String(200), nullable=False)
    collection = Column(String(300), nullable=True)

    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_book_title", "title"),
        Index("idx_book_isbn", "isbn"),
    )


class Student(Base):
    """Students table - the borrower roster.

    There is no unique constraint on (name, class); see the engine for how
    duplicates are avoided when loans create students implicitly.
    """

    __tablename__ = "students"

    id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    # `class` is a Python keyword, so the attribute differs from the column
    class_name = Column("class", String(50), nullable=False)

    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (Index("idx_student_class_name", "class", "name"),)


class Loan(Base):
    """Loans table - lending transactions with copied display fields."""

    __tablename__ = "loans"

    id = Column(String(50), primary_key=True)
    student_name = Column(String(200), nullable=False)
    student_class = Column(String(50), nullable=False)
    book_id = Column(String(50), nullable=True)
    book_title = Column(Text, nullable=False)
    loan_date = Column(DateTime(timezone=True), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    return_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_loan_date", "loan_date"),
        Index("idx_loan_due_date", "due_date"),
        Index("idx_loan_book", "book_id"),
    )
