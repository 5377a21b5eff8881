"""
Book repository implementation for the School Library MCP Server.

Books are listed by title. Deleting a book never touches loans: they keep
their copied title and their now-dangling ``book_id``.
"""

from sqlalchemy import ColumnElement

from ..models.book import Book, BookData
from .mapper import book_to_row, row_to_book
from .repository import BaseRepository
from .schema import Book as BookDB


class BookRepository(BaseRepository[BookDB, BookData, Book]):
    """Repository for catalog entries."""

    @property
    def model_class(self):
        return BookDB

    @property
    def default_order(self) -> list[ColumnElement]:
        return [BookDB.title.asc()]

    @property
    def from_row(self):
        return row_to_book

    @property
    def to_row(self):
        return book_to_row
