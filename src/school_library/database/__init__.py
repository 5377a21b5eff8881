"""
Database package for the School Library MCP Server.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- The record mapper between rows and entities (mapper.py)
- One repository per record type and the LibraryStore facade
"""

from .book_repository import BookRepository
from .errors import NotFoundError, RepositoryException
from .loan_repository import LoanRepository
from .repository import BaseRepository, new_id
from .schema import Base
from .session import DatabaseManager, safe_commit, safe_flush, safe_query
from .store import LibraryRepositories, LibraryStore
from .student_repository import StudentRepository

__all__ = [
    "Base",
    "BaseRepository",
    "BookRepository",
    "DatabaseManager",
    "LibraryRepositories",
    "LibraryStore",
    "LoanRepository",
    "NotFoundError",
    "RepositoryException",
    "StudentRepository",
    "new_id",
    "safe_commit",
    "safe_flush",
    "safe_query",
]
