"""
The library store: the persistence boundary used by the engine.

``LibraryStore`` wraps a ``DatabaseManager`` and hands out units of work.
A unit of work is one session holding the three repositories; everything
written inside it is committed together or not at all.

```python
store = LibraryStore(DatabaseManager("sqlite:///library.db"))
with store.unit_of_work() as uow:
    student = uow.students.create(StudentData(name="Ana", class_name="9A"))
    uow.loans.create(...)
```
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..models.snapshot import LibrarySnapshot
from .book_repository import BookRepository
from .loan_repository import LoanRepository
from .session import DatabaseManager, safe_commit
from .student_repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass
class LibraryRepositories:
    """The three repositories bound to one session."""

    session: Session
    books: BookRepository
    students: StudentRepository
    loans: LoanRepository

    @classmethod
    def for_session(cls, session: Session) -> "LibraryRepositories":
        return cls(
            session=session,
            books=BookRepository(session),
            students=StudentRepository(session),
            loans=LoanRepository(session),
        )


class LibraryStore:
    """
    Persistence boundary for books, students and loans.

    Constructed once at startup and injected into the engine.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def initialize(self) -> None:
        """Create tables that do not exist yet."""
        self.db_manager.init_database()

    @contextmanager
    def unit_of_work(self) -> Generator[LibraryRepositories, None, None]:
        """
        Run a group of writes as one transaction.

        Raises:
            RepositoryException: If any write or the final commit fails;
                nothing from the block is persisted in that case
        """
        session = self.db_manager.create_session()
        try:
            yield LibraryRepositories.for_session(session)
            safe_commit(session, "commit unit of work")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def load_snapshot(self) -> LibrarySnapshot:
        """Fetch all three collections in their list orders."""
        with self.db_manager.session_scope() as session:
            repos = LibraryRepositories.for_session(session)
            snapshot = LibrarySnapshot(
                books=repos.books.list_all(),
                students=repos.students.list_all(),
                loans=repos.loans.list_all(),
            )

        logger.debug(
            "Loaded snapshot: %d books, %d students, %d loans",
            len(snapshot.books),
            len(snapshot.students),
            len(snapshot.loans),
        )
        return snapshot

    def close(self) -> None:
        self.db_manager.close()
