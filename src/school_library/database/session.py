"""
Database session management for the School Library MCP Server.

Each unit of work runs in one short-lived session: it commits on success
and rolls back and re-raises on failure, so a failed action never leaves
half of its writes behind.

Every driver failure leaving this package is a ``RepositoryException``;
callers never see SQLAlchemy's exception types.
"""

import logging
from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from .errors import RepositoryException
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


def engine_options(database_url: str) -> dict[str, Any]:
    """Connection pool settings for the given backend."""
    if database_url.startswith("sqlite"):
        # One shared connection; the server is the only writer
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


class DatabaseManager:
    """
    Owns the SQLAlchemy engine and session factory for one database.

    Created once at startup and handed to the ``LibraryStore``; both the
    engine and the factory are built lazily on first use.
    """

    def __init__(self, database_url: str | None = None):
        """
        Args:
            database_url: SQLAlchemy URL; the configured one when None
        """
        self.database_url = database_url or get_config().get_database_url()
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(
                self.database_url, echo=False, **engine_options(self.database_url)
            )
            logger.info("Opened library database at %s", self._engine.url)
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            # Entities are mapped out of the session, so rows stay readable after commit
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_session(self) -> Session:
        """New session; the caller commits and closes it."""
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Session that commits when the block exits cleanly.

        ```python
        with db_manager.session_scope() as session:
            rows = session.scalars(select(Book)).all()
        ```
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
        except Exception:
            logger.exception("Rolling back library session")
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> list[str]:
        """
        Create the books, students and loans tables if missing.

        Args:
            drop_existing: Drop every table first (all records are lost)

        Returns:
            Names of the tables now present
        """
        if drop_existing:
            logger.warning("Dropping library tables in %s", self.database_url)
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)
        tables = sorted(inspect(self.engine).get_table_names())
        logger.info("Library schema ready: %s", ", ".join(tables))
        return tables

    def verify_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Cannot reach library database")
            return False
        return True

    def close(self) -> None:
        """Dispose of the engine; safe to call more than once."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Closed library database")
        self._engine = None
        self._session_factory = None


@contextmanager
def translate_errors(
    session: Session, message: str, rollback: bool = True
) -> Iterator[None]:
    """Re-raise driver failures inside the block as ``RepositoryException``."""
    try:
        yield
    except SQLAlchemyError as e:
        if rollback:
            session.rollback()
        raise RepositoryException(f"{message}: {e!s}") from e


def safe_commit(session: Session, operation: str) -> None:
    """
    Commit the session.

    Raises:
        RepositoryException: If the commit fails; the session is rolled back
    """
    with translate_errors(session, f"Could not {operation}"):
        session.commit()


def safe_flush(session: Session, operation: str) -> None:
    """
    Flush pending changes without committing.

    Repositories flush so that errors surface at the failing write while
    the surrounding unit of work still decides whether to commit.
    """
    with translate_errors(session, f"Could not {operation}"):
        session.flush()


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """Run a read or bulk statement; the unit of work handles rollback."""
    with translate_errors(session, error_msg, rollback=False):
        return query_func(session)
