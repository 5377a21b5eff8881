"""Test configuration and fixtures for the School Library MCP Server.

Every test that touches storage gets its own SQLite file under pytest's
``tmp_path``, and every engine runs on a pinned clock so due dates and
statuses are deterministic.
"""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from school_library.config import LibraryConfig, reset_config
from school_library.database.session import DatabaseManager
from school_library.database.store import LibraryStore
from school_library.engine import LibraryEngine
from school_library.models.book import Book, BookData, InCollection

# === Clock ===


class FixedClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2024-01-01 09:00 UTC."""
    return FixedClock(datetime(2024, 1, 1, 9, 0, tzinfo=UTC))


# === Test Database Fixtures ===


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for each test."""
    return tmp_path / "test_library.db"


@pytest.fixture
def test_database_url(test_db_path: Path) -> str:
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db_manager(test_database_url: str) -> Generator[DatabaseManager, None, None]:
    manager = DatabaseManager(test_database_url)
    manager.init_database()
    yield manager
    manager.close()


@pytest.fixture
def store(db_manager: DatabaseManager) -> LibraryStore:
    return LibraryStore(db_manager)


# === Configuration Fixtures ===


@pytest.fixture
def test_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[LibraryConfig, None, None]:
    """Configuration isolated to the test's temporary directory.

    The values are also exported as environment variables so code that
    calls ``get_config()`` sees the same settings.
    """
    reset_config()
    monkeypatch.setenv("SCHOOL_LIBRARY_DATABASE_PATH", str(tmp_path / "config.db"))
    monkeypatch.setenv("SCHOOL_LIBRARY_BACKUP_DIRECTORY", str(tmp_path / "backups"))

    config = LibraryConfig(
        server_name="test-school-library",
        server_version="0.0.1-test",
        debug=True,
        log_level="DEBUG",
    )

    yield config

    reset_config()


# === Engine Fixtures ===


def make_book_data(title: str = "Dune", **overrides) -> BookData:
    fields = {
        "title": title,
        "author": "Frank Herbert",
        "year": 1965,
        "publisher": "Chilton Books",
        "isbn": "978-0-441-17271-9",
        "barcode": None,
        "edition_year": 2019,
        "location": "Shelf A3",
    }
    fields.update(overrides)
    return BookData(**fields)


@pytest.fixture
def engine(store: LibraryStore, clock: FixedClock) -> LibraryEngine:
    """Engine over an empty, initialized store."""
    library = LibraryEngine(store, clock=clock)
    library.reload()
    return library


@pytest.fixture
def dune(engine: LibraryEngine) -> Book:
    """The engine's catalog holding a single book, "Dune"."""
    return engine.add_book(make_book_data())


@pytest.fixture
def hobbit(engine: LibraryEngine) -> Book:
    return engine.add_book(
        make_book_data(
            "The Hobbit",
            author="J. R. R. Tolkien",
            year=1937,
            publisher="Allen & Unwin",
            isbn="978-0-261-10221-7",
            barcode="LIB-0042",
            collection=InCollection(name="Middle-earth"),
        )
    )


@pytest.fixture
def book_data():
    """Factory for valid ``BookData``; keyword arguments override fields."""
    return make_book_data
