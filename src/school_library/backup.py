"""
Backup codec - JSON export and import of the library snapshot.

A backup file is one JSON object with three arrays, ``books``, ``students``
and ``loans``, each holding entities in their camelCase wire shape:

```json
{
  "books": [{"id": "...", "title": "Dune", "editionYear": 2019, ...}],
  "students": [{"id": "...", "name": "Ana Silva", "class": "9A"}],
  "loans": [{"id": "...", "bookId": "...", "dueDate": "2024-01-08T00:00:00Z", ...}]
}
```

Import needs ``books`` and ``loans``; ``students`` defaults to empty so
backups from older versions still load. Import is all-or-nothing.
"""

import json
import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from .models.snapshot import LibrarySnapshot

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("books", "loans")


class BackupFormatError(ValueError):
    """Raised when a backup document cannot be turned into a snapshot."""


def export_backup(snapshot: LibrarySnapshot) -> str:
    """Serialize the snapshot as pretty-printed JSON."""
    document = {
        "books": [book.to_wire() for book in snapshot.books],
        "students": [student.to_wire() for student in snapshot.students],
        "loans": [loan.to_wire() for loan in snapshot.loans],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def import_backup(text: str) -> LibrarySnapshot:
    """
    Parse a backup document.

    Raises:
        BackupFormatError: Unreadable JSON, missing or non-array ``books`` /
            ``loans``, or entries that are not valid entities
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise BackupFormatError("could not read backup file") from e

    if not isinstance(document, dict) or not all(
        isinstance(document.get(section), list) for section in REQUIRED_SECTIONS
    ):
        raise BackupFormatError("invalid backup format")

    students = document.get("students")
    if students is None:
        students = []
    elif not isinstance(students, list):
        raise BackupFormatError("invalid backup format")

    try:
        snapshot = LibrarySnapshot.model_validate(
            {"books": document["books"], "students": students, "loans": document["loans"]}
        )
    except ValidationError as e:
        raise BackupFormatError(f"invalid backup format: {e.error_count()} invalid entries") from e

    logger.info(
        "Backup parsed: %d books, %d students, %d loans",
        len(snapshot.books),
        len(snapshot.students),
        len(snapshot.loans),
    )
    return snapshot


def backup_filename(today: date) -> str:
    return f"library_backup_{today.isoformat()}.json"


def write_backup(snapshot: LibrarySnapshot, directory: Path, today: date) -> Path:
    """Write an export into ``directory`` and return the file path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / backup_filename(today)
    path.write_text(export_backup(snapshot), encoding="utf-8")
    logger.info("Backup written to %s", path)
    return path


def read_backup(path: Path) -> LibrarySnapshot:
    """
    Read and parse a backup file.

    Raises:
        BackupFormatError: If the file cannot be read or parsed
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BackupFormatError(f"could not load backup file {path}") from e
    return import_backup(text)
