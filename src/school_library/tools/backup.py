"""
Backup tools for the School Library MCP Server.

- export_backup writes the current snapshot to the backup directory
- import_backup replaces the in-memory snapshot from a file or a JSON
  string; it does not write to the store
- persist_snapshot writes the in-memory snapshot through to the store

An import followed by any other write is lost, because every write
reloads from the store. Call persist_snapshot to keep an import.
"""

import logging
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..backup import BackupFormatError, import_backup, read_backup, write_backup
from ..config import get_config
from ..database.errors import RepositoryException
from ..engine import LibraryEngine
from .responses import bind_handler, error_response, success_response

logger = logging.getLogger(__name__)


class ExportBackupInput(BaseModel):
    """Input schema for the export_backup tool."""

    directory: str | None = Field(
        default=None,
        description="Target directory; defaults to the configured backup directory",
    )


class ImportBackupInput(BaseModel):
    """Input schema for the import_backup tool: exactly one source."""

    path: str | None = Field(default=None, description="Path of a backup file to read")
    document: str | None = Field(default=None, description="Backup JSON as a string")

    @model_validator(mode="after")
    def check_source(self) -> Self:
        if (self.path is None) == (self.document is None):
            raise ValueError("Provide exactly one of path or document")
        return self


def _counts(engine: LibraryEngine) -> dict[str, int]:
    snapshot = engine.snapshot
    return {
        "books": len(snapshot.books),
        "students": len(snapshot.students),
        "loans": len(snapshot.loans),
    }


async def export_backup_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the export_backup tool."""
    try:
        params = ExportBackupInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid export parameters: {e}")

    directory = Path(params.directory) if params.directory else get_config().backup_directory
    try:
        path = write_backup(engine.snapshot, directory, engine.clock().date())
    except OSError as e:
        logger.error("Backup export failed: %s", e)
        return error_response(f"Could not write backup: {e}")

    return success_response(
        f"Backup written to {path}",
        {"path": str(path), "counts": _counts(engine)},
    )


async def import_backup_handler(engine: LibraryEngine, arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Handler for the import_backup tool.

    The snapshot is only swapped once the whole document has parsed.
    """
    try:
        params = ImportBackupInput.model_validate(arguments)
    except ValidationError as e:
        return error_response(f"Invalid import parameters: {e}")

    try:
        if params.path is not None:
            snapshot = read_backup(Path(params.path))
        else:
            snapshot = import_backup(params.document)
    except BackupFormatError as e:
        logger.info("Backup import rejected: %s", e)
        return error_response(f"Backup import failed: {e}")

    engine.replace_snapshot(snapshot)
    return success_response(
        "Backup loaded. All current data was replaced in memory; "
        "run persist_snapshot to save it.",
        {"counts": _counts(engine)},
    )


async def persist_snapshot_handler(
    engine: LibraryEngine, arguments: dict[str, Any]  # noqa: ARG001
) -> dict[str, Any]:
    """Handler for the persist_snapshot tool."""
    try:
        engine.persist_snapshot()
    except RepositoryException as e:
        logger.error("Snapshot persist failed: %s", e)
        return error_response(f"Could not save data: {e}")

    return success_response("In-memory data saved to the database", {"counts": _counts(engine)})


def backup_tools(engine: LibraryEngine) -> list[dict[str, Any]]:
    """Tool definitions bound to the engine, ready for server registration."""
    return [
        {
            "name": "export_backup",
            "description": "Write all books, students and loans to a dated JSON backup file.",
            "handler": bind_handler(export_backup_handler, engine, ExportBackupInput),
        },
        {
            "name": "import_backup",
            "description": (
                "Replace all in-memory data with a JSON backup (file path or document). "
                "Not saved to the database until persist_snapshot is called."
            ),
            "handler": bind_handler(import_backup_handler, engine, ImportBackupInput),
        },
        {
            "name": "persist_snapshot",
            "description": "Replace the database contents with the current in-memory data.",
            "handler": bind_handler(persist_snapshot_handler, engine),
        },
    ]
