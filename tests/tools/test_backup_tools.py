"""Tests for the backup tools: export, import and persist."""

import json

import pytest

from school_library.backup import export_backup
from school_library.models import LibrarySnapshot
from school_library.tools.backup import (
    export_backup_handler,
    import_backup_handler,
    persist_snapshot_handler,
)


def text_of(response: dict) -> str:
    return response["content"][0]["text"]


class TestExportBackupTool:
    @pytest.mark.asyncio
    async def test_export_to_directory(self, engine, dune, tmp_path):
        response = await export_backup_handler(engine, {"directory": str(tmp_path)})

        assert "isError" not in response
        path = tmp_path / "library_backup_2024-01-01.json"
        assert response["data"]["path"] == str(path)
        assert response["data"]["counts"] == {"books": 1, "students": 0, "loans": 0}
        assert json.loads(path.read_text(encoding="utf-8"))["books"][0]["title"] == "Dune"

    @pytest.mark.asyncio
    async def test_export_to_configured_directory(self, engine, dune, test_config, tmp_path):
        response = await export_backup_handler(engine, {})

        assert "isError" not in response
        assert (tmp_path / "backups" / "library_backup_2024-01-01.json").exists()


class TestImportBackupTool:
    @pytest.mark.asyncio
    async def test_import_document_replaces_memory_only(self, engine, dune):
        response = await import_backup_handler(
            engine, {"document": export_backup(LibrarySnapshot())}
        )

        assert "isError" not in response
        assert "persist_snapshot" in text_of(response)
        assert engine.snapshot.books == []
        assert len(engine.store.load_snapshot().books) == 1

    @pytest.mark.asyncio
    async def test_import_file(self, engine, dune, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text('{"books": [], "loans": []}', encoding="utf-8")

        response = await import_backup_handler(engine, {"path": str(path)})

        assert response["data"]["counts"] == {"books": 0, "students": 0, "loans": 0}

    @pytest.mark.asyncio
    async def test_bad_document_keeps_snapshot(self, engine, dune):
        before = engine.snapshot

        response = await import_backup_handler(engine, {"document": '{"books": []}'})

        assert response["isError"] is True
        assert "invalid backup format" in text_of(response)
        assert engine.snapshot is before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [{}, {"path": "a.json", "document": "{}"}])
    async def test_exactly_one_source(self, engine, arguments):
        response = await import_backup_handler(engine, arguments)
        assert response["isError"] is True


class TestPersistSnapshotTool:
    @pytest.mark.asyncio
    async def test_import_then_persist(self, engine, dune):
        await import_backup_handler(engine, {"document": '{"books": [], "loans": []}'})

        response = await persist_snapshot_handler(engine, {})

        assert "isError" not in response
        assert engine.store.load_snapshot().books == []
