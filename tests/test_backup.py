"""Tests for JSON backup export and import."""

import json
from datetime import date

import pytest

from school_library.backup import (
    BackupFormatError,
    backup_filename,
    export_backup,
    import_backup,
    read_backup,
    write_backup,
)
from school_library.models import InCollection, LibrarySnapshot, Student


@pytest.fixture
def populated(engine, dune, hobbit):
    engine.create_loan("Ana Silva", "9A", dune.id)
    return engine.snapshot


class TestExport:
    def test_document_shape(self, populated):
        document = json.loads(export_backup(populated))

        assert set(document) == {"books", "students", "loans"}
        assert document["students"][0]["class"] == "9A"
        assert document["loans"][0]["bookTitle"] == "Dune"
        hobbit = next(b for b in document["books"] if b["title"] == "The Hobbit")
        assert hobbit["collection"] == "Middle-earth"
        assert hobbit["editionYear"] == 2019

    def test_pretty_printed_and_unicode_kept(self):
        snapshot = LibrarySnapshot(students=[Student(id="s1", name="João Gonçalves", class_name="7A")])
        text = export_backup(snapshot)

        assert text.startswith("{\n  ")
        assert "João Gonçalves" in text

    def test_round_trip(self, populated):
        restored = import_backup(export_backup(populated))

        assert restored == populated
        hobbit = next(b for b in restored.books if b.title == "The Hobbit")
        assert hobbit.collection == InCollection(name="Middle-earth")


class TestImport:
    def test_students_default_to_empty(self):
        snapshot = import_backup('{"books": [], "loans": []}')
        assert snapshot.students == []

    def test_null_students_default_to_empty(self):
        snapshot = import_backup('{"books": [], "students": null, "loans": []}')
        assert snapshot.students == []

    def test_unreadable_json(self):
        with pytest.raises(BackupFormatError, match="could not read backup file"):
            import_backup("{not json")

    @pytest.mark.parametrize(
        "document",
        [
            {"books": []},
            {"loans": []},
            {"books": {}, "loans": []},
            {"books": [], "loans": "none"},
            {"books": [], "loans": [], "students": "none"},
        ],
    )
    def test_missing_or_malformed_sections(self, document):
        with pytest.raises(BackupFormatError, match="invalid backup format"):
            import_backup(json.dumps(document))

    def test_top_level_must_be_an_object(self):
        with pytest.raises(BackupFormatError, match="invalid backup format"):
            import_backup("[]")

    def test_invalid_entries_rejected(self):
        document = {"books": [{"id": "b1", "title": "Dune"}], "loans": []}
        with pytest.raises(BackupFormatError, match="invalid backup format"):
            import_backup(json.dumps(document))

    def test_failed_import_leaves_engine_snapshot(self, engine, dune):
        before = engine.snapshot
        with pytest.raises(BackupFormatError):
            import_backup('{"books": []}')
        assert engine.snapshot is before


class TestBackupFiles:
    def test_filename_carries_date(self):
        assert backup_filename(date(2024, 3, 5)) == "library_backup_2024-03-05.json"

    def test_write_and_read(self, populated, tmp_path):
        path = write_backup(populated, tmp_path / "backups", date(2024, 1, 1))

        assert path == tmp_path / "backups" / "library_backup_2024-01-01.json"
        assert read_backup(path) == populated

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(BackupFormatError, match="could not load"):
            read_backup(tmp_path / "missing.json")
