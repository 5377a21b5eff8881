"""Tests for the MCP resources.

Resources read the engine's snapshot; they never write.
"""

import pytest
from fastmcp.exceptions import ResourceError

from school_library.resources import all_resources


def handler_for(engine, uri: str):
    return next(r["handler"] for r in all_resources(engine) if r["uri"] == uri)


class TestResourceDefinitions:
    def test_uris(self, engine):
        assert [r["uri"] for r in all_resources(engine)] == [
            "library://books/list",
            "library://students/list",
            "library://loans/list",
            "library://dashboard/stats",
            "library://dashboard/notifications",
        ]

    def test_all_json(self, engine):
        for resource in all_resources(engine):
            assert resource["mime_type"] == "application/json"
            assert resource["name"]
            assert resource["description"]


class TestRecordResources:
    @pytest.mark.asyncio
    async def test_books_list(self, engine, dune, hobbit):
        result = await handler_for(engine, "library://books/list")()

        assert result["total"] == 2
        assert [b["title"] for b in result["books"]] == ["Dune", "The Hobbit"]

    @pytest.mark.asyncio
    async def test_students_list(self, engine, dune):
        engine.create_loan("Ana Silva", "9A", dune.id)

        result = await handler_for(engine, "library://students/list")()

        assert result["students"] == [
            {"id": engine.snapshot.students[0].id, "name": "Ana Silva", "class": "9A"}
        ]

    @pytest.mark.asyncio
    async def test_loans_list_includes_status(self, engine, dune, clock):
        engine.create_loan("Ana Silva", "9A", dune.id)
        clock.advance(days=10)

        result = await handler_for(engine, "library://loans/list")()

        (loan,) = result["loans"]
        assert loan["status"] == "overdue"
        assert loan["daysOverdue"] == 3
        assert loan["bookTitle"] == "Dune"


class TestDashboardResources:
    @pytest.mark.asyncio
    async def test_stats(self, engine, dune, hobbit, clock):
        first = engine.create_loan("Ana Silva", "9A", dune.id)
        engine.create_loan("Bruno Costa", "8B", hobbit.id)
        engine.return_loan(first.id)
        clock.advance(days=8)

        stats = await handler_for(engine, "library://dashboard/stats")()

        assert stats["totalBooks"] == 2
        assert stats["totalStudents"] == 2
        assert stats["totalLoans"] == 2
        assert stats["activeLoans"] == 1
        assert stats["overdueLoans"] == 1
        assert stats["returnedLoans"] == 1
        assert stats["overdue"][0]["studentName"] == "Bruno Costa"

    @pytest.mark.asyncio
    async def test_notifications(self, engine, dune, clock):
        engine.create_loan("Ana Silva", "9A", dune.id)
        clock.advance(days=5)

        result = await handler_for(engine, "library://dashboard/notifications")()

        assert result["windowDays"] == 2
        (notice,) = result["notifications"]
        assert notice["kind"] == "warning"
        assert notice["message"] == 'The book "Dune" lent to Ana Silva is due soon (08/01/2024)!'

    @pytest.mark.asyncio
    async def test_failure_becomes_resource_error(self, engine, monkeypatch):
        def broken(now=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(engine, "dashboard", broken)

        with pytest.raises(ResourceError, match="boom"):
            await handler_for(engine, "library://dashboard/stats")()
