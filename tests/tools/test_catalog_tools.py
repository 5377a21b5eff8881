"""Tests for the catalog and roster tools."""

import pytest

from school_library.tools.catalog import (
    add_book_handler,
    add_student_handler,
    catalog_tools,
    delete_book_handler,
    delete_student_handler,
    update_book_handler,
    update_student_handler,
)

BOOK_FORM = {
    "title": "Dune",
    "author": "Frank Herbert",
    "year": 1965,
    "publisher": "Chilton Books",
    "isbn": "978-0-441-17271-9",
    "edition_year": 2019,
    "location": "Shelf A3",
}


def text_of(response: dict) -> str:
    return response["content"][0]["text"]


class TestBookTools:
    @pytest.mark.asyncio
    async def test_add_book(self, engine):
        response = await add_book_handler(
            engine, {**BOOK_FORM, "in_collection": True, "collection_name": "Classics"}
        )

        assert "isError" not in response
        book = response["data"]["book"]
        assert book["collection"] == "Classics"
        assert book["id"] == engine.snapshot.books[0].id

    @pytest.mark.asyncio
    async def test_add_book_toggle_without_value(self, engine):
        response = await add_book_handler(engine, {**BOOK_FORM, "has_barcode": True})

        assert response["isError"] is True
        assert "barcode is required" in text_of(response)
        assert engine.snapshot.books == []

    @pytest.mark.asyncio
    async def test_update_book(self, engine, dune):
        response = await update_book_handler(
            engine, {**BOOK_FORM, "book_id": dune.id, "location": "Shelf C9"}
        )

        assert "isError" not in response
        assert engine.snapshot.find_book(dune.id).location == "Shelf C9"

    @pytest.mark.asyncio
    async def test_update_unknown_book(self, engine):
        response = await update_book_handler(engine, {**BOOK_FORM, "book_id": "missing"})

        assert response["isError"] is True
        assert "not found" in text_of(response)

    @pytest.mark.asyncio
    async def test_delete_book(self, engine, dune):
        response = await delete_book_handler(engine, {"id": dune.id})
        assert "isError" not in response
        assert engine.snapshot.books == []

        again = await delete_book_handler(engine, {"id": dune.id})
        assert again["isError"] is True


class TestStudentTools:
    @pytest.mark.asyncio
    async def test_add_student(self, engine):
        response = await add_student_handler(engine, {"name": " Ana Silva ", "class_name": "9A"})

        assert "isError" not in response
        assert response["data"]["student"]["class"] == "9A"
        assert engine.snapshot.students[0].name == "Ana Silva"

    @pytest.mark.asyncio
    async def test_add_student_blank_name(self, engine):
        response = await add_student_handler(engine, {"name": "", "class_name": "9A"})
        assert response["isError"] is True

    @pytest.mark.asyncio
    async def test_update_student(self, engine):
        added = await add_student_handler(engine, {"name": "Ana Silva", "class_name": "9A"})
        student_id = added["data"]["student"]["id"]

        response = await update_student_handler(
            engine, {"student_id": student_id, "name": "Ana Silva", "class_name": "10A"}
        )

        assert "isError" not in response
        assert engine.snapshot.find_student_by_id(student_id).class_name == "10A"

    @pytest.mark.asyncio
    async def test_update_unknown_student(self, engine):
        response = await update_student_handler(
            engine, {"student_id": "missing", "name": "Ana Silva", "class_name": "9A"}
        )
        assert response["isError"] is True

    @pytest.mark.asyncio
    async def test_delete_student(self, engine):
        added = await add_student_handler(engine, {"name": "Ana Silva", "class_name": "9A"})

        response = await delete_student_handler(engine, {"id": added["data"]["student"]["id"]})

        assert "isError" not in response
        assert engine.snapshot.students == []


def test_catalog_tool_names(engine):
    assert [t["name"] for t in catalog_tools(engine)] == [
        "add_book",
        "update_book",
        "delete_book",
        "add_student",
        "update_student",
        "delete_student",
    ]
