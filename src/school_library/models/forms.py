"""
Form inputs for catalog and roster entries.

These are the shapes a user submits. They carry the validation the stored
entities deliberately skip: required text must be non-blank, and optional
values that hang off a toggle (barcode, collection) are required exactly
when the toggle is on and dropped when it is off.
"""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field, field_validator, model_validator

from .book import BookData, collection_from_name
from .student import StudentData


def _strip(v: str) -> str:
    return v.strip()


class BookInput(BaseModel):
    """Submitted book form."""

    title: str = Field(..., min_length=1, max_length=500, examples=["Dune"])
    author: str = Field(..., min_length=1, max_length=300, examples=["Frank Herbert"])
    year: int = Field(..., ge=0, examples=[1965])
    publisher: str = Field(..., min_length=1, max_length=300)
    isbn: str = Field(..., min_length=1, max_length=32, examples=["978-0-441-17271-9"])
    edition_year: int = Field(..., ge=0, examples=[2019])
    location: str = Field(..., min_length=1, max_length=200, examples=["Shelf A3"])

    has_barcode: bool = Field(default=False, description="Whether the copy carries a barcode")
    barcode: str | None = Field(default=None, max_length=100)

    in_collection: bool = Field(default=False, description="Whether the book is part of a collection")
    collection_name: str | None = Field(default=None, max_length=300)

    @field_validator("title", "author", "publisher", "isbn", "location", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v) if isinstance(v, str) else v

    @field_validator("year", "edition_year")
    @classmethod
    def not_after_next_year(cls, v: int) -> int:
        latest = datetime.now().year + 1
        if v > latest:
            raise ValueError(f"must be {latest} or earlier")
        return v

    @model_validator(mode="after")
    def check_toggles(self) -> Self:
        """Toggled values are required when on and discarded when off."""
        if self.has_barcode:
            if not self.barcode or not self.barcode.strip():
                raise ValueError("barcode is required when has_barcode is set")
        else:
            self.barcode = None

        if self.in_collection:
            if not self.collection_name or not self.collection_name.strip():
                raise ValueError("collection_name is required when in_collection is set")
        else:
            self.collection_name = None

        return self

    def to_data(self) -> BookData:
        return BookData(
            title=self.title,
            author=self.author,
            year=self.year,
            publisher=self.publisher,
            isbn=self.isbn,
            barcode=self.barcode.strip() if self.barcode else None,
            edition_year=self.edition_year,
            location=self.location,
            collection=collection_from_name(self.collection_name),
        )


class StudentInput(BaseModel):
    """Submitted student form."""

    name: str = Field(..., min_length=1, max_length=200, examples=["Ana Silva"])
    class_name: str = Field(..., min_length=1, max_length=50, examples=["9A"])

    @field_validator("name", "class_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v) if isinstance(v, str) else v

    def to_data(self) -> StudentData:
        return StudentData(name=self.name, class_name=self.class_name)
