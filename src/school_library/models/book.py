"""
Book model for the School Library MCP Server.

A book is a catalog entry. Loans keep their own copy of the title, so a
book can be edited or deleted without touching the loans that mention it.

Membership in a collection (a series or donated set) is a tagged variant:
either ``NoCollection`` or ``InCollection(name=...)``. On the wire it is
flattened to the collection name, or null when the book is not part of one.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .base import LibraryModel


class NoCollection(BaseModel):
    """The book does not belong to any collection."""

    kind: Literal["none"] = "none"

    model_config = ConfigDict(frozen=True)


class InCollection(BaseModel):
    """The book belongs to the named collection."""

    kind: Literal["collection"] = "collection"
    name: str = Field(..., min_length=1, description="Collection or series name")

    model_config = ConfigDict(frozen=True)


Collection = Annotated[NoCollection | InCollection, Field(discriminator="kind")]


def collection_from_name(name: str | None) -> NoCollection | InCollection:
    """Build the collection variant from an optional name."""
    if name is None or not name.strip():
        return NoCollection()
    return InCollection(name=name.strip())


class BookData(LibraryModel):
    """
    Catalog fields of a book, without its identity.

    No content validation happens here: rows read back from the store and
    entries read from backup files are accepted as long as the types fit.
    Form-level rules live in ``BookInput``.
    """

    title: str = Field(..., description="The title of the book", examples=["Dune"])

    author: str = Field(..., description="Author name", examples=["Frank Herbert"])

    year: int = Field(..., description="Publication year", examples=[1965])

    publisher: str = Field(..., description="Publisher name", examples=["Chilton Books"])

    isbn: str = Field(
        ...,
        description="ISBN as printed; not required to be numeric",
        examples=["978-0-441-17271-9"],
    )

    barcode: str | None = Field(
        default=None,
        description="Library barcode label, if the copy has one",
    )

    edition_year: int = Field(..., description="Year of this edition", examples=[2019])

    location: str = Field(
        ...,
        description="Physical location label (shelf, cabinet, room)",
        examples=["Shelf A3"],
    )

    collection: Collection = Field(
        default_factory=NoCollection,
        description="Collection membership; null on the wire when none",
    )

    @field_validator("collection", mode="before")
    @classmethod
    def parse_collection(cls, v: Any) -> Any:
        """Accept the flattened wire form (a name or null)."""
        if v is None or isinstance(v, str):
            return collection_from_name(v)
        return v

    @field_serializer("collection")
    def serialize_collection(self, v: NoCollection | InCollection) -> str | None:
        return v.name if isinstance(v, InCollection) else None

    @property
    def collection_name(self) -> str | None:
        """Name of the collection, or None."""
        return self.collection.name if isinstance(self.collection, InCollection) else None

    @property
    def has_barcode(self) -> bool:
        return self.barcode is not None


class Book(BookData):
    """Represents a book in the library catalog."""

    id: str = Field(..., description="Opaque unique identifier assigned by the store")
