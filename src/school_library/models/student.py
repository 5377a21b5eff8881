"""
Student model for the School Library MCP Server.

Students are borrowers. A student may be registered explicitly or created
implicitly the first time a loan names an unknown (name, class) pair.
"""

from pydantic import Field

from .base import LibraryModel


def same_text(a: str, b: str) -> bool:
    """Case-insensitive comparison used for student matching."""
    return a.casefold() == b.casefold()


class StudentData(LibraryModel):
    """Roster fields of a student, without identity."""

    name: str = Field(..., description="Full name", examples=["Ana Silva"])

    # `class` is reserved in Python; the wire name stays `class`
    class_name: str = Field(
        ...,
        alias="class",
        description="Class or grade label",
        examples=["9A", "3rd grade"],
    )

    def matches(self, name: str, class_name: str) -> bool:
        """True when name and class both match, ignoring case."""
        return same_text(self.name, name) and same_text(self.class_name, class_name)


class Student(StudentData):
    """A student on the library roster."""

    id: str = Field(..., description="Opaque unique identifier assigned by the store")
