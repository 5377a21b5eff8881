"""
Student repository implementation for the School Library MCP Server.

Students are listed by class, then by name. There is no uniqueness check
here; matching on (name, class) is done by the engine.
"""

from sqlalchemy import ColumnElement

from ..models.student import Student, StudentData
from .mapper import row_to_student, student_to_row
from .repository import BaseRepository
from .schema import Student as StudentDB


class StudentRepository(BaseRepository[StudentDB, StudentData, Student]):
    """Repository for the student roster."""

    @property
    def model_class(self):
        return StudentDB

    @property
    def default_order(self) -> list[ColumnElement]:
        return [StudentDB.class_name.asc(), StudentDB.name.asc()]

    @property
    def from_row(self):
        return row_to_student

    @property
    def to_row(self):
        return student_to_row
