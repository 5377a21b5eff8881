"""
Repository pattern implementation for the School Library MCP Server.

Repositories are the only code that touches SQLAlchemy objects. Everything
they return has already been passed through the record mapper, so callers
only ever see the Pydantic entities.

Repositories flush but never commit. The unit of work that owns the
session decides when a group of writes becomes durable.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import ColumnElement, delete, inspect, select
from sqlalchemy.orm import Session

from .errors import NotFoundError, RepositoryException
from .schema import Base
from .session import safe_flush, safe_query

__all__ = [
    "BaseRepository",
    "NotFoundError",
    "RepositoryException",
    "new_id",
]

# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=Base)
DataType = TypeVar("DataType", bound=BaseModel)
EntityType = TypeVar("EntityType", bound=BaseModel)


def new_id() -> str:
    """Random identity token; never reused, never derived from content."""
    return uuid4().hex


def orm_to_row(db_obj: Base) -> dict[str, Any]:
    """Read an ORM object into a mapping keyed by column name."""
    mapper = inspect(type(db_obj))
    return {
        column.name: getattr(db_obj, mapper.get_property_by_column(column).key)
        for column in db_obj.__table__.columns
    }


def row_to_attributes(model_class: type[Base], row: Mapping[str, Any]) -> dict[str, Any]:
    """Translate column names to mapped attribute names (e.g. ``class`` -> ``class_name``)."""
    mapper = inspect(model_class)
    table = model_class.__table__
    return {mapper.get_property_by_column(table.c[name]).key: value for name, value in row.items()}


class BaseRepository(ABC, Generic[ModelType, DataType, EntityType]):
    """
    Abstract base repository providing the four store operations.

    Subclasses declare the ORM class, the default sort order and the pair
    of mapper functions for their entity type.
    """

    def __init__(self, session: Session):
        """Initialize repository with database session."""
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]:
        """Return the SQLAlchemy model class."""

    @property
    @abstractmethod
    def default_order(self) -> list[ColumnElement]:
        """Sort order used by list_all."""

    @property
    @abstractmethod
    def from_row(self) -> Callable[[Mapping[str, Any]], EntityType]:
        """Mapper from a row to the entity."""

    @property
    @abstractmethod
    def to_row(self) -> Callable[[DataType], dict[str, Any]]:
        """Mapper from entity fields to a row (without id)."""

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def _to_entity(self, db_obj: ModelType) -> EntityType:
        return self.from_row(orm_to_row(db_obj))

    def _get_db_obj(self, id: str) -> ModelType | None:
        return safe_query(
            self.session,
            lambda s: s.get(self.model_class, id),
            f"Failed to get {self.entity_name} by ID",
        )

    def list_all(self) -> list[EntityType]:
        """
        Get all entities in the default sort order.

        Raises:
            RepositoryException: On database errors
        """
        query = select(self.model_class).order_by(*self.default_order)
        results = safe_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            f"Failed to list {self.entity_name} records",
        )
        return [self._to_entity(item) for item in results]

    def get_by_id(self, id: str) -> EntityType | None:
        db_obj = self._get_db_obj(id)
        return self._to_entity(db_obj) if db_obj is not None else None

    def create(self, data: DataType, id: str | None = None) -> EntityType:
        """
        Insert a new entity.

        Args:
            data: Entity fields
            id: Identity to keep (restores); a fresh one is assigned when None

        Returns:
            The stored entity with its identity
        """
        attributes = row_to_attributes(self.model_class, self.to_row(data))
        db_obj = self.model_class(id=id or new_id(), **attributes)
        self.session.add(db_obj)
        safe_flush(self.session, f"create {self.entity_name}")
        return self._to_entity(db_obj)

    def update(self, id: str, data: DataType) -> EntityType:
        """
        Overwrite an entity's fields.

        Raises:
            NotFoundError: If no entity has this id
        """
        db_obj = self._get_db_obj(id)
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} {id} not found")

        for field, value in row_to_attributes(self.model_class, self.to_row(data)).items():
            setattr(db_obj, field, value)

        safe_flush(self.session, f"update {self.entity_name}")
        return self._to_entity(db_obj)

    def update_fields(self, id: str, row: Mapping[str, Any]) -> EntityType:
        """
        Overwrite only the given columns.

        Raises:
            NotFoundError: If no entity has this id
        """
        db_obj = self._get_db_obj(id)
        if db_obj is None:
            raise NotFoundError(f"{self.entity_name} {id} not found")

        for field, value in row_to_attributes(self.model_class, row).items():
            setattr(db_obj, field, value)

        safe_flush(self.session, f"update {self.entity_name}")
        return self._to_entity(db_obj)

    def delete(self, id: str) -> bool:
        """
        Delete entity by ID.

        Returns:
            True if deleted, False if not found
        """
        db_obj = self._get_db_obj(id)
        if db_obj is None:
            return False

        self.session.delete(db_obj)
        safe_flush(self.session, f"delete {self.entity_name}")
        return True

    def delete_all(self) -> None:
        safe_query(
            self.session,
            lambda s: s.execute(delete(self.model_class)),
            f"Failed to clear {self.entity_name} records",
        )
