"""Exceptions raised by the persistence layer."""


class RepositoryException(Exception):
    """Base exception for store operations (the generic store error)."""


class NotFoundError(RepositoryException):
    """Raised when an entity is not found."""
