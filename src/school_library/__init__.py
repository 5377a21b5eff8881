"""
School Library MCP Server Package.

This package implements a record-keeper for a school library exposed over
the Model Context Protocol. It tracks the book catalog, the student roster
and the loans linking the two.

Key Components:
- models: Pydantic models for books, students, loans and the snapshot
- database: SQLAlchemy schema, session management, repositories and the store
- engine: the loan lifecycle engine owning the in-memory snapshot
- dashboard: derived counts and due-soon notifications
- backup: JSON export/import of the snapshot
- search: text filters over the snapshot
- config: Configuration management with Pydantic v2
- resources: MCP resources (read-only endpoints)
- tools: MCP tools (operations with side effects)
"""

__version__ = "0.1.0"

# Make database module available at package level
from . import database

__all__ = [
    "__version__",
    "database",
]
