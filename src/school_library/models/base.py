"""Shared Pydantic configuration for library entities.

Entities use snake_case attributes in Python and camelCase names on the
wire (backup files and MCP payloads), e.g. ``edition_year`` <-> ``editionYear``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LibraryModel(BaseModel):
    """Base class for books, students, loans and the snapshot."""

    model_config = ConfigDict(
        # camelCase aliases for the backup/wire shape
        alias_generator=to_camel,
        # Accept both `edition_year` and `editionYear` on input
        populate_by_name=True,
        # Re-validate on assignment so in-place edits stay well typed
        validate_assignment=True,
    )

    def to_wire(self) -> dict:
        """Dump to the JSON-compatible camelCase shape."""
        return self.model_dump(mode="json", by_alias=True)
