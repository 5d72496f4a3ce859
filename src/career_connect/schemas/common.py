"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from career_connect.db.time import as_utc


class CamelModel(BaseModel):
    """Base model exposing camelCase names on the wire.

    Fields are populated either by their Python name or by the alias, and can
    be built straight from ORM instances.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict[str, object]:
        """Return the JSON-ready camelCase representation."""
        return self.model_dump(mode="json", by_alias=True)


def serialize_datetime(value: datetime | None) -> str | None:
    """Render a timestamp as ISO 8601 in UTC."""
    value = as_utc(value)
    return value.isoformat() if value is not None else None
