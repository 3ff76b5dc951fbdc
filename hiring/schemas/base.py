"""
Base Pydantic schemas with common fields.

The frontend speaks camelCase; Python code uses snake_case. ApiModel maps
between the two, and FastAPI serialises response models by alias.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every request/response body."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimestampedRead(ApiModel):
    """
    Base schema for reading stored rows.

    Includes the auto-generated fields: id and timestamps.
    """

    id: UUID
    created_at: datetime
    updated_at: datetime


class MessageResponse(ApiModel):
    message: str


def normalize_notes(value: Optional[str]) -> Optional[str]:
    """Trim notes; blank notes are stored as NULL."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None
