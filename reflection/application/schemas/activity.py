"""Pydantic DTOs (Data Transfer Objects) for activities."""

from uuid import UUID

from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Read projection of an activity."""

    id: UUID
    name: str
    theme_color: str

    model_config = {"from_attributes": True}
