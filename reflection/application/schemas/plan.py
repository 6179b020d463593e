"""Pydantic DTOs (Data Transfer Objects) for plans and time bars."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class TimeBarResponse(BaseModel):
    """Read projection of a time bar."""

    id: UUID
    activity_id: UUID
    planned_time: float

    model_config = {"from_attributes": True}


class PlanResponse(BaseModel):
    """Read projection of a plan with its ordered time bars."""

    id: UUID
    name: str
    time_bars: list[TimeBarResponse]
    created_at: datetime
    updated_at: datetime
    is_current: bool = False

    model_config = {"from_attributes": True}
