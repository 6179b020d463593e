"""Pydantic DTOs (Data Transfer Objects) for recorded sessions and the task draft."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class SessionResponse(BaseModel):
    id: UUID
    activity_id: UUID
    start_time: datetime
    duration: float
    task_description: str
    goals: list[str]
    expected_time: float
    actual_completion: str
    reflection: str
    follow_up: str

    model_config = {"from_attributes": True}


class DaySessionResponse(BaseModel):
    id: UUID
    created_at: datetime
    sessions: list[SessionResponse]

    model_config = {"from_attributes": True}


class TaskDraftResponse(BaseModel):
    """The saved, not yet started task form."""

    plan_id: UUID | None
    task_description: str
    expected_time: str
    goals: list[str]
    timestamp: datetime

    model_config = {"from_attributes": True}
