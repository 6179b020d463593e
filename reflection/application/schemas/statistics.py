"""Pydantic DTOs (Data Transfer Objects) for statistics views."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel


class TimeBarStatisticsResponse(BaseModel):
    """One row of the statistics view."""

    time_bar_id: UUID
    activity_id: UUID
    activity_name: str
    theme_color: str
    planned_time: float
    actual_time: float
    completion_ratio: float
    display_width: float
    actual_display_width: float
    session_count: int
    time_difference: float

    model_config = {"from_attributes": True}


class DailyStatisticsResponse(BaseModel):
    """Statistics for one plan against one day (or all time when day is null)."""

    plan_id: UUID
    plan_name: str
    day: date | None
    rows: list[TimeBarStatisticsResponse]
    total_planned_time: float
    total_actual_time: float
    total_sessions: int
    average_session_duration: float
    efficiency: float

    model_config = {"from_attributes": True}
