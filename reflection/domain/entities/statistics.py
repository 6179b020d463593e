"""Read-only statistics value objects produced by the aggregator."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class TimeBarStatistics:
    """Planned vs. actual time for one time bar of a plan."""

    time_bar_id: UUID
    activity_id: UUID
    activity_name: str
    theme_color: str
    planned_time: float
    actual_time: float
    completion_ratio: float
    display_width: float
    actual_display_width: float
    session_count: int = 0

    @property
    def time_difference(self) -> float:
        return self.actual_time - self.planned_time


@dataclass(frozen=True)
class DailyStatistics:
    """Aggregated view of a plan against the sessions of one day.

    ``day`` is None for all-time aggregation.
    """

    plan_id: UUID
    plan_name: str
    day: date | None
    rows: list[TimeBarStatistics] = field(default_factory=list)
    total_sessions: int = 0
    average_session_duration: float = 0.0

    @property
    def total_planned_time(self) -> float:
        return sum(row.planned_time for row in self.rows)

    @property
    def total_actual_time(self) -> float:
        return sum(row.actual_time for row in self.rows)

    @property
    def efficiency(self) -> float:
        planned = self.total_planned_time
        if planned <= 0:
            return 0.0
        return self.total_actual_time / planned
