"""Domain entities for recorded focus sessions and their per-day containers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

DEFAULT_EXPECTED_TIME = 1800.0


def start_of_day(moment: datetime) -> datetime:
    """Truncate a datetime to midnight, keeping its timezone."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


@dataclass(frozen=True)
class Session:
    """One finished focus interval against an activity.

    ``duration`` and ``expected_time`` are in seconds. ``goals`` are what the
    user set out to do; ``actual_completion``, ``reflection`` and
    ``follow_up`` are written when the session ends.
    """

    activity_id: UUID
    start_time: datetime
    duration: float = 0.0
    task_description: str = ""
    goals: tuple[str, ...] = ()
    expected_time: float = DEFAULT_EXPECTED_TIME
    actual_completion: str = ""
    reflection: str = ""
    follow_up: str = ""
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError("duration must be >= 0")
        if self.expected_time < 0:
            raise ValueError("expected_time must be >= 0")
        object.__setattr__(self, "goals", tuple(self.goals))


@dataclass
class DaySession:
    """All sessions recorded on one calendar day.

    ``created_at`` is the day's midnight; at most one DaySession exists per day.
    """

    created_at: datetime
    sessions: list[Session] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    @property
    def day(self) -> date:
        return self.created_at.date()

    @property
    def total_duration(self) -> float:
        return sum(session.duration for session in self.sessions)
