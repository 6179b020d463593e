"""Domain entities for plans and their time bars."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass
class TimeBar:
    """One planned time allocation inside a plan, bound to an activity."""

    activity_id: UUID
    planned_time: float  # seconds
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.planned_time < 0:
            raise ValueError("planned_time must be >= 0")


@dataclass
class Plan:
    """A named, ordered sequence of time bars.

    The order of ``time_bars`` is the display order. Plans own their bars by
    value; a bar never appears in two plans.
    """

    name: str
    time_bars: list[TimeBar] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Plan name must not be empty")

    def touch(self, now: datetime | None = None) -> None:
        """Refresh the updated_at timestamp."""
        self.updated_at = now or datetime.now(timezone.utc)

    def index_of(self, time_bar_id: UUID) -> int | None:
        for index, bar in enumerate(self.time_bars):
            if bar.id == time_bar_id:
                return index
        return None

    @property
    def total_planned_time(self) -> float:
        return sum(bar.planned_time for bar in self.time_bars)
