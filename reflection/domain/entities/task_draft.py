"""Domain entity: the unfinished task form, kept between launches."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID


@dataclass(frozen=True)
class TaskDraft:
    """What the user typed before starting a session.

    ``expected_time`` is the raw text from the form (``"30"``, ``"1:15"``);
    ``parse_time_interval`` turns it into seconds.
    """

    plan_id: UUID | None
    task_description: str = ""
    expected_time: str = ""
    goals: tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        object.__setattr__(self, "goals", tuple(self.goals))
