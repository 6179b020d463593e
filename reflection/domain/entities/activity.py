"""Domain entity: a named category of focused work."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass
class Activity:
    """Core domain entity for an activity.

    Names are unique across the store (case-sensitive). The theme color is an
    opaque string owned by the presentation layer, usually a ``#RRGGBB`` hex.
    """

    name: str
    theme_color: str = "#00CE4A"
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Activity name must not be empty")
