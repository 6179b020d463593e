"""Drag-to-reorder: maps a continuous drag offset onto list positions.

Pure computation with no store access. The only side effect a gesture can
have is the ``ReorderMove`` returned by ``DragReorder.end()``, which the
caller hands to ``PlanEditor.move_time_bar``.
"""

import math
from dataclasses import dataclass
from enum import Enum


def compute_target_index(
    origin_index: int,
    total_items: int,
    drag_displacement: float,
    item_extent: float,
) -> int:
    """Index the dragged row would land on for the given displacement.

    Inside the dead zone of half a row the row stays put. Beyond it the row
    advances one slot per ``item_extent``, snapping to the nearest slot; an
    offset of exactly one and a half rows resolves toward the origin when
    moving down and away from it when moving up. The result is clamped to
    the list bounds.
    """
    if item_extent <= 0:
        raise ValueError("item_extent must be positive")
    if total_items <= 0:
        raise ValueError("total_items must be positive")
    if not 0 <= origin_index < total_items:
        raise ValueError(f"origin_index {origin_index} out of range for {total_items} items")

    threshold = item_extent / 2
    if drag_displacement > threshold or drag_displacement < -threshold:
        raw_index = origin_index + math.ceil((drag_displacement - threshold) / item_extent)
    else:
        raw_index = origin_index

    return max(0, min(total_items - 1, raw_index))


def compute_shift(index: int, origin_index: int, target_index: int, item_extent: float) -> float:
    """Visual offset for a non-dragged row while the dragged row hovers at target_index."""
    if index == origin_index:
        return 0.0
    if origin_index < target_index and origin_index < index <= target_index:
        return -item_extent
    if origin_index > target_index and target_index <= index < origin_index:
        return item_extent
    return 0.0


def compute_shifts(origin_index: int, target_index: int, total_items: int, item_extent: float) -> list[float]:
    return [
        compute_shift(i, origin_index, target_index, item_extent)
        for i in range(total_items)
    ]


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"


@dataclass(frozen=True)
class ReorderMove:
    from_index: int
    to_index: int


class DragReorder:
    """Tracks one drag gesture at a time.

    ``begin`` → any number of ``update`` calls → ``end`` (or ``reset`` to
    abandon the gesture without moving anything).
    """

    def __init__(self, item_extent: float, commit_distance: float = 20.0):
        if item_extent <= 0:
            raise ValueError("item_extent must be positive")
        self.item_extent = item_extent
        self.commit_distance = commit_distance
        self.reset()

    def reset(self) -> None:
        self.state = DragState.IDLE
        self.origin_index: int | None = None
        self.total_items = 0
        self.displacement = 0.0
        self.target_index: int | None = None

    def begin(self, origin_index: int, total_items: int) -> None:
        if self.state is DragState.DRAGGING:
            raise RuntimeError("A drag is already in progress")
        if total_items <= 0 or not 0 <= origin_index < total_items:
            raise ValueError(f"origin_index {origin_index} out of range for {total_items} items")
        self.state = DragState.DRAGGING
        self.origin_index = origin_index
        self.total_items = total_items
        self.displacement = 0.0
        self.target_index = origin_index

    def update(self, displacement: float) -> int | None:
        """Record the latest displacement; returns the live target index.

        Samples that arrive when no drag is active are ignored.
        """
        if self.state is not DragState.DRAGGING:
            return None
        self.displacement = displacement
        self.target_index = compute_target_index(
            self.origin_index, self.total_items, displacement, self.item_extent
        )
        return self.target_index

    def shifts(self) -> list[float]:
        if self.state is not DragState.DRAGGING:
            return [0.0] * self.total_items
        return compute_shifts(self.origin_index, self.target_index, self.total_items, self.item_extent)

    def end(self) -> ReorderMove | None:
        """Finish the gesture; returns the move to apply, or None to discard it."""
        if self.state is not DragState.DRAGGING:
            return None
        self.state = DragState.COMMITTING
        move = None
        if abs(self.displacement) > self.commit_distance and self.target_index != self.origin_index:
            move = ReorderMove(self.origin_index, self.target_index)
        self.reset()
        return move
