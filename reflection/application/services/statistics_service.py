"""Statistics aggregator: planned vs. actual time per time bar of a plan."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

from reflection.application.services.change_notifier import ChangeEvent, ChangeNotifier
from reflection.application.services.entity_store import EntityStore
from reflection.domain.entities import DailyStatistics, Plan, Session, TimeBarStatistics

logger = logging.getLogger(__name__)

_RECOMPUTE_EVENTS = frozenset({
    ChangeEvent.SESSIONS_CHANGED,
    ChangeEvent.PLANS_CHANGED,
    ChangeEvent.CURRENT_PLAN_CHANGED,
    ChangeEvent.ACTIVITIES_CHANGED,
})


@dataclass(frozen=True)
class WidthScale:
    """Log-compressed bar width parameters, as fractions of the container."""

    base_fraction: float = 0.3
    max_fraction: float = 0.95
    min_fraction: float = 0.15
    reference_hours: float = 3.0


def completion_ratio(actual_time: float, planned_time: float) -> float:
    """actual / planned, 0 when nothing is planned. Not clamped: 1.5 means 150%."""
    if planned_time > 0:
        return actual_time / planned_time
    return 0.0


def display_width(hours: float, container_width: float, scale: WidthScale = WidthScale()) -> float:
    """Bar width for a duration in hours.

    ``base + (max - base) * log(1 + h) / log(1 + reference_hours)``, clamped to
    ``[min, max]``. Short durations stay distinguishable while long ones grow
    only logarithmically.
    """
    base = container_width * scale.base_fraction
    upper = container_width * scale.max_fraction
    lower = container_width * scale.min_fraction
    hours = max(0.0, hours)
    width = base + (upper - base) * math.log1p(hours) / math.log1p(scale.reference_hours)
    return max(lower, min(upper, width))


class StatisticsAggregator:
    """Computes plan statistics from the store and keeps today's view fresh.

    Subscribes to the change notifier; every relevant change recomputes
    ``latest`` synchronously for the current plan and today.
    """

    def __init__(
        self,
        store: EntityStore,
        notifier: ChangeNotifier | None = None,
        *,
        scale: WidthScale | None = None,
        container_width: float = 1.0,
    ):
        self._store = store
        self._scale = scale or WidthScale()
        self._container_width = container_width
        self._latest: DailyStatistics | None = None
        self._unsubscribe = (notifier or store.notifier).subscribe(self._on_change)

    @property
    def latest(self) -> DailyStatistics | None:
        if self._latest is None:
            self.refresh()
        return self._latest

    def refresh(self) -> DailyStatistics | None:
        self._latest = self.compute_day()
        return self._latest

    def close(self) -> None:
        self._unsubscribe()

    def compute_day(
        self,
        day: date | None = None,
        plan: Plan | None = None,
        container_width: float | None = None,
    ) -> DailyStatistics | None:
        """Statistics for ``plan`` (default: current) against sessions of ``day`` (default: today)."""
        plan = plan or self._store.current_plan
        if plan is None:
            return None
        day = day or self._store.today()
        return self._aggregate(plan, day, self._store.sessions_for_day(day), container_width)

    def compute_all_time(
        self,
        plan: Plan | None = None,
        container_width: float | None = None,
    ) -> DailyStatistics | None:
        """Same rows as compute_day, with actual time summed over every recorded day."""
        plan = plan or self._store.current_plan
        if plan is None:
            return None
        sessions = [s for d in self._store.list_day_sessions() for s in d.sessions]
        return self._aggregate(plan, None, sessions, container_width)

    def _aggregate(
        self,
        plan: Plan,
        day: date | None,
        sessions: Iterable[Session],
        container_width: float | None,
    ) -> DailyStatistics:
        width = self._container_width if container_width is None else container_width
        sessions = list(sessions)

        actual: dict[UUID, float] = {}
        counts: dict[UUID, int] = {}
        for session in sessions:
            actual[session.activity_id] = actual.get(session.activity_id, 0.0) + session.duration
            counts[session.activity_id] = counts.get(session.activity_id, 0) + 1

        rows = []
        for bar in plan.time_bars:
            activity = self._store.resolve_activity(bar.activity_id)
            actual_time = actual.get(bar.activity_id, 0.0)
            rows.append(
                TimeBarStatistics(
                    time_bar_id=bar.id,
                    activity_id=bar.activity_id,
                    activity_name=activity.name,
                    theme_color=activity.theme_color,
                    planned_time=bar.planned_time,
                    actual_time=actual_time,
                    completion_ratio=completion_ratio(actual_time, bar.planned_time),
                    display_width=display_width(bar.planned_time / 3600, width, self._scale),
                    actual_display_width=display_width(actual_time / 3600, width, self._scale),
                    session_count=counts.get(bar.activity_id, 0),
                )
            )

        total = sum(s.duration for s in sessions)
        return DailyStatistics(
            plan_id=plan.id,
            plan_name=plan.name,
            day=day,
            rows=rows,
            total_sessions=len(sessions),
            average_session_duration=total / len(sessions) if sessions else 0.0,
        )

    def _on_change(self, event: ChangeEvent, data: dict[str, Any]) -> None:
        if event in _RECOMPUTE_EVENTS:
            self.refresh()
            logger.debug("Statistics recomputed after %s", event.value)
