"""Read-only projections of store state for the presentation layer."""

from datetime import date

from reflection.application.schemas import (
    ActivityResponse,
    DailyStatisticsResponse,
    DaySessionResponse,
    PlanResponse,
    SessionResponse,
    TaskDraftResponse,
)
from reflection.application.services.entity_store import EntityStore
from reflection.domain.entities import DailyStatistics, Plan


def _plan_response(store: EntityStore, plan: Plan) -> PlanResponse:
    response = PlanResponse.model_validate(plan)
    return response.model_copy(update={"is_current": store.is_current(plan.id)})


def activities_view(store: EntityStore) -> list[ActivityResponse]:
    return [ActivityResponse.model_validate(a) for a in store.list_activities()]


def plans_view(store: EntityStore) -> list[PlanResponse]:
    return [_plan_response(store, p) for p in store.list_plans()]


def current_plan_view(store: EntityStore) -> PlanResponse | None:
    plan = store.current_plan
    return _plan_response(store, plan) if plan else None


def sessions_view(store: EntityStore, day: date | None = None) -> list[SessionResponse]:
    """Sessions of ``day``, today by default."""
    sessions = store.sessions_for_day(day or store.today())
    return [SessionResponse.model_validate(s) for s in sessions]


def day_sessions_view(store: EntityStore) -> list[DaySessionResponse]:
    return [DaySessionResponse.model_validate(d) for d in store.list_day_sessions()]


def statistics_view(stats: DailyStatistics | None) -> DailyStatisticsResponse | None:
    if stats is None:
        return None
    return DailyStatisticsResponse.model_validate(stats)


def task_draft_view(store: EntityStore) -> TaskDraftResponse | None:
    draft = store.task_draft
    return TaskDraftResponse.model_validate(draft) if draft else None
