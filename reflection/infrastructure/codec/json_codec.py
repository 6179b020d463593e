"""JSON codec for persisted entity collections.

Each collection is stored as one JSON array under its own key. Field names are
camelCase, ids are canonical UUID strings, timestamps are ISO-8601 with an
offset and durations are float seconds::

    [{"id": "…", "name": "Write", "themeColor": "#00CE4A"}]

The task draft is a single JSON object and the current plan id a JSON string
or null.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from reflection.domain.entities import (
    DEFAULT_EXPECTED_TIME,
    Activity,
    DaySession,
    Plan,
    Session,
    TaskDraft,
    TimeBar,
)
from reflection.domain.exceptions import DecodeError

ACTIVITIES_KEY = "activities"
PLANS_KEY = "plans"
DAY_SESSIONS_KEY = "day_sessions"
CURRENT_PLAN_ID_KEY = "current_plan_id"
TASK_DRAFT_KEY = "task_draft"


# ── Records ─────────────────────────────────────────────────────────

class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityRecord(_Record):
    id: UUID
    name: str = Field(..., min_length=1)
    theme_color: str


class TimeBarRecord(_Record):
    id: UUID
    activity_id: UUID
    planned_time: float = Field(..., ge=0)


class PlanRecord(_Record):
    id: UUID
    name: str = Field(..., min_length=1)
    time_bars: list[TimeBarRecord] = []
    created_at: datetime
    updated_at: datetime


class SessionRecord(_Record):
    id: UUID
    activity_id: UUID
    start_time: datetime
    duration: float = Field(..., ge=0)
    task_description: str = ""
    goals: list[str] = []
    expected_time: float = Field(DEFAULT_EXPECTED_TIME, ge=0)
    actual_completion: str = ""
    reflection: str = ""
    follow_up: str = ""


class DaySessionRecord(_Record):
    id: UUID
    sessions: list[SessionRecord] = []
    created_at: datetime


class TaskDraftRecord(_Record):
    selected_plan_id: UUID | None = None
    task_description: str = ""
    expected_time: str = ""
    goals: list[str] = []
    timestamp: datetime


_activities_adapter = TypeAdapter(list[ActivityRecord])
_plans_adapter = TypeAdapter(list[PlanRecord])
_day_sessions_adapter = TypeAdapter(list[DaySessionRecord])
_current_plan_adapter = TypeAdapter(UUID | None)
_task_draft_adapter = TypeAdapter(TaskDraftRecord)


def _decode(adapter: TypeAdapter, key: str, data: bytes):
    if not data:
        raise DecodeError(key, "empty payload")
    try:
        return adapter.validate_json(data)
    except ValidationError as exc:
        raise DecodeError(key, f"{exc.error_count()} validation error(s)") from exc


def _build(key: str, factory, records: list) -> list:
    try:
        return [factory(r) for r in records]
    except ValueError as exc:
        raise DecodeError(key, str(exc)) from exc


# ── Activities ──────────────────────────────────────────────────────

def encode_activities(activities: list[Activity]) -> bytes:
    records = [
        ActivityRecord(id=a.id, name=a.name, theme_color=a.theme_color)
        for a in activities
    ]
    return _activities_adapter.dump_json(records, by_alias=True)


def decode_activities(data: bytes) -> list[Activity]:
    records = _decode(_activities_adapter, ACTIVITIES_KEY, data)
    return _build(
        ACTIVITIES_KEY,
        lambda r: Activity(id=r.id, name=r.name, theme_color=r.theme_color),
        records,
    )


# ── Plans ───────────────────────────────────────────────────────────

def _plan_to_record(plan: Plan) -> PlanRecord:
    return PlanRecord(
        id=plan.id,
        name=plan.name,
        time_bars=[
            TimeBarRecord(id=b.id, activity_id=b.activity_id, planned_time=b.planned_time)
            for b in plan.time_bars
        ],
        created_at=plan.created_at,
        updated_at=plan.updated_at,
    )


def _plan_to_entity(record: PlanRecord) -> Plan:
    return Plan(
        id=record.id,
        name=record.name,
        time_bars=[
            TimeBar(id=b.id, activity_id=b.activity_id, planned_time=b.planned_time)
            for b in record.time_bars
        ],
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def encode_plans(plans: list[Plan]) -> bytes:
    return _plans_adapter.dump_json([_plan_to_record(p) for p in plans], by_alias=True)


def decode_plans(data: bytes) -> list[Plan]:
    return _build(PLANS_KEY, _plan_to_entity, _decode(_plans_adapter, PLANS_KEY, data))


# ── Day sessions ────────────────────────────────────────────────────

def _day_session_to_record(day_session: DaySession) -> DaySessionRecord:
    return DaySessionRecord(
        id=day_session.id,
        created_at=day_session.created_at,
        sessions=[
            SessionRecord(
                id=s.id,
                activity_id=s.activity_id,
                start_time=s.start_time,
                duration=s.duration,
                task_description=s.task_description,
                goals=list(s.goals),
                expected_time=s.expected_time,
                actual_completion=s.actual_completion,
                reflection=s.reflection,
                follow_up=s.follow_up,
            )
            for s in day_session.sessions
        ],
    )


def _day_session_to_entity(record: DaySessionRecord) -> DaySession:
    return DaySession(
        id=record.id,
        created_at=record.created_at,
        sessions=[
            Session(
                id=s.id,
                activity_id=s.activity_id,
                start_time=s.start_time,
                duration=s.duration,
                task_description=s.task_description,
                goals=list(s.goals),
                expected_time=s.expected_time,
                actual_completion=s.actual_completion,
                reflection=s.reflection,
                follow_up=s.follow_up,
            )
            for s in record.sessions
        ],
    )


def encode_day_sessions(day_sessions: list[DaySession]) -> bytes:
    records = [_day_session_to_record(d) for d in day_sessions]
    return _day_sessions_adapter.dump_json(records, by_alias=True)


def decode_day_sessions(data: bytes) -> list[DaySession]:
    records = _decode(_day_sessions_adapter, DAY_SESSIONS_KEY, data)
    return _build(DAY_SESSIONS_KEY, _day_session_to_entity, records)


# ── Current plan pointer ────────────────────────────────────────────

def encode_current_plan_id(plan_id: UUID | None) -> bytes:
    return _current_plan_adapter.dump_json(plan_id)


def decode_current_plan_id(data: bytes) -> UUID | None:
    return _decode(_current_plan_adapter, CURRENT_PLAN_ID_KEY, data)


# ── Task draft ──────────────────────────────────────────────────────

def encode_task_draft(draft: TaskDraft) -> bytes:
    record = TaskDraftRecord(
        selected_plan_id=draft.plan_id,
        task_description=draft.task_description,
        expected_time=draft.expected_time,
        goals=list(draft.goals),
        timestamp=draft.timestamp,
    )
    return _task_draft_adapter.dump_json(record, by_alias=True)


def decode_task_draft(data: bytes) -> TaskDraft:
    record = _decode(_task_draft_adapter, TASK_DRAFT_KEY, data)
    return TaskDraft(
        plan_id=record.selected_plan_id,
        task_description=record.task_description,
        expected_time=record.expected_time,
        goals=record.goals,
        timestamp=record.timestamp,
    )
