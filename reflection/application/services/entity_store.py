"""Entity store: owns every collection and the current-plan pointer.

All reads hand out copies and all writes copy their argument in, so callers
hold values, never live references into the store. Every mutation is written
through to the blob store before the call returns. A failed write is logged
and counted but never rolls back the in-memory change.
"""

import logging
from collections.abc import Callable, Iterable
from copy import deepcopy
from datetime import date, datetime
from typing import Any
from uuid import UUID

from reflection.application.interfaces import BlobStore
from reflection.application.services.change_notifier import ChangeEvent, ChangeNotifier
from reflection.domain.entities import (
    DEFAULT_EXPECTED_TIME,
    Activity,
    DaySession,
    Plan,
    Session,
    TaskDraft,
    start_of_day,
)
from reflection.domain.exceptions import (
    DecodeError,
    DuplicateEntityError,
    EntityNotFoundError,
    PersistenceError,
)
from reflection.infrastructure.codec import (
    ACTIVITIES_KEY,
    CURRENT_PLAN_ID_KEY,
    DAY_SESSIONS_KEY,
    PLANS_KEY,
    TASK_DRAFT_KEY,
    decode_activities,
    decode_current_plan_id,
    decode_day_sessions,
    decode_plans,
    decode_task_draft,
    encode_activities,
    encode_current_plan_id,
    encode_day_sessions,
    encode_plans,
    encode_task_draft,
)
from reflection.infrastructure.logging.colored_logger import StoreLogger, StoreStage

logger = logging.getLogger(__name__)
slog = StoreLogger("EntityStore")

DELETED_ACTIVITY_NAME = "Deleted activity"


def _now_local() -> datetime:
    return datetime.now().astimezone()


class EntityStore:
    """Activities, plans, day sessions and the current-plan pointer.

    Build one with ``await EntityStore.open(blob_store)`` so persisted state is
    loaded and the current-plan pointer is valid before first use.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        notifier: ChangeNotifier | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
        default_plan_name: str = "Default Plan",
        default_theme_color: str = "#00CE4A",
    ):
        self._blob_store = blob_store
        self._notifier = notifier or ChangeNotifier()
        self._clock = clock or _now_local
        self._default_plan_name = default_plan_name
        self._default_theme_color = default_theme_color

        self._activities: dict[UUID, Activity] = {}
        self._plans: dict[UUID, Plan] = {}
        self._day_sessions: dict[date, DaySession] = {}
        self._current_plan_id: UUID | None = None
        self._task_draft: TaskDraft | None = None

        self.failed_flushes = 0
        self.last_persistence_error: PersistenceError | None = None

    @classmethod
    async def open(cls, blob_store: BlobStore, notifier: ChangeNotifier | None = None, **kwargs: Any) -> "EntityStore":
        store = cls(blob_store, notifier, **kwargs)
        await store.load()
        return store

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def default_theme_color(self) -> str:
        return self._default_theme_color

    def now(self) -> datetime:
        return self._clock()

    # ── Loading ─────────────────────────────────────────────────────

    async def load(self) -> None:
        """Read every collection, falling back to empty on missing or bad data."""
        with slog.timed_step(StoreStage.LOAD, "Loading collections"):
            activities = await self._load_key(ACTIVITIES_KEY, decode_activities, [])
            plans = await self._load_key(PLANS_KEY, decode_plans, [])
            day_sessions = await self._load_key(DAY_SESSIONS_KEY, decode_day_sessions, [])
            current_id = await self._load_key(CURRENT_PLAN_ID_KEY, decode_current_plan_id, None)
            self._task_draft = await self._load_key(TASK_DRAFT_KEY, decode_task_draft, None)

        self._activities = {}
        seen_names: set[str] = set()
        for activity in activities:
            if activity.name in seen_names or activity.id in self._activities:
                logger.warning("Dropping duplicate activity '%s' on load", activity.name)
                continue
            seen_names.add(activity.name)
            self._activities[activity.id] = activity

        self._plans = {plan.id: plan for plan in plans}

        self._day_sessions = {}
        for day_session in day_sessions:
            day_session.created_at = start_of_day(day_session.created_at)
            existing = self._day_sessions.get(day_session.day)
            if existing is None:
                self._day_sessions[day_session.day] = day_session
            else:
                logger.warning("Merging duplicate day session for %s", day_session.day)
                existing.sessions.extend(day_session.sessions)

        self._current_plan_id = current_id
        slog.step(
            StoreStage.LOAD,
            "Collections ready",
            activities=len(self._activities),
            plans=len(self._plans),
            days=len(self._day_sessions),
        )
        await self._repair_current_plan()

    async def _load_key(self, key: str, decode: Callable[[bytes], Any], default: Any) -> Any:
        try:
            data = await self._blob_store.load(key)
        except PersistenceError as exc:
            slog.error(StoreStage.LOAD, f"Could not read '{key}', starting empty", error=exc)
            return default
        if data is None:
            return default
        try:
            return decode(data)
        except DecodeError as exc:
            slog.warning(StoreStage.LOAD, f"Discarding unreadable '{key}'", reason=exc.message)
            return default

    # ── Write-through ───────────────────────────────────────────────

    async def _flush(self, key: str, data: bytes) -> bool:
        try:
            await self._blob_store.save(key, data)
        except (PersistenceError, OSError) as exc:
            self.failed_flushes += 1
            self.last_persistence_error = (
                exc if isinstance(exc, PersistenceError) else PersistenceError(key, exc)
            )
            slog.error(StoreStage.FLUSH, f"Write of '{key}' failed, keeping in-memory state", error=exc)
            return False
        slog.debug(StoreStage.FLUSH, f"Saved '{key}'", size=len(data))
        return True

    async def _save_activities(self) -> None:
        await self._flush(ACTIVITIES_KEY, encode_activities(list(self._activities.values())))

    async def _save_plans(self) -> None:
        await self._flush(PLANS_KEY, encode_plans(list(self._plans.values())))

    async def _save_day_sessions(self) -> None:
        ordered = sorted(self._day_sessions.values(), key=lambda d: d.created_at)
        await self._flush(DAY_SESSIONS_KEY, encode_day_sessions(ordered))

    async def _save_current_plan_id(self) -> None:
        await self._flush(CURRENT_PLAN_ID_KEY, encode_current_plan_id(self._current_plan_id))

    def _notify(self, event: ChangeEvent, **data: Any) -> None:
        self._notifier.notify(event, data)

    # ── Activities ──────────────────────────────────────────────────

    def list_activities(self) -> list[Activity]:
        return [deepcopy(a) for a in self._activities.values()]

    def get_activity(self, activity_id: UUID) -> Activity | None:
        activity = self._activities.get(activity_id)
        return deepcopy(activity) if activity else None

    def get_activity_by_name(self, name: str) -> Activity | None:
        for activity in self._activities.values():
            if activity.name == name:
                return deepcopy(activity)
        return None

    def resolve_activity(self, activity_id: UUID) -> Activity:
        """Return the activity, or a placeholder when it has been deleted."""
        activity = self._activities.get(activity_id)
        if activity is None:
            return Activity(
                id=activity_id,
                name=DELETED_ACTIVITY_NAME,
                theme_color=self._default_theme_color,
            )
        return deepcopy(activity)

    async def add_activity(self, activity: Activity) -> Activity:
        """Insert an activity. Raises DuplicateEntityError if the name is taken."""
        if self.get_activity_by_name(activity.name) is not None:
            raise DuplicateEntityError("Activity", "name", activity.name)
        if activity.id in self._activities:
            raise DuplicateEntityError("Activity", "id", str(activity.id))

        self._activities[activity.id] = deepcopy(activity)
        await self._save_activities()
        self._notify(ChangeEvent.ACTIVITIES_CHANGED, activity_id=activity.id)
        return deepcopy(activity)

    async def update_activity(self, activity: Activity) -> bool:
        """Replace an activity by id. Returns False when the id is unknown."""
        if activity.id not in self._activities:
            return False
        clash = self.get_activity_by_name(activity.name)
        if clash is not None and clash.id != activity.id:
            raise DuplicateEntityError("Activity", "name", activity.name)

        self._activities[activity.id] = deepcopy(activity)
        await self._save_activities()
        self._notify(ChangeEvent.ACTIVITIES_CHANGED, activity_id=activity.id)
        return True

    async def delete_activity(self, activity_id: UUID) -> bool:
        """Remove an activity. Time bars and sessions that reference it are kept."""
        if self._activities.pop(activity_id, None) is None:
            return False
        await self._save_activities()
        self._notify(ChangeEvent.ACTIVITIES_CHANGED, activity_id=activity_id)
        return True

    # ── Plans ───────────────────────────────────────────────────────

    def list_plans(self) -> list[Plan]:
        return [deepcopy(p) for p in self._plans.values()]

    def get_plan(self, plan_id: UUID) -> Plan | None:
        plan = self._plans.get(plan_id)
        return deepcopy(plan) if plan else None

    def require_plan(self, plan_id: UUID) -> Plan:
        plan = self.get_plan(plan_id)
        if plan is None:
            raise EntityNotFoundError("Plan", plan_id)
        return plan

    @property
    def current_plan_id(self) -> UUID | None:
        return self._current_plan_id

    @property
    def current_plan(self) -> Plan | None:
        if self._current_plan_id is None:
            return None
        return self.get_plan(self._current_plan_id)

    def is_current(self, plan_id: UUID) -> bool:
        return self._current_plan_id == plan_id

    async def add_plan(self, plan: Plan) -> bool:
        """Append a plan. A plan whose id is already stored is left untouched."""
        if plan.id in self._plans:
            logger.debug("Plan %s already stored, ignoring add", plan.id)
            return False

        self._plans[plan.id] = deepcopy(plan)
        await self._save_plans()
        self._notify(ChangeEvent.PLANS_CHANGED, plan_id=plan.id)
        if self._current_plan_id is None:
            await self._select_current(plan.id)
        return True

    async def update_plan(self, plan: Plan) -> bool:
        """Replace a plan by id. Returns False when the id is unknown."""
        if plan.id not in self._plans:
            return False

        self._plans[plan.id] = deepcopy(plan)
        await self._save_plans()
        self._notify(ChangeEvent.PLANS_CHANGED, plan_id=plan.id)
        if self.is_current(plan.id):
            self._notify(ChangeEvent.CURRENT_PLAN_CHANGED, plan_id=plan.id)
        return True

    async def delete_plan(self, plan_id: UUID) -> bool:
        """Remove a plan; deleting the current plan repairs the pointer first."""
        if self._plans.pop(plan_id, None) is None:
            return False

        await self._save_plans()
        self._notify(ChangeEvent.PLANS_CHANGED, plan_id=plan_id)
        if self.is_current(plan_id):
            self._current_plan_id = None
            await self._repair_current_plan()
        return True

    async def set_current_plan(self, plan: Plan) -> None:
        """Make ``plan`` current, inserting it first if the store lacks it."""
        if plan.id not in self._plans:
            self._plans[plan.id] = deepcopy(plan)
            await self._save_plans()
            self._notify(ChangeEvent.PLANS_CHANGED, plan_id=plan.id)
        await self._select_current(plan.id)

    async def _select_current(self, plan_id: UUID) -> None:
        self._current_plan_id = plan_id
        await self._save_current_plan_id()
        self._notify(ChangeEvent.CURRENT_PLAN_CHANGED, plan_id=plan_id)

    async def _repair_current_plan(self) -> bool:
        """Point at a stored plan: keep a valid pointer, else the newest plan, else a new default."""
        if self._current_plan_id is not None and self._current_plan_id in self._plans:
            return False

        if self._plans:
            latest = max(self._plans.values(), key=lambda p: p.created_at)
            slog.step(StoreStage.REPAIR, "Current plan reset to latest plan", plan=latest.name)
            await self._select_current(latest.id)
            return True

        now = self.now()
        default_plan = Plan(name=self._default_plan_name, created_at=now, updated_at=now)
        self._plans[default_plan.id] = default_plan
        slog.step(StoreStage.REPAIR, "No plans stored, created default plan", plan=default_plan.name)
        await self._save_plans()
        self._notify(ChangeEvent.PLANS_CHANGED, plan_id=default_plan.id)
        await self._select_current(default_plan.id)
        return True

    # ── Day sessions ────────────────────────────────────────────────

    def today(self) -> date:
        return self.now().date()

    def list_day_sessions(self) -> list[DaySession]:
        ordered = sorted(self._day_sessions.values(), key=lambda d: d.created_at)
        return [deepcopy(d) for d in ordered]

    def get_day_session(self, day: date) -> DaySession | None:
        day_session = self._day_sessions.get(day)
        return deepcopy(day_session) if day_session else None

    async def get_today_day_session(self) -> DaySession:
        """Return today's DaySession, creating an empty one on first use."""
        return deepcopy(await self._ensure_today())

    async def _ensure_today(self) -> DaySession:
        midnight = start_of_day(self.now())
        day_session = self._day_sessions.get(midnight.date())
        if day_session is None:
            day_session = DaySession(created_at=midnight)
            self._day_sessions[midnight.date()] = day_session
            await self._save_day_sessions()
        return day_session

    async def add_session_to_today(
        self,
        activity_id: UUID,
        start_time: datetime,
        duration: float,
        task_description: str = "",
        *,
        goals: Iterable[str] = (),
        expected_time: float = DEFAULT_EXPECTED_TIME,
        actual_completion: str = "",
        reflection: str = "",
        follow_up: str = "",
    ) -> Session:
        """Record a finished focus interval in today's DaySession."""
        session = Session(
            activity_id=activity_id,
            start_time=start_time,
            duration=duration,
            task_description=task_description,
            goals=tuple(goals),
            expected_time=expected_time,
            actual_completion=actual_completion,
            reflection=reflection,
            follow_up=follow_up,
        )
        day_session = await self._ensure_today()
        day_session.sessions.append(session)
        await self._save_day_sessions()
        self._notify(
            ChangeEvent.SESSIONS_CHANGED,
            day=day_session.day,
            session_id=session.id,
            activity_id=activity_id,
        )
        return deepcopy(session)

    async def add_day_session(self, day_session: DaySession) -> DaySession:
        """Insert a DaySession, merging into the existing one for the same day.

        ``created_at`` is truncated to midnight.
        """
        existing = self._day_sessions.get(day_session.day)
        if existing is None:
            existing = deepcopy(day_session)
            existing.created_at = start_of_day(existing.created_at)
            self._day_sessions[existing.day] = existing
        else:
            known = {s.id for s in existing.sessions}
            existing.sessions.extend(
                deepcopy(s) for s in day_session.sessions if s.id not in known
            )
        await self._save_day_sessions()
        self._notify(ChangeEvent.SESSIONS_CHANGED, day=existing.day)
        return deepcopy(existing)

    async def update_day_session(self, day_session: DaySession) -> bool:
        """Replace a DaySession by id, truncating ``created_at`` to midnight.

        Returns False when the id is unknown.
        """
        for day, stored in self._day_sessions.items():
            if stored.id == day_session.id:
                break
        else:
            return False

        if day_session.day != day and day_session.day in self._day_sessions:
            raise DuplicateEntityError("DaySession", "created_at", day_session.day.isoformat())

        replacement = deepcopy(day_session)
        replacement.created_at = start_of_day(replacement.created_at)
        del self._day_sessions[day]
        self._day_sessions[replacement.day] = replacement
        await self._save_day_sessions()
        self._notify(ChangeEvent.SESSIONS_CHANGED, day=day_session.day)
        return True

    def sessions_for_day(self, day: date) -> list[Session]:
        day_session = self._day_sessions.get(day)
        return deepcopy(day_session.sessions) if day_session else []

    def todays_sessions(self) -> list[Session]:
        return self.sessions_for_day(self.today())

    def sessions_for_activity(self, activity_id: UUID) -> list[Session]:
        return [
            deepcopy(s)
            for d in sorted(self._day_sessions.values(), key=lambda d: d.created_at)
            for s in d.sessions
            if s.activity_id == activity_id
        ]

    def total_time_for_activity(self, activity_id: UUID, day: date | None = None) -> float:
        if day is not None:
            sessions = self.sessions_for_day(day)
        else:
            sessions = [s for d in self._day_sessions.values() for s in d.sessions]
        return sum(s.duration for s in sessions if s.activity_id == activity_id)

    # ── Task draft ──────────────────────────────────────────────────

    @property
    def task_draft(self) -> TaskDraft | None:
        return self._task_draft

    def has_task_draft(self) -> bool:
        return self._task_draft is not None

    async def save_task_draft(
        self,
        plan_id: UUID | None,
        task_description: str,
        expected_time: str,
        goals: Iterable[str] = (),
    ) -> TaskDraft:
        """Replace the stored draft; the timestamp comes from the store clock."""
        self._task_draft = TaskDraft(
            plan_id=plan_id,
            task_description=task_description,
            expected_time=expected_time,
            goals=tuple(goals),
            timestamp=self.now(),
        )
        await self._flush(TASK_DRAFT_KEY, encode_task_draft(self._task_draft))
        return self._task_draft

    async def clear_task_draft(self) -> bool:
        if self._task_draft is None:
            return False
        self._task_draft = None
        try:
            await self._blob_store.delete(TASK_DRAFT_KEY)
        except PersistenceError as exc:
            self.failed_flushes += 1
            self.last_persistence_error = exc
            slog.error(StoreStage.FLUSH, f"Delete of '{TASK_DRAFT_KEY}' failed", error=exc)
        return True

    # ── Maintenance ─────────────────────────────────────────────────

    async def clear_all_data(self) -> None:
        """Empty every collection and start over with a fresh default plan.

        The task draft is not a collection and survives.
        """
        self._activities.clear()
        self._plans.clear()
        self._day_sessions.clear()
        self._current_plan_id = None

        await self._save_activities()
        await self._save_plans()
        await self._save_day_sessions()
        await self._save_current_plan_id()

        self._notify(ChangeEvent.ACTIVITIES_CHANGED)
        self._notify(ChangeEvent.SESSIONS_CHANGED)
        await self._repair_current_plan()
