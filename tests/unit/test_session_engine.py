"""Unit tests for SessionEngine.

Most tests drive time with ``engine.tick()`` directly; one lets the real
asyncio tick task run for a few short intervals.
"""

import asyncio
from uuid import uuid4

import pytest

from reflection.application.services import (
    ChangeEvent,
    ChangeNotifier,
    EntityStore,
    SessionEngine,
    SessionState,
)
from reflection.domain.entities import Activity
from reflection.infrastructure.storage import InMemoryBlobStore


def _live_tickers():
    return [
        task for task in asyncio.all_tasks()
        if task.get_coro().__qualname__ == "SessionEngine._run_ticker"
    ]


async def _engine(clock, tick_seconds=1.0):
    notifier = ChangeNotifier()
    store = await EntityStore.open(InMemoryBlobStore(), notifier, clock=clock)
    activity = await store.add_activity(Activity(name="Write"))
    engine = SessionEngine(store, notifier, tick_seconds=tick_seconds)
    return store, engine, activity


@pytest.mark.asyncio
async def test_start_tick_end_records_session(clock):
    store, engine, activity = await _engine(clock)

    await engine.start_session(activity.id, "  draft chapter ")
    assert engine.state is SessionState.ACTIVE
    assert engine.is_ticking
    for _ in range(3):
        engine.tick()

    record = await engine.end_current_session()

    assert engine.state is SessionState.NO_SESSION
    assert not engine.is_ticking
    assert record.duration == 3.0
    assert record.start_time == clock()
    assert record.task_description == "draft chapter"
    assert [s.id for s in store.todays_sessions()] == [record.id]


@pytest.mark.asyncio
async def test_pause_stops_accrual_and_resume_continues(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)
    engine.tick()

    assert await engine.pause_session() is True
    assert not engine.is_ticking
    engine.tick()
    assert engine.elapsed_time == 1.0

    assert await engine.resume_session() is True
    engine.tick()
    record = await engine.end_current_session()
    assert record.duration == 2.0


@pytest.mark.asyncio
async def test_invalid_transitions_are_noops(clock):
    store, engine, activity = await _engine(clock)

    assert await engine.pause_session() is False
    assert await engine.resume_session() is False
    assert await engine.end_current_session() is None
    assert await engine.discard_session() is False

    await engine.start_session(activity.id)
    assert await engine.resume_session() is False
    await engine.shutdown()


@pytest.mark.asyncio
async def test_starting_while_active_ends_previous_session(clock):
    store, engine, activity = await _engine(clock)
    other = await store.add_activity(Activity(name="Read"))

    await engine.start_session(activity.id)
    engine.tick()
    await engine.start_session(other.id)

    assert engine.current.activity_id == other.id
    assert engine.elapsed_time == 0.0
    [recorded] = store.todays_sessions()
    assert recorded.activity_id == activity.id
    await engine.shutdown()


@pytest.mark.asyncio
async def test_discard_leaves_no_record(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)
    engine.tick()

    assert await engine.discard_session() is True

    assert engine.state is SessionState.NO_SESSION
    assert store.todays_sessions() == []


@pytest.mark.asyncio
async def test_paused_session_can_be_ended(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)
    engine.tick()
    await engine.pause_session()

    record = await engine.end_current_session()

    assert record.duration == 1.0


@pytest.mark.asyncio
async def test_state_changes_are_announced(clock):
    store, engine, activity = await _engine(clock)
    events = []
    store.notifier.subscribe(lambda event, data: events.append((event, data)))

    await engine.start_session(activity.id)
    await engine.pause_session()
    await engine.end_current_session()

    states = [data["state"] for event, data in events if event is ChangeEvent.SESSION_STATE_CHANGED]
    assert states == ["active", "paused", "no_session"]
    assert ChangeEvent.SESSIONS_CHANGED in [event for event, _ in events]


@pytest.mark.asyncio
async def test_tick_task_accrues_and_stops(clock):
    store, engine, activity = await _engine(clock, tick_seconds=0.01)

    await engine.start_session(activity.id)
    await asyncio.sleep(0.1)
    await engine.pause_session()
    paused_at = engine.elapsed_time
    await asyncio.sleep(0.05)

    assert paused_at > 0
    assert engine.elapsed_time == paused_at


@pytest.mark.asyncio
async def test_shutdown_cancels_tick_without_recording(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)

    await engine.shutdown()

    assert not engine.is_ticking
    assert store.todays_sessions() == []


@pytest.mark.asyncio
async def test_unknown_activity_still_records(clock):
    store, engine, _ = await _engine(clock)
    ghost = uuid4()

    await engine.start_session(ghost)
    record = await engine.end_current_session()

    assert record.activity_id == ghost


@pytest.mark.asyncio
async def test_goals_and_review_are_recorded(clock):
    store, engine, activity = await _engine(clock)

    running = await engine.start_session(
        activity.id, "chapter two", goals=["outline", "  ", " first draft "], expected_time=2700
    )
    assert running.goals == ("outline", "first draft")
    engine.tick()
    record = await engine.end_current_session(
        actual_completion="outline done",
        reflection="too many tabs open",
        follow_up=" draft tomorrow ",
    )

    [stored] = store.todays_sessions()
    assert stored == record
    assert stored.goals == ("outline", "first draft")
    assert stored.expected_time == 2700
    assert stored.actual_completion == "outline done"
    assert stored.reflection == "too many tabs open"
    assert stored.follow_up == "draft tomorrow"


@pytest.mark.asyncio
async def test_negative_expected_time_is_rejected(clock):
    store, engine, activity = await _engine(clock)

    with pytest.raises(ValueError):
        await engine.start_session(activity.id, expected_time=-1)

    assert engine.state is SessionState.NO_SESSION


# ── Overlapping transitions ──────────────────────────────────────────


@pytest.mark.asyncio
async def test_concurrent_pause_and_end_leave_no_session(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)
    engine.tick()

    paused, record = await asyncio.gather(engine.pause_session(), engine.end_current_session())

    assert paused is True
    assert record.duration == 1.0
    assert engine.state is SessionState.NO_SESSION
    assert engine.current is None
    assert not engine.is_ticking
    assert await engine.resume_session() is False
    assert not engine.is_ticking


@pytest.mark.asyncio
async def test_concurrent_ends_record_once(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)
    engine.tick()

    results = await asyncio.gather(
        engine.end_current_session(), engine.end_current_session(), return_exceptions=True
    )

    assert not any(isinstance(r, Exception) for r in results)
    assert [r is None for r in results] == [False, True]
    assert len(store.todays_sessions()) == 1
    assert not engine.is_ticking


@pytest.mark.asyncio
async def test_concurrent_end_and_discard_settle(clock):
    store, engine, activity = await _engine(clock)
    await engine.start_session(activity.id)

    record, discarded = await asyncio.gather(engine.end_current_session(), engine.discard_session())

    assert record is not None
    assert discarded is False
    assert engine.state is SessionState.NO_SESSION
    assert not engine.is_ticking


@pytest.mark.asyncio
async def test_concurrent_starts_keep_one_tick(clock):
    store, engine, activity = await _engine(clock)
    other = await store.add_activity(Activity(name="Read"))
    await engine.start_session(activity.id)

    await asyncio.gather(engine.start_session(activity.id), engine.start_session(other.id))

    assert engine.state is SessionState.ACTIVE
    assert engine.current.activity_id in {activity.id, other.id}
    assert len(store.todays_sessions()) == 2
    assert len(_live_tickers()) == 1

    await engine.end_current_session()
    assert _live_tickers() == []
