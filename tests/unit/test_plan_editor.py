"""Unit tests for PlanEditor."""

from uuid import uuid4

import pytest

from reflection.application.services import DragReorder, EntityStore, PlanEditor
from reflection.domain.entities import TimeBar
from reflection.infrastructure.storage import InMemoryBlobStore


async def _editor_with_bars(clock, count=5):
    store = await EntityStore.open(InMemoryBlobStore(), clock=clock)
    editor = PlanEditor(store)
    plan_id = store.current_plan_id
    bars = [TimeBar(activity_id=uuid4(), planned_time=60 * (i + 1)) for i in range(count)]
    for bar in bars:
        await editor.add_time_bar(plan_id, bar)
    return store, editor, plan_id, bars


def _order(store, plan_id, bars):
    position = {bar.id: name for bar, name in zip(bars, "ABCDEFGH")}
    return [position[bar.id] for bar in store.get_plan(plan_id).time_bars]


@pytest.mark.asyncio
async def test_move_forward_reinserts_at_target(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock)

    assert await editor.move_time_bar(plan_id, 0, 3) is True

    assert _order(store, plan_id, bars) == ["B", "C", "D", "A", "E"]


@pytest.mark.asyncio
async def test_move_backward_reinserts_at_target(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock)

    await editor.move_time_bar(plan_id, 4, 1)

    assert _order(store, plan_id, bars) == ["A", "E", "B", "C", "D"]


@pytest.mark.asyncio
@pytest.mark.parametrize("from_index, to_index", [(-1, 2), (0, 5), (7, 0), (2, 2)])
async def test_invalid_move_is_ignored(clock, from_index, to_index):
    store, editor, plan_id, bars = await _editor_with_bars(clock)
    before = store.get_plan(plan_id).updated_at

    assert await editor.move_time_bar(plan_id, from_index, to_index) is False

    assert _order(store, plan_id, bars) == ["A", "B", "C", "D", "E"]
    assert store.get_plan(plan_id).updated_at == before


@pytest.mark.asyncio
async def test_edit_refreshes_updated_at(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock, count=2)
    clock.advance(minutes=5)

    await editor.move_time_bar(plan_id, 0, 1)

    assert store.get_plan(plan_id).updated_at == clock()
    assert store.current_plan.time_bars[0].id == bars[1].id


@pytest.mark.asyncio
async def test_update_time_bar_replaces_or_appends(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock, count=2)

    changed = TimeBar(activity_id=bars[0].activity_id, planned_time=999, id=bars[0].id)
    await editor.update_time_bar(plan_id, changed)
    extra = TimeBar(activity_id=uuid4(), planned_time=5)
    await editor.update_time_bar(plan_id, extra)

    plan = store.get_plan(plan_id)
    assert [bar.planned_time for bar in plan.time_bars] == [999, 120, 5]


@pytest.mark.asyncio
async def test_delete_time_bar(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock, count=3)

    await editor.delete_time_bar(plan_id, bars[1].id)

    assert _order(store, plan_id, bars) == ["A", "C"]


@pytest.mark.asyncio
async def test_edits_to_unknown_plan_are_noops(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock, count=1)
    unknown = uuid4()

    assert await editor.add_time_bar(unknown, TimeBar(activity_id=uuid4(), planned_time=1)) is None
    assert await editor.delete_time_bar(unknown, bars[0].id) is None
    assert await editor.move_time_bar(unknown, 0, 0) is False
    assert await editor.rename_plan(unknown, "X") is None


@pytest.mark.asyncio
async def test_create_and_rename_plan(clock):
    store = await EntityStore.open(InMemoryBlobStore(), clock=clock)
    editor = PlanEditor(store)

    plan = await editor.create_plan("Weekend")
    assert store.current_plan_id == plan.id

    renamed = await editor.rename_plan(plan.id, "  Lazy weekend ")
    assert renamed.name == "Lazy weekend"
    with pytest.raises(ValueError):
        await editor.rename_plan(plan.id, "   ")

    background = await editor.create_plan("Later", make_current=False)
    assert store.current_plan_id == plan.id
    assert store.get_plan(background.id) is not None


@pytest.mark.asyncio
async def test_finish_drag_applies_committed_move(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock)
    drag = DragReorder(item_extent=60)
    drag.begin(0, 5)
    drag.update(200)

    assert await editor.finish_drag(plan_id, drag) is True
    assert _order(store, plan_id, bars) == ["B", "C", "D", "A", "E"]


@pytest.mark.asyncio
async def test_finish_drag_below_commit_distance_moves_nothing(clock):
    store, editor, plan_id, bars = await _editor_with_bars(clock)
    drag = DragReorder(item_extent=10, commit_distance=20)
    drag.begin(0, 5)
    drag.update(15)

    assert await editor.finish_drag(plan_id, drag) is False
    assert _order(store, plan_id, bars) == ["A", "B", "C", "D", "E"]
