"""Application service (use case) for editing a plan's time-bar sequence."""

import logging
from uuid import UUID

from reflection.application.services.entity_store import EntityStore
from reflection.application.services.reorder_engine import DragReorder
from reflection.domain.entities import Plan, TimeBar

logger = logging.getLogger(__name__)


class PlanEditor:
    """Mutates plans through the EntityStore. Depends on the store (DI).

    Every successful edit refreshes the plan's ``updated_at``; because the
    store tracks the current plan by id, readers of the current plan see the
    edit as soon as the call returns. Edits to an unknown plan id are no-ops.
    """

    def __init__(self, store: EntityStore):
        self._store = store

    async def create_plan(self, name: str, make_current: bool = True) -> Plan:
        now = self._store.now()
        plan = Plan(name=name, created_at=now, updated_at=now)
        if make_current:
            await self._store.set_current_plan(plan)
        else:
            await self._store.add_plan(plan)
        return plan

    async def rename_plan(self, plan_id: UUID, name: str) -> Plan | None:
        plan = self._store.get_plan(plan_id)
        if plan is None:
            return None
        plan.name = name.strip()
        if not plan.name:
            raise ValueError("Plan name must not be empty")
        return await self._commit(plan)

    async def add_time_bar(self, plan_id: UUID, time_bar: TimeBar) -> Plan | None:
        """Append a time bar at the end of the plan."""
        plan = self._store.get_plan(plan_id)
        if plan is None:
            return None
        plan.time_bars.append(time_bar)
        return await self._commit(plan)

    async def update_time_bar(self, plan_id: UUID, time_bar: TimeBar) -> Plan | None:
        """Replace the bar with the same id, or append it if the plan lacks it."""
        plan = self._store.get_plan(plan_id)
        if plan is None:
            return None
        index = plan.index_of(time_bar.id)
        if index is None:
            plan.time_bars.append(time_bar)
        else:
            plan.time_bars[index] = time_bar
        return await self._commit(plan)

    async def delete_time_bar(self, plan_id: UUID, time_bar_id: UUID) -> Plan | None:
        plan = self._store.get_plan(plan_id)
        if plan is None:
            return None
        index = plan.index_of(time_bar_id)
        if index is None:
            return plan
        del plan.time_bars[index]
        return await self._commit(plan)

    async def move_time_bar(self, plan_id: UUID, from_index: int, to_index: int) -> bool:
        """Remove the bar at ``from_index`` and re-insert it at ``to_index``.

        Out-of-range or equal indices are ignored (they come from stale UI
        state); returns whether a move happened.
        """
        plan = self._store.get_plan(plan_id)
        if plan is None:
            return False
        count = len(plan.time_bars)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            logger.debug(
                "Ignoring move %d -> %d in plan %s (%d bars)",
                from_index, to_index, plan_id, count,
            )
            return False

        bar = plan.time_bars.pop(from_index)
        plan.time_bars.insert(to_index, bar)
        await self._commit(plan)
        return True

    async def finish_drag(self, plan_id: UUID, drag: DragReorder) -> bool:
        """End a drag gesture and apply its move, if it produced one."""
        move = drag.end()
        if move is None:
            return False
        return await self.move_time_bar(plan_id, move.from_index, move.to_index)

    async def _commit(self, plan: Plan) -> Plan:
        plan.touch(self._store.now())
        await self._store.update_plan(plan)
        return plan
