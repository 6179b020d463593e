from .change_notifier import ChangeEvent, ChangeNotifier
from .entity_store import DELETED_ACTIVITY_NAME, EntityStore
from .plan_editor import PlanEditor
from .reorder_engine import (
    DragReorder,
    DragState,
    ReorderMove,
    compute_shift,
    compute_shifts,
    compute_target_index,
)
from .session_engine import RunningSession, SessionEngine, SessionState
from .statistics_service import (
    StatisticsAggregator,
    WidthScale,
    completion_ratio,
    display_width,
)

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "DELETED_ACTIVITY_NAME",
    "EntityStore",
    "PlanEditor",
    "DragReorder",
    "DragState",
    "ReorderMove",
    "compute_shift",
    "compute_shifts",
    "compute_target_index",
    "RunningSession",
    "SessionEngine",
    "SessionState",
    "StatisticsAggregator",
    "WidthScale",
    "completion_ratio",
    "display_width",
]
