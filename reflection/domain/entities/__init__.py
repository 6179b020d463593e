from .activity import Activity
from .plan import Plan, TimeBar
from .session import DEFAULT_EXPECTED_TIME, DaySession, Session, start_of_day
from .statistics import DailyStatistics, TimeBarStatistics
from .task_draft import TaskDraft

__all__ = [
    "Activity",
    "Plan",
    "TimeBar",
    "Session",
    "DaySession",
    "start_of_day",
    "DEFAULT_EXPECTED_TIME",
    "TaskDraft",
    "DailyStatistics",
    "TimeBarStatistics",
]
