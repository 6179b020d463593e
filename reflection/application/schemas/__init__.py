from .activity import ActivityResponse
from .plan import PlanResponse, TimeBarResponse
from .session import DaySessionResponse, SessionResponse, TaskDraftResponse
from .statistics import DailyStatisticsResponse, TimeBarStatisticsResponse

__all__ = [
    "ActivityResponse",
    "PlanResponse",
    "TimeBarResponse",
    "SessionResponse",
    "DaySessionResponse",
    "TaskDraftResponse",
    "TimeBarStatisticsResponse",
    "DailyStatisticsResponse",
]
