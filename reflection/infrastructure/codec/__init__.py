from .json_codec import (
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

__all__ = [
    "ACTIVITIES_KEY",
    "PLANS_KEY",
    "DAY_SESSIONS_KEY",
    "CURRENT_PLAN_ID_KEY",
    "TASK_DRAFT_KEY",
    "encode_activities",
    "decode_activities",
    "encode_plans",
    "decode_plans",
    "encode_day_sessions",
    "decode_day_sessions",
    "encode_current_plan_id",
    "decode_current_plan_id",
    "encode_task_draft",
    "decode_task_draft",
]
