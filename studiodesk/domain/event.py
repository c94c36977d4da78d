"""
Event (shoot) lifecycle statuses
"""
from enum import Enum


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    EDITING = "editing"
    COMPLETED = "completed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Everything outside this set counts as an active event on the dashboard
FINISHED_EVENT_STATUSES = (EventStatus.COMPLETED.value, EventStatus.DELIVERED.value)


def is_active_status(status: str) -> bool:
    return status not in FINISHED_EVENT_STATUSES
