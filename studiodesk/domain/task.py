"""
Task statuses, priorities and the completion timestamp rule
"""
from datetime import datetime
from enum import Enum


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def completed_at_for(status: TaskStatus, now: datetime) -> datetime | None:
    """
    completed_at follows the status: set when the task is completed,
    cleared for every other status (re-opening a task resets it).
    """
    match status:
        case TaskStatus.COMPLETED:
            return now
        case TaskStatus.PENDING | TaskStatus.IN_PROGRESS | TaskStatus.OVERDUE:
            return None
