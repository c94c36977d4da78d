"""
Task use cases: assignment, status changes, and task lists joined with
their assignee, event and client.
"""
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.domain.task import TaskStatus, TaskPriority, completed_at_for
from studiodesk.infrastructure.db.models import ClientModel, EventModel, TaskModel, User
from studiodesk.utils.clock import utcnow


class TaskValidationError(ValidationError):
    pass


@dataclass
class TaskView:
    task: TaskModel
    assigned_user: User
    event: EventModel
    client: ClientModel


class CreateTaskUseCase:
    """
    Use case: assign a task for one of the firm's events to a team member
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        event_id: int,
        assigned_to: int,
        title: str,
        task_type: str,
        due_date: datetime,
        priority: TaskPriority = TaskPriority.MEDIUM,
        description: str | None = None,
    ) -> TaskModel:
        title = title.strip()
        if not title:
            raise TaskValidationError("Task title cannot be empty")

        event = self.db.get(EventModel, event_id)
        if not event or event.firm_id != firm_id:
            raise TaskValidationError("Event not found")
        assignee = self.db.get(User, assigned_to)
        if not assignee or assignee.firm_id != firm_id:
            raise TaskValidationError("Assignee is not a member of this studio")

        task = TaskModel(
            firm_id=firm_id,
            event_id=event.id,
            assigned_to=assignee.id,
            title=title,
            description=description,
            task_type=task_type,
            status=TaskStatus.PENDING.value,
            priority=TaskPriority(priority).value,
            due_date=due_date,
        )
        self.db.add(task)
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.TASK_ASSIGNED,
            entity_type="task",
            entity_id=task.id,
            description=f'Task "{task.title}" assigned to {assignee.full_name}',
        )
        self.db.commit()
        return task


class UpdateTaskStatusUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, task: TaskModel, status: TaskStatus, actor_user_id: int) -> TaskModel:
        status = TaskStatus(status)
        now = utcnow()
        task.status = status.value
        task.completed_at = completed_at_for(status, now)
        task.updated_at = now
        self.db.flush()

        self.activity.record(
            firm_id=task.firm_id,
            user_id=actor_user_id,
            action=activity.TASK_UPDATED,
            entity_type="task",
            entity_id=task.id,
            description=f"Task status updated to {status.value}",
        )
        self.db.commit()
        return task


class TaskQueryService:
    def __init__(self, db: Session):
        self.db = db

    def _joined(self):
        return (
            self.db.query(TaskModel, User, EventModel, ClientModel)
            .join(User, User.id == TaskModel.assigned_to)
            .join(EventModel, EventModel.id == TaskModel.event_id)
            .join(ClientModel, ClientModel.id == EventModel.client_id)
        )

    def get_tasks_by_firm(self, firm_id: int) -> list[TaskView]:
        rows = (
            self._joined()
            .filter(TaskModel.firm_id == firm_id)
            .order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
            .all()
        )
        return [TaskView(*row) for row in rows]

    def get_tasks_by_user(self, firm_id: int, user_id: int) -> list[TaskView]:
        """Tasks assigned to one member; firm_id keeps the lookup inside the tenant."""
        rows = (
            self._joined()
            .filter(TaskModel.firm_id == firm_id, TaskModel.assigned_to == user_id)
            .order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
            .all()
        )
        return [TaskView(*row) for row in rows]

    def get_task(self, task_id: int) -> TaskModel | None:
        return self.db.get(TaskModel, task_id)
