"""
Task API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, owned_by_firm, SessionContext
from studiodesk.api.v1.schemas import TaskCreate, TaskStatusUpdate, TaskResponse, TaskDetailResponse
from studiodesk.application.tasks import CreateTaskUseCase, UpdateTaskStatusUseCase, TaskQueryService
from studiodesk.infrastructure.db.models import TaskModel

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskDetailResponse])
def list_tasks(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    views = TaskQueryService(db).get_tasks_by_firm(ctx.firm_id)
    return [TaskDetailResponse.from_view(v) for v in views]


@router.get("/mine", response_model=list[TaskDetailResponse])
def list_my_tasks(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    views = TaskQueryService(db).get_tasks_by_user(ctx.firm_id, ctx.user_id)
    return [TaskDetailResponse.from_view(v) for v in views]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    req: TaskCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return CreateTaskUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        event_id=req.event_id,
        assigned_to=req.assigned_to,
        title=req.title,
        description=req.description,
        task_type=req.task_type,
        priority=req.priority,
        due_date=req.due_date,
    )


@router.patch("/{record_id}/status", response_model=TaskResponse)
def update_task_status(
    req: TaskStatusUpdate,
    task: TaskModel = Depends(owned_by_firm(TaskModel)),
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return UpdateTaskStatusUseCase(db).execute(task, req.status, actor_user_id=ctx.user_id)
