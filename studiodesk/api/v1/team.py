"""
Team and activity feed API endpoints
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, require_admin, SessionContext
from studiodesk.api.v1.schemas import TeamMemberCreate, UserResponse, ActivityLogResponse
from studiodesk.application.accounts import AddTeamMemberUseCase, TeamQueryService
from studiodesk.application.activity import ActivityFeedService, DEFAULT_FEED_LIMIT
from studiodesk.infrastructure.db.models import User

router = APIRouter(tags=["team"])


@router.get("/api/team", response_model=list[UserResponse])
def list_team(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return TeamQueryService(db).get_users_by_firm(ctx.firm_id)


@router.post("/api/team", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_team_member(
    req: TeamMemberCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return AddTeamMemberUseCase(db).execute(
        firm_id=admin.firm_id,
        actor_user_id=admin.id,
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
        phone=req.phone,
        role=req.role,
    )


@router.get("/api/activity", response_model=list[ActivityLogResponse])
def activity_feed(
    limit: int = Query(DEFAULT_FEED_LIMIT, ge=1, le=100),
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    """Newest entries first"""
    return ActivityFeedService(db).get_activity_logs_by_firm(ctx.firm_id, limit=limit)
