"""
Dashboard API endpoints (read-only aggregates for the session's firm)
"""
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, SessionContext
from studiodesk.api.v1.schemas import DashboardStatsResponse, FinancialSummaryResponse
from studiodesk.application.dashboard import DashboardService
from studiodesk.utils.clock import utcnow

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    day: date | None = None,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    stats = DashboardService(db).get_dashboard_stats(ctx.firm_id, day or utcnow().date())
    return DashboardStatsResponse.model_validate(stats)


@router.get("/financial-summary", response_model=FinancialSummaryResponse)
def financial_summary(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    summary = DashboardService(db).get_financial_summary(ctx.firm_id)
    return FinancialSummaryResponse.model_validate(summary)
