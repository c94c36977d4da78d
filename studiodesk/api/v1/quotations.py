"""
Quotation API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, owned_by_firm, SessionContext
from studiodesk.api.v1.schemas import (
    QuotationCreate, QuotationStatusUpdate, QuotationResponse, EventResponse,
)
from studiodesk.application.quotations import (
    CreateQuotationUseCase, UpdateQuotationStatusUseCase, ConvertQuotationUseCase,
    QuotationQueryService,
)
from studiodesk.infrastructure.db.models import QuotationModel

router = APIRouter(prefix="/api/quotations", tags=["quotations"])


@router.get("", response_model=list[QuotationResponse])
def list_quotations(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return QuotationQueryService(db).get_quotations_by_firm(ctx.firm_id)


@router.post("", response_model=QuotationResponse, status_code=status.HTTP_201_CREATED)
def create_quotation(
    req: QuotationCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return CreateQuotationUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        client_id=req.client_id,
        title=req.title,
        description=req.description,
        event_type=req.event_type,
        event_date=req.event_date,
        venue=req.venue,
        total_amount=req.total_amount,
        valid_until=req.valid_until,
    )


@router.patch("/{record_id}/status", response_model=QuotationResponse)
def update_quotation_status(
    req: QuotationStatusUpdate,
    quotation: QuotationModel = Depends(owned_by_firm(QuotationModel)),
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return UpdateQuotationStatusUseCase(db).execute(quotation, req.status, actor_user_id=ctx.user_id)


@router.post("/{record_id}/convert", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def convert_quotation(
    quotation: QuotationModel = Depends(owned_by_firm(QuotationModel)),
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    """Books a confirmed event from the quotation"""
    return ConvertQuotationUseCase(db).execute(quotation, actor_user_id=ctx.user_id)
