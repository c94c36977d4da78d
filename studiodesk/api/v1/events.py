"""
Event API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, owned_by_firm, SessionContext
from studiodesk.api.v1.schemas import (
    EventCreate, EventStatusUpdate, EventDetailResponse, EventResponse, PaymentResponse,
)
from studiodesk.application.events import (
    CreateEventUseCase, UpdateEventStatusUseCase, EventQueryService,
)
from studiodesk.application.payments import PaymentQueryService
from studiodesk.infrastructure.db.models import EventModel

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventDetailResponse])
def list_events(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    """Events with client, crew, tasks and payments, by event date"""
    views = EventQueryService(db).get_events_by_firm(ctx.firm_id)
    return [EventDetailResponse.from_view(v) for v in views]


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    req: EventCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return CreateEventUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        client_id=req.client_id,
        title=req.title,
        description=req.description,
        event_type=req.event_type,
        event_date=req.event_date,
        venue=req.venue,
        status=req.status,
        total_amount=req.total_amount,
        advance_amount=req.advance_amount,
        payment_method=req.payment_method,
        photographer_id=req.photographer_id,
        videographer_id=req.videographer_id,
    )


@router.get("/{record_id}", response_model=EventDetailResponse)
def get_event(
    event: EventModel = Depends(owned_by_firm(EventModel)),
    db: Session = Depends(get_db),
):
    return EventDetailResponse.from_view(EventQueryService(db).get_event(event.id))


@router.patch("/{record_id}/status", response_model=EventResponse)
def update_event_status(
    req: EventStatusUpdate,
    event: EventModel = Depends(owned_by_firm(EventModel)),
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return UpdateEventStatusUseCase(db).execute(event, req.status, actor_user_id=ctx.user_id)


@router.get("/{record_id}/payments", response_model=list[PaymentResponse])
def list_event_payments(
    event: EventModel = Depends(owned_by_firm(EventModel)),
    db: Session = Depends(get_db),
):
    return PaymentQueryService(db).get_payments_by_event(event.id)
