"""
Quotation use cases: price offers that can be converted into confirmed events.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.domain.event import EventStatus
from studiodesk.domain.quotation import QuotationStatus, CONVERTIBLE_STATUSES, MANUAL_STATUSES
from studiodesk.infrastructure.db.models import ClientModel, EventModel, QuotationModel
from studiodesk.utils.clock import utcnow
from studiodesk.utils.money import format_money
from studiodesk.utils.validation import parse_amount

logger = logging.getLogger(__name__)


class QuotationValidationError(ValidationError):
    pass


class CreateQuotationUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        client_id: int,
        title: str,
        event_type: str,
        event_date: datetime,
        venue: str,
        total_amount,
        valid_until: datetime,
        description: str | None = None,
    ) -> QuotationModel:
        title = title.strip()
        if not title:
            raise QuotationValidationError("Quotation title is required")
        venue = venue.strip()
        if not venue:
            raise QuotationValidationError("Venue is required")

        client = self.db.get(ClientModel, client_id)
        if not client or client.firm_id != firm_id:
            raise QuotationValidationError("Client not found")

        try:
            total = parse_amount(total_amount)
        except ValueError as e:
            raise QuotationValidationError(str(e))

        quotation = QuotationModel(
            firm_id=firm_id,
            client_id=client.id,
            title=title,
            description=description,
            event_type=event_type,
            event_date=event_date,
            venue=venue,
            total_amount=total,
            valid_until=valid_until,
            status=QuotationStatus.PENDING.value,
        )
        self.db.add(quotation)
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.QUOTATION_CREATED,
            entity_type="quotation",
            entity_id=quotation.id,
            description=f'Quotation "{quotation.title}" for {format_money(total)} sent to {client.name}',
        )
        self.db.commit()
        return quotation


class UpdateQuotationStatusUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, quotation: QuotationModel, status: QuotationStatus, actor_user_id: int) -> QuotationModel:
        status = QuotationStatus(status)
        if status not in MANUAL_STATUSES:
            raise QuotationValidationError("Use conversion to turn a quotation into an event")
        if quotation.status == QuotationStatus.CONVERTED.value:
            raise QuotationValidationError("Quotation has already been converted")

        quotation.status = status.value
        quotation.updated_at = utcnow()
        self.db.flush()

        self.activity.record(
            firm_id=quotation.firm_id,
            user_id=actor_user_id,
            action=activity.QUOTATION_STATUS_UPDATED,
            entity_type="quotation",
            entity_id=quotation.id,
            description=f'Quotation "{quotation.title}" marked {status.value}',
        )
        self.db.commit()
        return quotation


class ConvertQuotationUseCase:
    """
    Use case: turn an open quotation into a confirmed event

    Nothing has been paid yet, so the new event's balance equals its total.
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, quotation: QuotationModel, actor_user_id: int) -> EventModel:
        if quotation.status not in CONVERTIBLE_STATUSES:
            raise QuotationValidationError(f"A {quotation.status} quotation cannot be converted")

        event = EventModel(
            firm_id=quotation.firm_id,
            client_id=quotation.client_id,
            title=quotation.title,
            description=quotation.description,
            event_type=quotation.event_type,
            event_date=quotation.event_date,
            venue=quotation.venue,
            status=EventStatus.CONFIRMED.value,
            total_amount=quotation.total_amount,
            advance_amount=0,
            balance_amount=quotation.total_amount,
        )
        self.db.add(event)
        self.db.flush()

        quotation.status = QuotationStatus.CONVERTED.value
        quotation.event_id = event.id
        quotation.updated_at = utcnow()
        self.db.flush()

        self.activity.record(
            firm_id=quotation.firm_id,
            user_id=actor_user_id,
            action=activity.QUOTATION_CONVERTED,
            entity_type="event",
            entity_id=event.id,
            description=f'Quotation "{quotation.title}" converted to event',
        )
        self.db.commit()
        logger.info("Quotation %s converted to event %s", quotation.id, event.id)
        return event


class QuotationQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_quotations_by_firm(self, firm_id: int) -> list[QuotationModel]:
        return (
            self.db.query(QuotationModel)
            .filter(QuotationModel.firm_id == firm_id)
            .order_by(QuotationModel.created_at.desc(), QuotationModel.id.desc())
            .all()
        )
