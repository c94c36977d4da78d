"""
Event (shoot) use cases and the composite event reader.

Balance rule: balance_amount == total_amount - sum(payments). An advance
given at booking is recorded as a regular payment in the same transaction,
so the ledger alone explains every balance.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.domain.event import EventStatus
from studiodesk.domain.payment import PaymentMethod
from studiodesk.infrastructure.db.models import (
    ClientModel, EventModel, PaymentModel, TaskModel, User,
)
from studiodesk.utils.clock import utcnow
from studiodesk.utils.money import format_money
from studiodesk.utils.validation import parse_amount

logger = logging.getLogger(__name__)


class EventValidationError(ValidationError):
    pass


@dataclass
class EventView:
    event: EventModel
    client: ClientModel
    photographer: User | None = None
    videographer: User | None = None
    tasks: list[TaskModel] = field(default_factory=list)
    payments: list[PaymentModel] = field(default_factory=list)


def _firm_member(db: Session, firm_id: int, user_id: int | None, label: str) -> User | None:
    if user_id is None:
        return None
    user = db.get(User, user_id)
    if not user or user.firm_id != firm_id:
        raise EventValidationError(f"{label} is not a member of this studio")
    return user


class CreateEventUseCase:
    """
    Use case: book a shoot for an existing client of the firm
    """

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
        total_amount,
        advance_amount=0,
        description: str | None = None,
        venue: str | None = None,
        photographer_id: int | None = None,
        videographer_id: int | None = None,
        status: EventStatus = EventStatus.SCHEDULED,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> EventModel:
        title = title.strip()
        if not title:
            raise EventValidationError("Event title cannot be empty")
        event_type = event_type.strip()
        if not event_type:
            raise EventValidationError("Event type cannot be empty")

        client = self.db.get(ClientModel, client_id)
        if not client or client.firm_id != firm_id:
            raise EventValidationError("Client not found")

        _firm_member(self.db, firm_id, photographer_id, "Photographer")
        _firm_member(self.db, firm_id, videographer_id, "Videographer")

        try:
            total = parse_amount(total_amount)
            advance = parse_amount(advance_amount, allow_zero=True)
        except ValueError as e:
            raise EventValidationError(str(e))
        if advance > total:
            raise EventValidationError("Advance cannot exceed the total amount")

        event = EventModel(
            firm_id=firm_id,
            client_id=client.id,
            title=title,
            description=description,
            event_type=event_type,
            event_date=event_date,
            venue=venue,
            status=EventStatus(status).value,
            total_amount=total,
            advance_amount=advance,
            balance_amount=total - advance,
            photographer_id=photographer_id,
            videographer_id=videographer_id,
        )
        self.db.add(event)
        self.db.flush()

        advance_payment = None
        if advance > 0:
            advance_payment = PaymentModel(
                firm_id=firm_id,
                event_id=event.id,
                amount=advance,
                payment_method=PaymentMethod(payment_method).value,
                payment_date=utcnow(),
                notes="Advance at booking",
                received_by=actor_user_id,
            )
            self.db.add(advance_payment)
            self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.EVENT_CREATED,
            entity_type="event",
            entity_id=event.id,
            description=f'New event "{event.title}" created',
        )
        if advance_payment is not None:
            self.activity.record(
                firm_id=firm_id,
                user_id=actor_user_id,
                action=activity.PAYMENT_RECEIVED,
                entity_type="payment",
                entity_id=advance_payment.id,
                description=f'Advance of {format_money(advance)} received for "{event.title}"',
            )
        self.db.commit()
        logger.info("Event %s created for firm %s", event.id, firm_id)
        return event


class UpdateEventStatusUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, event: EventModel, status: EventStatus, actor_user_id: int) -> EventModel:
        """
        The event is already resolved for the caller's firm.
        """
        status = EventStatus(status)
        event.status = status.value
        event.updated_at = utcnow()
        self.db.flush()

        self.activity.record(
            firm_id=event.firm_id,
            user_id=actor_user_id,
            action=activity.EVENT_STATUS_UPDATED,
            entity_type="event",
            entity_id=event.id,
            description=f'Event "{event.title}" status updated to {status.value}',
        )
        self.db.commit()
        return event


class EventQueryService:
    """
    Composite reads: Event joined with its Client, plus crew, tasks and
    payments fetched in one IN query each.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_events_by_firm(self, firm_id: int) -> list[EventView]:
        rows = (
            self.db.query(EventModel, ClientModel)
            .join(ClientModel, ClientModel.id == EventModel.client_id)
            .filter(EventModel.firm_id == firm_id)
            .order_by(EventModel.event_date, EventModel.id)
            .all()
        )
        return self._assemble(rows)

    def get_event(self, event_id: int) -> EventView | None:
        rows = (
            self.db.query(EventModel, ClientModel)
            .join(ClientModel, ClientModel.id == EventModel.client_id)
            .filter(EventModel.id == event_id)
            .all()
        )
        views = self._assemble(rows)
        return views[0] if views else None

    def _assemble(self, rows) -> list[EventView]:
        if not rows:
            return []
        event_ids = [event.id for event, _ in rows]

        crew_ids = {
            uid
            for event, _ in rows
            for uid in (event.photographer_id, event.videographer_id)
            if uid is not None
        }
        crew = {}
        if crew_ids:
            crew = {u.id: u for u in self.db.query(User).filter(User.id.in_(crew_ids)).all()}

        tasks_by_event: dict[int, list[TaskModel]] = {eid: [] for eid in event_ids}
        for task in (
            self.db.query(TaskModel)
            .filter(TaskModel.event_id.in_(event_ids))
            .order_by(TaskModel.due_date, TaskModel.id)
        ):
            tasks_by_event[task.event_id].append(task)

        payments_by_event: dict[int, list[PaymentModel]] = {eid: [] for eid in event_ids}
        for payment in (
            self.db.query(PaymentModel)
            .filter(PaymentModel.event_id.in_(event_ids))
            .order_by(PaymentModel.payment_date.desc(), PaymentModel.id.desc())
        ):
            payments_by_event[payment.event_id].append(payment)

        return [
            EventView(
                event=event,
                client=client,
                photographer=crew.get(event.photographer_id),
                videographer=crew.get(event.videographer_id),
                tasks=tasks_by_event[event.id],
                payments=payments_by_event[event.id],
            )
            for event, client in rows
        ]


def event_balance(db: Session, event: EventModel) -> Decimal:
    """total_amount minus every payment recorded against the event"""
    paid = (
        db.query(func.coalesce(func.sum(PaymentModel.amount), 0))
        .filter(PaymentModel.event_id == event.id)
        .scalar()
    )
    return Decimal(str(event.total_amount)) - Decimal(str(paid))
