"""
Payment use cases.

Recording a payment, recomputing the event balance from the ledger and the
activity entry are committed as one transaction.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.application.events import event_balance
from studiodesk.domain.payment import PaymentMethod
from studiodesk.infrastructure.db.models import EventModel, PaymentModel
from studiodesk.utils.clock import utcnow
from studiodesk.utils.money import format_money
from studiodesk.utils.validation import parse_amount

logger = logging.getLogger(__name__)


class PaymentValidationError(ValidationError):
    pass


class RecordPaymentUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        event_id: int,
        amount,
        payment_method: PaymentMethod,
        payment_date: datetime | None = None,
        notes: str | None = None,
    ) -> PaymentModel:
        # Locked until commit: payments on one event recompute the balance one at a time
        event = self.db.get(EventModel, event_id, with_for_update=True)
        if not event or event.firm_id != firm_id:
            raise PaymentValidationError("Event not found")

        try:
            amount = parse_amount(amount)
        except ValueError as e:
            raise PaymentValidationError(str(e))

        payment = PaymentModel(
            firm_id=firm_id,
            event_id=event.id,
            amount=amount,
            payment_method=PaymentMethod(payment_method).value,
            payment_date=payment_date or utcnow(),
            notes=notes,
            received_by=actor_user_id,
        )
        self.db.add(payment)
        self.db.flush()

        # Overpayment is accepted; the balance simply goes negative
        event.balance_amount = event_balance(self.db, event)
        event.updated_at = utcnow()
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.PAYMENT_RECEIVED,
            entity_type="payment",
            entity_id=payment.id,
            description=f"Payment of {format_money(amount)} received",
        )
        self.db.commit()
        logger.info("Payment %s recorded for event %s (firm %s)", payment.id, event.id, firm_id)
        return payment


class PaymentQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_payments_by_firm(self, firm_id: int) -> list[PaymentModel]:
        return (
            self.db.query(PaymentModel)
            .filter(PaymentModel.firm_id == firm_id)
            .order_by(PaymentModel.payment_date.desc(), PaymentModel.id.desc())
            .all()
        )

    def get_payments_by_event(self, event_id: int) -> list[PaymentModel]:
        return (
            self.db.query(PaymentModel)
            .filter(PaymentModel.event_id == event_id)
            .order_by(PaymentModel.payment_date.desc(), PaymentModel.id.desc())
            .all()
        )
