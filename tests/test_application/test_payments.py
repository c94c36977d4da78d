"""Tests for payments, expenses and the event balance invariant."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import event as sa_event
from sqlalchemy.dialects import postgresql

from studiodesk.application.clients import CreateClientUseCase
from studiodesk.application.events import CreateEventUseCase, event_balance
from studiodesk.application.expenses import (
    CreateExpenseUseCase, ExpenseQueryService, ExpenseValidationError,
)
from studiodesk.application.payments import (
    RecordPaymentUseCase, PaymentQueryService, PaymentValidationError,
)
from studiodesk.domain.payment import PaymentMethod
from studiodesk.infrastructure.db.models import ActivityLog, EventModel, PaymentModel

EVENT_DATE = datetime(2026, 12, 5, 9, 0, tzinfo=timezone.utc)


def _add_event(db, firm_id, user_id, total="15000", advance="0"):
    client = CreateClientUseCase(db).execute(
        firm_id=firm_id, actor_user_id=user_id, name="Baby Aarav", phone="9567890123",
    )
    return CreateEventUseCase(db).execute(
        firm_id=firm_id, actor_user_id=user_id, client_id=client.id,
        title="First Birthday", event_type="birthday", event_date=EVENT_DATE,
        total_amount=total, advance_amount=advance,
    )


def _pay(db, firm_id, user_id, event_id, amount, method=PaymentMethod.UPI, **kwargs):
    return RecordPaymentUseCase(db).execute(
        firm_id=firm_id, actor_user_id=user_id, event_id=event_id,
        amount=amount, payment_method=method, **kwargs,
    )


class TestRecordPayment:
    def test_payment_appends_exactly_one_log(self, db_session, firm, admin):
        event = _add_event(db_session, firm.id, admin.id)
        logs_before = db_session.query(ActivityLog).count()

        payment = _pay(db_session, firm.id, admin.id, event.id, "7500")

        logs = db_session.query(ActivityLog).order_by(ActivityLog.id).all()
        assert len(logs) == logs_before + 1
        log = logs[-1]
        assert log.action == "payment_received"
        assert log.entity_type == "payment"
        assert log.entity_id == payment.id
        assert log.description == "Payment of ₹7,500 received"

    def test_payment_updates_balance(self, db_session, firm, admin):
        event = _add_event(db_session, firm.id, admin.id, total="15000", advance="5000")

        _pay(db_session, firm.id, admin.id, event.id, "2500")

        db_session.refresh(event)
        assert event.balance_amount == Decimal("7500")
        assert event.advance_amount == Decimal("5000")
        assert event_balance(db_session, event) == event.balance_amount

    def test_balance_invariant_over_many_payments(self, db_session, firm, admin):
        event = _add_event(db_session, firm.id, admin.id, total="10000", advance="1000")
        for amount in ("1500.50", "2000", "499.50"):
            _pay(db_session, firm.id, admin.id, event.id, amount)

        db_session.refresh(event)
        paid = sum(p.amount for p in db_session.query(PaymentModel).filter(PaymentModel.event_id == event.id))
        assert event.balance_amount == event.total_amount - paid
        assert event.balance_amount == Decimal("5000")

    def test_overpayment_allowed(self, db_session, firm, admin):
        event = _add_event(db_session, firm.id, admin.id, total="1000")
        _pay(db_session, firm.id, admin.id, event.id, "1200")

        db_session.refresh(event)
        assert event.balance_amount == Decimal("-200")

    @pytest.mark.parametrize("amount", ["0", "-50", "10.999", "ten"])
    def test_bad_amount_rejected(self, db_session, firm, admin, amount):
        event = _add_event(db_session, firm.id, admin.id)
        with pytest.raises(PaymentValidationError):
            _pay(db_session, firm.id, admin.id, event.id, amount)
        assert db_session.query(PaymentModel).count() == 0

    def test_event_of_other_firm_rejected(self, db_session, firm, admin, other_firm, other_admin):
        theirs = _add_event(db_session, other_firm.id, other_admin.id)
        with pytest.raises(PaymentValidationError, match="Event not found"):
            _pay(db_session, firm.id, admin.id, theirs.id, "100")
        db_session.refresh(theirs)
        assert theirs.balance_amount == Decimal("15000")

    def test_event_row_locked_before_recording(self, db_session, firm, admin):
        booked = _add_event(db_session, firm.id, admin.id)
        firm_id, admin_id, event_id = firm.id, admin.id, booked.id
        selects = []

        def capture(state):
            if state.is_select:
                selects.append(str(state.statement.compile(dialect=postgresql.dialect())))

        sa_event.listen(db_session, "do_orm_execute", capture)
        try:
            _pay(db_session, firm_id, admin_id, event_id, "100")
        finally:
            sa_event.remove(db_session, "do_orm_execute", capture)

        locked = [sql for sql in selects if "FOR UPDATE" in sql]
        assert len(locked) == 1
        assert "FROM events" in locked[0]

    def test_payment_date_defaults_to_now(self, db_session, firm, admin):
        event = _add_event(db_session, firm.id, admin.id)
        payment = _pay(db_session, firm.id, admin.id, event.id, "100")
        assert payment.payment_date is not None


class TestPaymentQueries:
    def test_payments_by_firm_and_event(self, db_session, firm, admin, other_firm, other_admin):
        first = _add_event(db_session, firm.id, admin.id)
        second = _add_event(db_session, firm.id, admin.id)
        theirs = _add_event(db_session, other_firm.id, other_admin.id)
        p1 = _pay(db_session, firm.id, admin.id, first.id, "100",
                  payment_date=datetime(2026, 10, 1, tzinfo=timezone.utc))
        p2 = _pay(db_session, firm.id, admin.id, second.id, "200",
                  payment_date=datetime(2026, 10, 2, tzinfo=timezone.utc))
        _pay(db_session, other_firm.id, other_admin.id, theirs.id, "300")

        queries = PaymentQueryService(db_session)
        assert [p.id for p in queries.get_payments_by_firm(firm.id)] == [p2.id, p1.id]
        assert [p.id for p in queries.get_payments_by_event(first.id)] == [p1.id]


class TestExpenses:
    def test_create_expense(self, db_session, firm, admin):
        expense = CreateExpenseUseCase(db_session).execute(
            firm_id=firm.id, actor_user_id=admin.id, title="Lens rental",
            amount="3500", category="equipment",
        )

        assert expense.amount == Decimal("3500")
        assert expense.created_by == admin.id
        log = db_session.query(ActivityLog).one()
        assert log.action == "expense_added"
        assert log.entity_id == expense.id

    def test_expense_needs_positive_amount(self, db_session, firm, admin):
        with pytest.raises(ExpenseValidationError):
            CreateExpenseUseCase(db_session).execute(
                firm_id=firm.id, actor_user_id=admin.id, title="Fuel",
                amount="0", category="transport",
            )

    def test_expenses_by_firm_never_leak(self, db_session, firm, admin, other_firm, other_admin):
        CreateExpenseUseCase(db_session).execute(
            firm_id=other_firm.id, actor_user_id=other_admin.id, title="Studio rent",
            amount="20000", category="utilities",
        )
        assert ExpenseQueryService(db_session).get_expenses_by_firm(firm.id) == []
