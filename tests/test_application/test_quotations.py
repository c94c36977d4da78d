"""Tests for quotations and their conversion into events."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from studiodesk.application.clients import CreateClientUseCase
from studiodesk.application.quotations import (
    CreateQuotationUseCase, UpdateQuotationStatusUseCase, ConvertQuotationUseCase,
    QuotationQueryService, QuotationValidationError,
)
from studiodesk.domain.quotation import QuotationStatus
from studiodesk.infrastructure.db.models import ActivityLog, EventModel

EVENT_DATE = datetime(2027, 1, 15, 16, 0, tzinfo=timezone.utc)
VALID_UNTIL = datetime(2026, 12, 1, tzinfo=timezone.utc)


def _add_quotation(db, firm_id, user_id, client_id=None, total="60000"):
    if client_id is None:
        client_id = CreateClientUseCase(db).execute(
            firm_id=firm_id, actor_user_id=user_id, name="Kavya & Rohan", phone="9000000001",
        ).id
    return CreateQuotationUseCase(db).execute(
        firm_id=firm_id, actor_user_id=user_id, client_id=client_id,
        title="Engagement Shoot", event_type="engagement", event_date=EVENT_DATE,
        venue="Lalbagh, Bangalore", total_amount=total, valid_until=VALID_UNTIL,
    )


class TestCreateQuotation:
    def test_create_quotation(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)

        assert quotation.status == "pending"
        assert quotation.total_amount == Decimal("60000")
        assert quotation.event_id is None

    def test_client_of_other_firm_rejected(self, db_session, firm, admin, other_firm, other_admin):
        theirs = CreateClientUseCase(db_session).execute(
            firm_id=other_firm.id, actor_user_id=other_admin.id, name="Theirs", phone="9000000002",
        )
        with pytest.raises(QuotationValidationError, match="Client not found"):
            _add_quotation(db_session, firm.id, admin.id, client_id=theirs.id)


class TestQuotationStatus:
    def test_accept(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)
        UpdateQuotationStatusUseCase(db_session).execute(quotation, QuotationStatus.ACCEPTED, admin.id)
        assert quotation.status == "accepted"

    def test_converted_cannot_be_set_by_hand(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)
        with pytest.raises(QuotationValidationError, match="conversion"):
            UpdateQuotationStatusUseCase(db_session).execute(quotation, QuotationStatus.CONVERTED, admin.id)


class TestConvertQuotation:
    def test_convert_creates_confirmed_event(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)

        event = ConvertQuotationUseCase(db_session).execute(quotation, admin.id)

        assert event.status == "confirmed"
        assert event.firm_id == firm.id
        assert event.client_id == quotation.client_id
        assert event.total_amount == Decimal("60000")
        assert event.balance_amount == Decimal("60000")
        assert quotation.status == "converted"
        assert quotation.event_id == event.id
        log = db_session.query(ActivityLog).filter(ActivityLog.action == "quotation_converted").one()
        assert log.entity_id == event.id

    def test_convert_twice_fails(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)
        use_case = ConvertQuotationUseCase(db_session)
        use_case.execute(quotation, admin.id)

        with pytest.raises(QuotationValidationError, match="cannot be converted"):
            use_case.execute(quotation, admin.id)
        assert db_session.query(EventModel).count() == 1

    def test_rejected_cannot_be_converted(self, db_session, firm, admin):
        quotation = _add_quotation(db_session, firm.id, admin.id)
        UpdateQuotationStatusUseCase(db_session).execute(quotation, QuotationStatus.REJECTED, admin.id)
        with pytest.raises(QuotationValidationError):
            ConvertQuotationUseCase(db_session).execute(quotation, admin.id)

    def test_quotations_by_firm_never_leak(self, db_session, firm, admin, other_firm, other_admin):
        _add_quotation(db_session, other_firm.id, other_admin.id)
        assert QuotationQueryService(db_session).get_quotations_by_firm(firm.id) == []
