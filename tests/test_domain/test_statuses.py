"""
Tests for task completion rule and event/quotation status sets
"""
from datetime import datetime, timezone

import pytest

from studiodesk.domain.event import EventStatus, is_active_status
from studiodesk.domain.quotation import QuotationStatus, CONVERTIBLE_STATUSES, MANUAL_STATUSES
from studiodesk.domain.task import TaskStatus, completed_at_for

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def test_completed_task_gets_timestamp():
    assert completed_at_for(TaskStatus.COMPLETED, NOW) == NOW


@pytest.mark.parametrize("status", [
    TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.OVERDUE,
])
def test_other_statuses_clear_timestamp(status):
    assert completed_at_for(status, NOW) is None


@pytest.mark.parametrize("status,active", [
    (EventStatus.SCHEDULED, True),
    (EventStatus.EDITING, True),
    (EventStatus.CANCELLED, True),
    (EventStatus.COMPLETED, False),
    (EventStatus.DELIVERED, False),
])
def test_active_event_statuses(status, active):
    assert is_active_status(status.value) is active


def test_converted_is_not_a_manual_status():
    assert QuotationStatus.CONVERTED not in MANUAL_STATUSES
    assert QuotationStatus.CONVERTED.value not in CONVERTIBLE_STATUSES
    assert QuotationStatus.REJECTED.value not in CONVERTIBLE_STATUSES
