"""
Dashboard aggregates for one firm.

Pure read-layer: no mutations, no caching. Each rollup is a single SELECT
over one-row aggregate subqueries (one per source table, conditional
aggregation inside), so tables are never joined to each other and a row can
never be counted twice.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select, func, case, and_, true
from sqlalchemy.orm import Session

from studiodesk.domain.event import FINISHED_EVENT_STATUSES
from studiodesk.domain.task import TaskStatus
from studiodesk.infrastructure.db.models import (
    EventModel, ExpenseModel, PaymentModel, TaskModel, User,
)
from studiodesk.utils.clock import start_of_day

CENTS = Decimal("0.01")


@dataclass
class DashboardStats:
    total_revenue: Decimal
    active_events: int
    pending_tasks: int
    team_members: int
    monthly_growth: float
    weekly_events: int
    tasks_today: int
    active_team_members: int


@dataclass
class FinancialSummary:
    total_revenue: Decimal
    received_amount: Decimal
    pending_amount: Decimal
    total_expenses: Decimal
    net_profit: Decimal


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _previous_month_start(day: date) -> date:
    first = _month_start(day)
    return _month_start(first - timedelta(days=1))


def _next_month_start(day: date) -> date:
    first = _month_start(day)
    return _month_start(first + timedelta(days=32))


def _money(value) -> Decimal:
    """Aggregate result as a 2-place Decimal, whatever numeric type the driver returns"""
    if value is None:
        value = 0
    return Decimal(str(value)).quantize(CENTS)


def _sum(column, condition=None):
    if condition is not None:
        column = case((condition, column), else_=0)
    return func.coalesce(func.sum(column), 0)


def _count_if(condition, key):
    return func.count(case((condition, key)))


def growth_percent(current: Decimal, previous: Decimal) -> float:
    """
    Month-over-month change in percent, one decimal place.
    No collections last month gives 0 rather than an infinite growth.
    """
    if previous == 0:
        return 0.0
    return round(float((current - previous) / previous * 100), 1)


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_dashboard_stats(self, firm_id: int, today: date) -> DashboardStats:
        """
        Returns:
            total_revenue:       collected value (sum of payments)
            active_events:       events not completed/delivered
            pending_tasks:       tasks with status pending
            team_members:        distinct users of the firm
            monthly_growth:      payments this calendar month vs last, in %
            weekly_events:       events dated in [today, today + 7 days)
            tasks_today:         not-completed tasks due today
            active_team_members: users with is_active
        """
        day_start = start_of_day(today)
        tomorrow = day_start + timedelta(days=1)
        week_end = day_start + timedelta(days=7)
        this_month = start_of_day(_month_start(today))
        last_month = start_of_day(_previous_month_start(today))
        next_month = start_of_day(_next_month_start(today))

        paid_on = PaymentModel.payment_date
        payments = (
            select(
                _sum(PaymentModel.amount).label("received"),
                _sum(PaymentModel.amount, and_(paid_on >= this_month, paid_on < next_month)).label("this_month"),
                _sum(PaymentModel.amount, and_(paid_on >= last_month, paid_on < this_month)).label("last_month"),
            )
            .where(PaymentModel.firm_id == firm_id)
            .subquery("p")
        )
        events = (
            select(
                _count_if(EventModel.status.not_in(FINISHED_EVENT_STATUSES), EventModel.id).label("active"),
                _count_if(
                    and_(EventModel.event_date >= day_start, EventModel.event_date < week_end),
                    EventModel.id,
                ).label("this_week"),
            )
            .where(EventModel.firm_id == firm_id)
            .subquery("e")
        )
        tasks = (
            select(
                _count_if(TaskModel.status == TaskStatus.PENDING.value, TaskModel.id).label("pending"),
                _count_if(
                    and_(
                        TaskModel.due_date >= day_start,
                        TaskModel.due_date < tomorrow,
                        TaskModel.status != TaskStatus.COMPLETED.value,
                    ),
                    TaskModel.id,
                ).label("due_today"),
            )
            .where(TaskModel.firm_id == firm_id)
            .subquery("t")
        )
        users = (
            select(
                func.count(func.distinct(User.id)).label("members"),
                _count_if(User.is_active.is_(True), User.id).label("active"),
            )
            .where(User.firm_id == firm_id)
            .subquery("u")
        )

        row = self.db.execute(
            select(
                payments.c.received,
                payments.c.this_month,
                payments.c.last_month,
                events.c.active,
                events.c.this_week,
                tasks.c.pending,
                tasks.c.due_today,
                users.c.members,
                users.c.active.label("active_members"),
            )
            .select_from(
                payments.join(events, true()).join(tasks, true()).join(users, true())
            )
        ).one()

        return DashboardStats(
            total_revenue=_money(row.received),
            active_events=row.active or 0,
            pending_tasks=row.pending or 0,
            team_members=row.members or 0,
            monthly_growth=growth_percent(_money(row.this_month), _money(row.last_month)),
            weekly_events=row.this_week or 0,
            tasks_today=row.due_today or 0,
            active_team_members=row.active_members or 0,
        )

    def get_financial_summary(self, firm_id: int) -> FinancialSummary:
        """
        Booked value (event totals) against collected value (payments).

        pending_amount = total_revenue - received_amount
        net_profit     = received_amount - total_expenses
        """
        booked = (
            select(_sum(EventModel.total_amount).label("total"))
            .where(EventModel.firm_id == firm_id)
            .subquery("e")
        )
        received = (
            select(_sum(PaymentModel.amount).label("total"))
            .where(PaymentModel.firm_id == firm_id)
            .subquery("p")
        )
        spent = (
            select(_sum(ExpenseModel.amount).label("total"))
            .where(ExpenseModel.firm_id == firm_id)
            .subquery("x")
        )

        row = self.db.execute(
            select(
                booked.c.total.label("booked"),
                received.c.total.label("received"),
                spent.c.total.label("spent"),
            )
            .select_from(booked.join(received, true()).join(spent, true()))
        ).one()

        total_revenue = _money(row.booked)
        received_amount = _money(row.received)
        total_expenses = _money(row.spent)
        return FinancialSummary(
            total_revenue=total_revenue,
            received_amount=received_amount,
            pending_amount=total_revenue - received_amount,
            total_expenses=total_expenses,
            net_profit=received_amount - total_expenses,
        )
