from datetime import datetime

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.infrastructure.db.models import ExpenseModel
from studiodesk.utils.clock import utcnow
from studiodesk.utils.money import format_money
from studiodesk.utils.validation import parse_amount


class ExpenseValidationError(ValidationError):
    pass


class CreateExpenseUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        title: str,
        amount,
        category: str,
        expense_date: datetime | None = None,
        description: str | None = None,
    ) -> ExpenseModel:
        title = title.strip()
        if not title:
            raise ExpenseValidationError("Expense title cannot be empty")
        category = category.strip()
        if not category:
            raise ExpenseValidationError("Expense category cannot be empty")
        try:
            amount = parse_amount(amount)
        except ValueError as e:
            raise ExpenseValidationError(str(e))

        expense = ExpenseModel(
            firm_id=firm_id,
            title=title,
            description=description,
            amount=amount,
            category=category,
            expense_date=expense_date or utcnow(),
            created_by=actor_user_id,
        )
        self.db.add(expense)
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense.id,
            description=f'Expense "{expense.title}" of {format_money(amount)} added',
        )
        self.db.commit()
        return expense


class ExpenseQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_expenses_by_firm(self, firm_id: int) -> list[ExpenseModel]:
        return (
            self.db.query(ExpenseModel)
            .filter(ExpenseModel.firm_id == firm_id)
            .order_by(ExpenseModel.expense_date.desc(), ExpenseModel.id.desc())
            .all()
        )
