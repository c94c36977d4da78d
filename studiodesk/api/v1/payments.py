"""
Payment and expense API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, SessionContext
from studiodesk.api.v1.schemas import PaymentCreate, PaymentResponse, ExpenseCreate, ExpenseResponse
from studiodesk.application.expenses import CreateExpenseUseCase, ExpenseQueryService
from studiodesk.application.payments import RecordPaymentUseCase, PaymentQueryService

router = APIRouter(tags=["payments"])


@router.get("/api/payments", response_model=list[PaymentResponse])
def list_payments(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return PaymentQueryService(db).get_payments_by_firm(ctx.firm_id)


@router.post("/api/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(
    req: PaymentCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    """Records the payment and updates the event balance in one transaction"""
    return RecordPaymentUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        event_id=req.event_id,
        amount=req.amount,
        payment_method=req.payment_method,
        payment_date=req.payment_date,
        notes=req.notes,
    )


@router.get("/api/expenses", response_model=list[ExpenseResponse])
def list_expenses(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return ExpenseQueryService(db).get_expenses_by_firm(ctx.firm_id)


@router.post("/api/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    req: ExpenseCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return CreateExpenseUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        title=req.title,
        description=req.description,
        amount=req.amount,
        category=req.category,
        expense_date=req.expense_date,
    )
