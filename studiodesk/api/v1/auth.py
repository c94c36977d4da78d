"""
Authentication routes (PIN login, email login, signup, logout, me)
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import (
    get_db, get_current_user, start_session, end_session, SessionContext, get_session_context,
)
from studiodesk.api.v1.schemas import (
    PinLoginRequest, EmailLoginRequest, SignupRequest, SessionResponse,
    UserResponse, FirmResponse,
)
from studiodesk.application.accounts import LoginUseCase, SignupUseCase, LoginResult
from studiodesk.application.firms import FirmQueryService
from studiodesk.infrastructure.db.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session_response(result: LoginResult) -> SessionResponse:
    return SessionResponse(
        user=UserResponse.model_validate(result.user),
        firm=FirmResponse.model_validate(result.firm) if result.firm else None,
    )


@router.post("/login", response_model=SessionResponse)
def login(request: Request, req: PinLoginRequest, db: Session = Depends(get_db)):
    """Firm PIN + username + password"""
    result = LoginUseCase(db).with_pin(req.firm_pin, req.username, req.password)
    start_session(request, result.user, result.firm)
    return _session_response(result)


@router.post("/login-email", response_model=SessionResponse)
def login_email(request: Request, req: EmailLoginRequest, db: Session = Depends(get_db)):
    result = LoginUseCase(db).with_email(req.email, req.password)
    start_session(request, result.user, result.firm)
    return _session_response(result)


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def signup(request: Request, req: SignupRequest, db: Session = Depends(get_db)):
    """
    Create an account and log it in.

    An admin gets a new firm; any other role joins the firm given by firmId.
    """
    result = SignupUseCase(db).execute(
        email=req.email,
        password=req.password,
        first_name=req.first_name,
        last_name=req.last_name,
        phone=req.phone,
        role=req.role,
        firm_id=req.firm_id,
        firm_name=req.firm_name,
        firm_pin=req.firm_pin,
    )
    start_session(request, result.user, result.firm)
    return _session_response(result)


@router.post("/logout")
def logout(request: Request):
    end_session(request)
    return {"status": "logged_out"}


@router.get("/me", response_model=SessionResponse)
def me(
    ctx: SessionContext = Depends(get_session_context),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    firm = FirmQueryService(db).get_firm(ctx.firm_id) if ctx.firm_id else None
    return _session_response(LoginResult(user=user, firm=firm))
