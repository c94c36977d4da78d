"""
FastAPI dependencies (DB session, session gate, tenant ownership)
"""
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from studiodesk.application.accounts import TeamQueryService
from studiodesk.application.errors import AuthenticationError, PermissionDeniedError
from studiodesk.application.firms import FirmQueryService
from studiodesk.application.ownership import load_owned
from studiodesk.infrastructure.db.models import Firm, User
from studiodesk.infrastructure.db.session import get_db as _get_db


# Re-export get_db for routers and test overrides
get_db = _get_db


@dataclass(frozen=True)
class SessionContext:
    user_id: int
    firm_id: int | None


def start_session(request: Request, user: User, firm: Firm | None) -> None:
    """
    Replace whatever the cookie held with exactly user_id + firm_id
    """
    request.session.clear()
    request.session["user_id"] = user.id
    request.session["firm_id"] = firm.id if firm else None


def end_session(request: Request) -> None:
    request.session.clear()


def get_session_context(request: Request) -> SessionContext:
    """
    Any logged-in user, including an admin who has not set up a firm yet

    Raises:
        AuthenticationError: no user in the session
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise AuthenticationError()
    return SessionContext(user_id=user_id, firm_id=request.session.get("firm_id"))


def require_firm_session(
    request: Request,
    db: Session = Depends(get_db),
) -> SessionContext:
    """
    Gate for every firm-scoped operation: both user_id and firm_id must be
    present, and the user and firm must still be active members of each other.
    Sessions issued before a deactivation stop working on the next request.

    Usage:
        @router.get("/api/clients")
        def list_clients(ctx: SessionContext = Depends(require_firm_session)):
            ...
    """
    ctx = get_session_context(request)
    if not ctx.firm_id:
        raise AuthenticationError()
    user = TeamQueryService(db).get_user(ctx.user_id)
    firm = FirmQueryService(db).get_firm(ctx.firm_id)
    if (
        not user or not user.is_active
        or not firm or not firm.is_active
        or user.firm_id != firm.id
    ):
        raise AuthenticationError()
    return ctx


def get_current_user(
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
) -> User:
    """
    Raises:
        AuthenticationError: the session points at a missing or disabled user
    """
    user = TeamQueryService(db).get_user(ctx.user_id)
    if not user or not user.is_active:
        raise AuthenticationError()
    return user


def require_admin(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
) -> User:
    user = TeamQueryService(db).get_user(ctx.user_id)
    if not user.role.can_manage_firm:
        raise PermissionDeniedError("Admin access required")
    return user


def owned_by_firm(model: type) -> Callable:
    """
    Dependency factory: load `model` by the `record_id` path parameter and
    make sure it belongs to the session's firm (404 otherwise).

    Usage:
        @router.get("/{record_id}")
        def get_event(event: EventModel = Depends(owned_by_firm(EventModel))):
            ...
    """
    def dependency(
        record_id: int,
        ctx: SessionContext = Depends(require_firm_session),
        db: Session = Depends(get_db),
    ):
        return load_owned(db, model, record_id, ctx.firm_id)

    return dependency
