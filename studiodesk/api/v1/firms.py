"""
Firm routes: public listing for the signup form, setup, deactivation
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import (
    get_db, get_session_context, require_admin, end_session, SessionContext,
)
from studiodesk.api.v1.schemas import FirmPublicResponse, FirmResponse, FirmSetupRequest
from studiodesk.application.firms import FirmQueryService, SetupFirmUseCase, DeactivateFirmUseCase
from studiodesk.infrastructure.db.models import User

router = APIRouter(prefix="/api/firms", tags=["firms"])


@router.get("", response_model=list[FirmPublicResponse])
def list_firms(db: Session = Depends(get_db)):
    """Active firms, id and name only"""
    return FirmQueryService(db).list_active_firms()


@router.post("/setup", response_model=FirmResponse, status_code=status.HTTP_201_CREATED)
def setup_firm(
    request: Request,
    req: FirmSetupRequest,
    ctx: SessionContext = Depends(get_session_context),
    db: Session = Depends(get_db),
):
    """An admin without a firm creates one; the session picks up the new firm_id"""
    firm = SetupFirmUseCase(db).execute(user_id=ctx.user_id, name=req.name, pin=req.pin)
    request.session["firm_id"] = firm.id
    return firm


@router.post("/deactivate", response_model=FirmResponse)
def deactivate_firm(
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    firm = DeactivateFirmUseCase(db).execute(firm_id=admin.firm_id, actor_user_id=admin.id)
    response = FirmResponse.model_validate(firm)
    end_session(request)
    return response
