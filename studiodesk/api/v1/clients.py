"""
Client API endpoints
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studiodesk.api.deps import get_db, require_firm_session, owned_by_firm, SessionContext
from studiodesk.api.v1.schemas import ClientCreate, ClientResponse
from studiodesk.application.clients import CreateClientUseCase, ClientQueryService
from studiodesk.infrastructure.db.models import ClientModel

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=list[ClientResponse])
def list_clients(
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return ClientQueryService(db).get_clients_by_firm(ctx.firm_id)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def create_client(
    req: ClientCreate,
    ctx: SessionContext = Depends(require_firm_session),
    db: Session = Depends(get_db),
):
    return CreateClientUseCase(db).execute(
        firm_id=ctx.firm_id,
        actor_user_id=ctx.user_id,
        name=req.name,
        phone=req.phone,
        email=req.email,
        address=req.address,
        notes=req.notes,
    )


@router.get("/{record_id}", response_model=ClientResponse)
def get_client(client: ClientModel = Depends(owned_by_firm(ClientModel))):
    return client
