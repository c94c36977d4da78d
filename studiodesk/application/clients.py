"""
Client use cases: the studio's customer directory.
"""
from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError
from studiodesk.infrastructure.db.models import ClientModel
from studiodesk.utils.validation import validate_email


class ClientValidationError(ValidationError):
    pass


class CreateClientUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        name: str,
        phone: str,
        email: str | None = None,
        address: str | None = None,
        notes: str | None = None,
    ) -> ClientModel:
        name = name.strip()
        if not name:
            raise ClientValidationError("Client name cannot be empty")
        phone = phone.strip()
        if not phone:
            raise ClientValidationError("Client phone cannot be empty")
        if email and email.strip():
            try:
                email = validate_email(email)
            except ValueError as e:
                raise ClientValidationError(str(e))
        else:
            email = None

        client = ClientModel(
            firm_id=firm_id,
            name=name,
            phone=phone,
            email=email,
            address=(address or "").strip() or None,
            notes=(notes or "").strip() or None,
        )
        self.db.add(client)
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor_user_id,
            action=activity.CLIENT_ADDED,
            entity_type="client",
            entity_id=client.id,
            description=f'New client "{client.name}" added to system',
        )
        self.db.commit()
        return client


class ClientQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_client(self, client_id: int) -> ClientModel | None:
        return self.db.get(ClientModel, client_id)

    def get_clients_by_firm(self, firm_id: int) -> list[ClientModel]:
        return (
            self.db.query(ClientModel)
            .filter(ClientModel.firm_id == firm_id)
            .order_by(ClientModel.name, ClientModel.id)
            .all()
        )
