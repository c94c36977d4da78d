"""
Firm (tenant) use cases: creation, setup for unassigned admins, soft deactivation.
"""
import logging
import secrets

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import ValidationError, NotFoundError, PermissionDeniedError
from studiodesk.domain.user import UserRole
from studiodesk.infrastructure.db.models import Firm, User

logger = logging.getLogger(__name__)

PIN_LENGTH = 6
MIN_PIN_LENGTH = 4
MIN_FIRM_NAME_LENGTH = 2


class FirmValidationError(ValidationError):
    pass


class FirmQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_firm(self, firm_id: int) -> Firm | None:
        return self.db.get(Firm, firm_id)

    def get_firm_by_pin(self, pin: str) -> Firm | None:
        return self.db.query(Firm).filter(Firm.pin == pin.strip()).first()

    def list_active_firms(self) -> list[Firm]:
        """Public listing used by the signup form."""
        return self.db.query(Firm).filter(Firm.is_active.is_(True)).order_by(Firm.name).all()


def generate_unique_pin(db: Session, attempts: int = 20) -> str:
    for _ in range(attempts):
        pin = "".join(secrets.choice("0123456789") for _ in range(PIN_LENGTH))
        if not db.query(Firm.id).filter(Firm.pin == pin).first():
            return pin
    raise FirmValidationError("Could not allocate a firm PIN")


def insert_firm(db: Session, name: str, pin: str | None) -> Firm:
    """
    Validate and add a firm to the session (flushed, not committed).
    """
    name = name.strip()
    if len(name) < MIN_FIRM_NAME_LENGTH:
        raise FirmValidationError("Studio name must be at least 2 characters")

    if pin is None:
        pin = generate_unique_pin(db)
    else:
        pin = pin.strip()
        if len(pin) < MIN_PIN_LENGTH:
            raise FirmValidationError("PIN must be at least 4 characters")
        if db.query(Firm.id).filter(Firm.pin == pin).first():
            raise FirmValidationError("Choose a different PIN")

    firm = Firm(name=name, pin=pin, is_active=True)
    db.add(firm)
    db.flush()
    return firm


class SetupFirmUseCase:
    """
    Use case: an admin without a firm creates one and joins it
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, user_id: int, name: str, pin: str | None = None) -> Firm:
        user = self.db.get(User, user_id)
        if not user or not user.is_active:
            raise NotFoundError.for_entity("User")
        if not user.role.can_manage_firm:
            raise PermissionDeniedError("Only admins can set up a firm")
        if user.firm_id is not None:
            raise FirmValidationError("User already belongs to a firm")

        firm = insert_firm(self.db, name, pin)
        user.firm_id = firm.id
        self.db.flush()

        self.activity.record(
            firm_id=firm.id,
            user_id=user.id,
            action=activity.FIRM_CREATED,
            entity_type="firm",
            entity_id=firm.id,
            description=f'Studio "{firm.name}" created by {user.full_name}',
        )
        self.db.commit()
        logger.info("Firm %s created by admin %s", firm.id, user.id)
        return firm


class DeactivateFirmUseCase:
    """
    Use case: soft-deactivate the admin's own firm (firms are never deleted)
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(self, firm_id: int, actor_user_id: int) -> Firm:
        actor = self.db.get(User, actor_user_id)
        if not actor or actor.firm_id != firm_id:
            raise NotFoundError.for_entity("User")
        if not actor.role.can_manage_firm:
            raise PermissionDeniedError("Only admins can deactivate a firm")

        firm = self.db.get(Firm, firm_id)
        if not firm:
            raise NotFoundError.for_entity("Firm")
        if not firm.is_active:
            raise FirmValidationError("Firm is already inactive")

        firm.is_active = False
        self.db.flush()

        self.activity.record(
            firm_id=firm.id,
            user_id=actor.id,
            action=activity.FIRM_DEACTIVATED,
            entity_type="firm",
            entity_id=firm.id,
            description=f'Studio "{firm.name}" deactivated',
        )
        self.db.commit()
        logger.info("Firm %s deactivated by user %s", firm.id, actor.id)
        return firm
