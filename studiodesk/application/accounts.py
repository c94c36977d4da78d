"""
Account use cases: signup, login, team membership.

Login failures are always reported as "Invalid credentials" and signup
failures as "Failed to create account", so callers cannot probe which
emails or PINs exist.
"""
import logging
import secrets
from dataclasses import dataclass

from sqlalchemy.orm import Session

from studiodesk.application import activity
from studiodesk.application.activity import ActivityLogger
from studiodesk.application.errors import (
    AuthenticationError, ValidationError, NotFoundError, PermissionDeniedError,
)
from studiodesk.application.firms import FirmQueryService, insert_firm
from studiodesk.auth import hash_password, verify_password, get_user_by_email, get_firm_user_by_username
from studiodesk.domain.user import UserRole
from studiodesk.infrastructure.db.models import Firm, User
from studiodesk.utils.validation import validate_email, validate_phone

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2
SIGNUP_FAILED = "Failed to create account"
INVALID_CREDENTIALS = "Invalid credentials"


class AccountValidationError(ValidationError):
    pass


@dataclass
class LoginResult:
    user: User
    firm: Firm | None


def _validated_profile(email: str, password: str, first_name: str, last_name: str, phone: str) -> dict:
    try:
        email = validate_email(email)
        phone = validate_phone(phone)
    except ValueError as e:
        raise AccountValidationError(str(e))
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AccountValidationError("Password must be at least 8 characters")
    first_name, last_name = first_name.strip(), last_name.strip()
    if len(first_name) < MIN_NAME_LENGTH or len(last_name) < MIN_NAME_LENGTH:
        raise AccountValidationError("First and last name must be at least 2 characters")
    return {
        "email": email,
        "password_hash": hash_password(password),
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
    }


def _pin_matches(firm: Firm, pin: str | None) -> bool:
    return pin is not None and secrets.compare_digest(firm.pin, pin.strip())


class SignupUseCase:
    """
    Use case: self-service signup

    - admin: a new firm is created and the admin joins it
    - any other role: must name an existing active firm and give its PIN
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
        role: UserRole,
        firm_id: int | None = None,
        firm_name: str | None = None,
        firm_pin: str | None = None,
    ) -> LoginResult:
        role = UserRole(role)
        if role.requires_firm and not firm_id:
            raise AccountValidationError("Firm selection is required for non-admin roles")

        profile = _validated_profile(email, password, first_name, last_name, phone)
        if get_user_by_email(self.db, profile["email"]):
            logger.info("Signup rejected: email already registered")
            raise AccountValidationError(SIGNUP_FAILED)

        if role.creates_firm_on_signup:
            firm = insert_firm(
                self.db,
                firm_name or f"{profile['first_name']} {profile['last_name']} Studio",
                firm_pin,
            )
            action, entity_type = activity.FIRM_CREATED, "firm"
        else:
            firm = FirmQueryService(self.db).get_firm(firm_id)
            if not firm or not firm.is_active or not _pin_matches(firm, firm_pin):
                logger.info("Signup rejected: firm %s unavailable or wrong PIN", firm_id)
                raise AccountValidationError(SIGNUP_FAILED)
            action, entity_type = activity.USER_SIGNED_UP, "user"

        user = User(firm_id=firm.id, role=role, is_active=True, **profile)
        self.db.add(user)
        self.db.flush()

        self.activity.record(
            firm_id=firm.id,
            user_id=user.id,
            action=action,
            entity_type=entity_type,
            entity_id=firm.id if entity_type == "firm" else user.id,
            description=(
                f'Studio "{firm.name}" created by {user.full_name}'
                if entity_type == "firm"
                else f"{user.full_name} joined as {role.value}"
            ),
        )
        self.db.commit()
        logger.info("User %s signed up (role=%s, firm=%s)", user.id, role.value, firm.id)
        return LoginResult(user=user, firm=firm)


class AddTeamMemberUseCase:
    """
    Use case: an admin adds a team member to their own firm
    """

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityLogger(db)

    def execute(
        self,
        firm_id: int,
        actor_user_id: int,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
        role: UserRole,
    ) -> User:
        actor = self.db.get(User, actor_user_id)
        if not actor or actor.firm_id != firm_id:
            raise NotFoundError.for_entity("User")
        if not actor.role.can_manage_firm:
            raise PermissionDeniedError("Only admins can add team members")

        profile = _validated_profile(email, password, first_name, last_name, phone)
        if get_user_by_email(self.db, profile["email"]):
            raise AccountValidationError("A user with this email already exists")

        member = User(firm_id=firm_id, role=UserRole(role), is_active=True, **profile)
        self.db.add(member)
        self.db.flush()

        self.activity.record(
            firm_id=firm_id,
            user_id=actor.id,
            action=activity.TEAM_MEMBER_ADDED,
            entity_type="user",
            entity_id=member.id,
            description=f"{member.full_name} added to the team as {member.role.value}",
        )
        self.db.commit()
        return member


class LoginUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.firms = FirmQueryService(db)

    def with_pin(self, firm_pin: str, username: str, password: str) -> LoginResult:
        """
        Firm PIN resolves the tenant, then username + password the user inside it
        """
        firm = self.firms.get_firm_by_pin(firm_pin)
        user = None
        if firm and firm.is_active:
            user = get_firm_user_by_username(self.db, firm.id, username)

        if not verify_password(password, user.password_hash if user else None) or not user.is_active:
            logger.info("PIN login failed (firm found: %s)", firm is not None)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Login success for user %s (firm=%s)", user.id, firm.id)
        return LoginResult(user=user, firm=firm)

    def with_email(self, email: str, password: str) -> LoginResult:
        """
        Global lookup by email, firm resolved from the user's firm_id
        """
        user = get_user_by_email(self.db, email)

        if not verify_password(password, user.password_hash if user else None) or not user.is_active:
            logger.info("Email login failed")
            raise AuthenticationError(INVALID_CREDENTIALS)

        firm = None
        if user.firm_id is not None:
            firm = self.firms.get_firm(user.firm_id)
            if not firm or not firm.is_active:
                logger.info("Email login rejected for user %s: firm inactive", user.id)
                raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Login success for user %s (firm=%s)", user.id, user.firm_id)
        return LoginResult(user=user, firm=firm)


class TeamQueryService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_users_by_firm(self, firm_id: int) -> list[User]:
        return (
            self.db.query(User)
            .filter(User.firm_id == firm_id)
            .order_by(User.first_name, User.last_name, User.id)
            .all()
        )
