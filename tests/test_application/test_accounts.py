"""Tests for signup, login, team membership and firm setup."""
import pytest

from studiodesk.application.accounts import (
    SignupUseCase, LoginUseCase, AddTeamMemberUseCase, TeamQueryService,
    AccountValidationError,
)
from studiodesk.application.errors import (
    AuthenticationError, PermissionDeniedError, ValidationError,
)
from studiodesk.application.firms import (
    SetupFirmUseCase, DeactivateFirmUseCase, FirmQueryService, FirmValidationError,
)
from studiodesk.domain.user import UserRole
from studiodesk.infrastructure.db.models import ActivityLog, Firm, User

PASSWORD = "password123"


def _signup(db, **overrides):
    data = dict(
        email="meera@lenscraft.in",
        password="longpassword",
        first_name="Meera",
        last_name="Nair",
        phone="9988776655",
        role=UserRole.ADMIN,
    )
    data.update(overrides)
    return SignupUseCase(db).execute(**data)


class TestSignup:
    def test_admin_signup_creates_firm(self, db_session):
        result = _signup(db_session, firm_name="Lens Craft", firm_pin="4321")

        assert result.firm is not None
        assert result.firm.name == "Lens Craft"
        assert result.firm.pin == "4321"
        assert result.user.firm_id == result.firm.id
        assert result.user.role == UserRole.ADMIN

    def test_admin_signup_default_firm_name_and_generated_pin(self, db_session):
        result = _signup(db_session)

        assert result.firm.name == "Meera Nair Studio"
        assert len(result.firm.pin) == 6
        assert result.firm.pin.isdigit()

    def test_admin_signup_logs_firm_created(self, db_session):
        result = _signup(db_session)
        log = db_session.query(ActivityLog).filter(ActivityLog.firm_id == result.firm.id).one()
        assert log.action == "firm_created"
        assert log.entity_id == result.firm.id

    def test_non_admin_without_firm_fails(self, db_session):
        with pytest.raises(ValidationError, match="Firm selection is required"):
            _signup(db_session, role=UserRole.PHOTOGRAPHER)
        assert db_session.query(User).count() == 0

    def test_non_admin_joins_existing_firm(self, db_session, firm):
        result = _signup(db_session, role=UserRole.EDITOR, firm_id=firm.id, firm_pin="1234")

        assert result.user.firm_id == firm.id
        assert result.firm.id == firm.id
        assert db_session.query(Firm).count() == 1

    def test_non_admin_cannot_join_inactive_firm(self, db_session, make_firm):
        closed = make_firm(name="Closed Studio", pin="5555", is_active=False)
        with pytest.raises(AccountValidationError, match="Failed to create account"):
            _signup(db_session, role=UserRole.EDITOR, firm_id=closed.id, firm_pin="5555")

    @pytest.mark.parametrize("pin", [None, "", "4321", "9999"])
    def test_non_admin_needs_the_firm_pin(self, db_session, firm, other_firm, pin):
        with pytest.raises(AccountValidationError, match="Failed to create account"):
            _signup(db_session, role=UserRole.EDITOR, firm_id=firm.id, firm_pin=pin)
        assert db_session.query(User).count() == 0

    def test_duplicate_email_is_generic(self, db_session, admin):
        with pytest.raises(AccountValidationError, match="Failed to create account"):
            _signup(db_session, email="SARAH@aperturestudios.com")

    def test_email_stored_lower_case(self, db_session):
        result = _signup(db_session, email="  Meera@LensCraft.in ")
        assert result.user.email == "meera@lenscraft.in"

    def test_password_is_hashed(self, db_session):
        result = _signup(db_session)
        assert result.user.password_hash != "longpassword"

    @pytest.mark.parametrize("field,value,message", [
        ("password", "short", "Password must be at least 8"),
        ("first_name", "M", "at least 2 characters"),
        ("phone", "+91 99887766", "exactly 10 digits"),
        ("email", "not-an-email", "valid email"),
    ])
    def test_profile_validation(self, db_session, field, value, message):
        with pytest.raises(AccountValidationError, match=message):
            _signup(db_session, **{field: value})

    def test_short_firm_pin_rejected(self, db_session):
        with pytest.raises(FirmValidationError, match="PIN must be at least 4"):
            _signup(db_session, firm_pin="12")

    def test_taken_firm_pin_rejected(self, db_session, firm):
        with pytest.raises(FirmValidationError, match="different PIN"):
            _signup(db_session, firm_pin=firm.pin)


class TestLogin:
    def test_pin_login_with_local_part(self, db_session, firm, photographer):
        result = LoginUseCase(db_session).with_pin("1234", "rahul", PASSWORD)
        assert result.user.id == photographer.id
        assert result.firm.id == firm.id

    def test_pin_login_with_full_email_case_insensitive(self, db_session, firm, photographer):
        result = LoginUseCase(db_session).with_pin("1234", "Rahul@ApertureStudios.com", PASSWORD)
        assert result.user.id == photographer.id

    def test_pin_login_wrong_password(self, db_session, photographer):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            LoginUseCase(db_session).with_pin("1234", "rahul", "wrong-password")

    def test_pin_login_unknown_pin(self, db_session, photographer):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            LoginUseCase(db_session).with_pin("0000", "rahul", PASSWORD)

    def test_pin_login_user_of_other_firm(self, db_session, photographer, other_firm):
        with pytest.raises(AuthenticationError):
            LoginUseCase(db_session).with_pin(other_firm.pin, "rahul", PASSWORD)

    def test_username_wildcards_do_not_match(self, db_session, photographer):
        with pytest.raises(AuthenticationError):
            LoginUseCase(db_session).with_pin("1234", "r%", PASSWORD)

    def test_inactive_user_cannot_login(self, db_session, firm, make_user):
        make_user(firm.id, "gone@aperturestudios.com", is_active=False)
        with pytest.raises(AuthenticationError):
            LoginUseCase(db_session).with_pin("1234", "gone", PASSWORD)

    def test_inactive_firm_cannot_login(self, db_session, firm, photographer):
        firm.is_active = False
        db_session.commit()
        with pytest.raises(AuthenticationError):
            LoginUseCase(db_session).with_pin("1234", "rahul", PASSWORD)
        with pytest.raises(AuthenticationError):
            LoginUseCase(db_session).with_email("rahul@aperturestudios.com", PASSWORD)

    def test_email_login(self, db_session, firm, admin):
        result = LoginUseCase(db_session).with_email("sarah@aperturestudios.com", PASSWORD)
        assert result.user.id == admin.id
        assert result.firm.id == firm.id

    def test_email_login_unknown_email(self, db_session):
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            LoginUseCase(db_session).with_email("nobody@example.com", PASSWORD)

    def test_unassigned_admin_logs_in_without_firm(self, db_session, make_user):
        user = make_user(None, "solo@example.com", role=UserRole.ADMIN)
        result = LoginUseCase(db_session).with_email("solo@example.com", PASSWORD)
        assert result.user.id == user.id
        assert result.firm is None


class TestTeam:
    def _member(self, db, firm_id, actor_id, **overrides):
        data = dict(
            firm_id=firm_id,
            actor_user_id=actor_id,
            email="maya@aperturestudios.com",
            password="longpassword",
            first_name="Maya",
            last_name="Patel",
            phone="9234567890",
            role=UserRole.VIDEOGRAPHER,
        )
        data.update(overrides)
        return AddTeamMemberUseCase(db).execute(**data)

    def test_admin_adds_member(self, db_session, firm, admin):
        member = self._member(db_session, firm.id, admin.id)

        assert member.firm_id == firm.id
        assert member.role == UserRole.VIDEOGRAPHER
        log = db_session.query(ActivityLog).filter(ActivityLog.action == "team_member_added").one()
        assert log.entity_id == member.id

    def test_non_admin_cannot_add_member(self, db_session, firm, photographer):
        with pytest.raises(PermissionDeniedError):
            self._member(db_session, firm.id, photographer.id)

    def test_duplicate_member_email(self, db_session, firm, admin, photographer):
        with pytest.raises(AccountValidationError, match="already exists"):
            self._member(db_session, firm.id, admin.id, email=photographer.email)

    def test_users_by_firm_is_scoped(self, db_session, admin, photographer, other_admin):
        users = TeamQueryService(db_session).get_users_by_firm(admin.firm_id)
        assert {u.id for u in users} == {admin.id, photographer.id}

    def test_get_user(self, db_session, admin):
        queries = TeamQueryService(db_session)
        assert queries.get_user(admin.id).email == "sarah@aperturestudios.com"
        assert queries.get_user(9999) is None


class TestFirmSetup:
    def test_unassigned_admin_sets_up_firm(self, db_session, make_user):
        user = make_user(None, "solo@example.com", role=UserRole.ADMIN)

        firm = SetupFirmUseCase(db_session).execute(user.id, "Solo Shots", "7777")

        db_session.refresh(user)
        assert user.firm_id == firm.id
        assert firm.pin == "7777"

    def test_user_with_firm_cannot_set_up_another(self, db_session, admin):
        with pytest.raises(FirmValidationError, match="already belongs"):
            SetupFirmUseCase(db_session).execute(admin.id, "Second Studio")

    def test_short_firm_name(self, db_session, make_user):
        user = make_user(None, "solo@example.com", role=UserRole.ADMIN)
        with pytest.raises(FirmValidationError, match="at least 2 characters"):
            SetupFirmUseCase(db_session).execute(user.id, "S")

    def test_deactivate_firm(self, db_session, firm, admin):
        DeactivateFirmUseCase(db_session).execute(firm.id, admin.id)

        db_session.refresh(firm)
        assert firm.is_active is False
        assert FirmQueryService(db_session).list_active_firms() == []

    def test_only_admin_can_deactivate(self, db_session, firm, photographer):
        with pytest.raises(PermissionDeniedError):
            DeactivateFirmUseCase(db_session).execute(firm.id, photographer.id)

    def test_active_firms_listing(self, db_session, firm, other_firm, make_firm):
        make_firm(name="Closed Studio", pin="5555", is_active=False)
        names = [f.name for f in FirmQueryService(db_session).list_active_firms()]
        assert names == ["Aperture Studios", "Golden Frame"]
