from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.orm import Session

from studiodesk.infrastructure.db.models import User

# pbkdf2_sha256: primary, no native deps
# bcrypt: accepted for hashes imported from older deployments
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Constant-time check. With no hash (unknown user) a dummy verification
    still runs so response timing does not reveal whether the account exists.
    """
    if password_hash is None:
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(password, password_hash)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def get_firm_user_by_username(db: Session, firm_id: int, username: str) -> User | None:
    """
    PIN login: resolve a username inside one firm.

    The username is the full email or its local part, case-insensitive.
    """
    username = username.strip().lower()
    local_part = username.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return (
        db.query(User)
        .filter(
            User.firm_id == firm_id,
            (func.lower(User.email) == username) | (func.lower(User.email).like(f"{local_part}@%", escape="\\")),
        )
        .order_by(User.id)
        .first()
    )
