"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation

from pydantic import EmailStr, TypeAdapter, ValidationError as PydanticValidationError


_PHONE_RE = re.compile(r"^\d{10}$")
_email_adapter = TypeAdapter(EmailStr)


def normalize_decimal_input(value: str) -> str:
    """
    Normalise an amount string: comma becomes a decimal point

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.strip().replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Validate a money amount

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "At most 2 decimal places")
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Invalid amount"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"At most {max_decimal_places} decimal places"

    return True, None


def parse_amount(value: str | int | float | Decimal, allow_zero: bool = False) -> Decimal:
    """
    Validate and convert an amount to Decimal (raises ValueError)

    Accepts the strings the UI sends ("85000", "85000.00", "85000,50") as well
    as plain numbers. Negative amounts are always rejected.
    """
    if isinstance(value, Decimal):
        raw = format(value, "f")
    else:
        raw = str(value)

    is_valid, error = validate_decimal_amount(raw)
    if not is_valid:
        raise ValueError(error)

    amount = Decimal(normalize_decimal_input(raw))
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    if amount == 0 and not allow_zero:
        raise ValueError("Amount must be greater than zero")
    return amount


def validate_email(value: str) -> str:
    """
    Syntax check through pydantic's EmailStr, stored lower-cased

    Raises:
        ValueError: not a well-formed address
    """
    try:
        email = _email_adapter.validate_python(value.strip())
    except PydanticValidationError as e:
        raise ValueError("Please enter a valid email address") from e
    return email.lower()


def validate_phone(value: str) -> str:
    phone = value.strip()
    if not _PHONE_RE.match(phone):
        raise ValueError("Phone number must be exactly 10 digits")
    return phone
