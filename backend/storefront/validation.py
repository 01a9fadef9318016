from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any


# Local part, "@", then either a bracketed IPv4 literal or a dotted domain
# ending in a 2+ letter TLD. A quoted local part needs one character before
# the opening quote.
EMAIL_PATTERN = re.compile(
    r'(([^<>()\[\]\\.,;:\s@"]+(\.[^<>()\[\]\\.,;:\s@"]+)*)|(.".+"))'
    r'@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])'
    r'|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))'
)

# Optional country code, optional (area) code, 7-10 digits, space/dot/dash separators
PHONE_PATTERN = re.compile(r"(\+?\d{1,3}[-.\s]?)?(\(?\d{3}\)?[-.\s]?)?\d{3}[-.\s]?\d{4}", re.ASCII)

PASSWORD_SYMBOLS = "!@#$%^&*"
PASSWORD_PATTERN = re.compile(
    r"(?=.*[0-9])(?=.*[a-zA-Z])(?=.*[!@#$%^&*])[a-zA-Z0-9!@#$%^&*]{8,15}"
)


class StorefrontError(Exception):
    """
    Base of the error taxonomy. Routes turn these into the JSON envelope
    {success: false, message, error?} with `status_code`.
    """
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, error: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error = error


class ValidationError(StorefrontError):
    """400-level input problem."""
    status_code = 400


class AuthorizationError(StorefrontError):
    """401-level identity or role problem."""
    status_code = 401


class NotFoundError(StorefrontError):
    """404-level missing record."""
    status_code = 404


class ConflictError(StorefrontError):
    """409-level business rule conflict (e.g., duplicate email)."""
    status_code = 409


def is_valid_email(email: Any) -> bool:
    return EMAIL_PATTERN.fullmatch(str(email).lower()) is not None


def is_valid_phone(phone: Any) -> bool:
    return PHONE_PATTERN.fullmatch(str(phone)) is not None


def is_valid_password(password: Any) -> bool:
    """8-15 chars of letters, digits and !@#$%^&*, with at least one of each class."""
    if not isinstance(password, str):
        return False
    return PASSWORD_PATTERN.fullmatch(password) is not None


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(payload: dict, checks: list[tuple[str, str]]) -> None:
    """
    Raise ValidationError for the first blank field.

    `checks` is an ordered list of (field, message); order is precedence.
    """
    for field, message in checks:
        if is_blank(payload.get(field)):
            raise ValidationError(message)


def parse_positive_number(value: Any, label: str, *, integer: bool = False) -> Decimal | int:
    """
    Coerce a JSON number or numeric string. Booleans are rejected.

    Raises ValidationError("<label> must be a valid number") or
    ValidationError("<label> must be a positive number").
    """
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a valid number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a valid number")
    if not number.is_finite():
        raise ValidationError(f"{label} must be a valid number")
    if number <= 0:
        raise ValidationError(f"{label} must be a positive number")
    if integer:
        if number != number.to_integral_value():
            raise ValidationError(f"{label} must be a valid number")
        return int(number)
    return number
