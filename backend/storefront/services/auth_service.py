# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Registration, login and security-question password reset. Each function is
a single transition with no intermediate state kept between requests.

Failures are raised as taxonomy errors (see validation.py). Several keep
legacy wire status codes that clients already depend on:
- duplicate registration answers 200 with success=false
- unknown email on login answers 404
- wrong password on login answers 200 with success=false

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor BCRYPT_ROUNDS, default 10)
- Password policy: 8-15 chars, letter + digit + one of !@#$%^&*
- Email uniqueness is backed by a database constraint, not just the pre-check
"""

from __future__ import annotations

import logging

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User, ROLE_CUSTOMER
from ..validation import (
    StorefrontError,
    ValidationError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    require_fields,
    is_blank,
    is_valid_email,
    is_valid_phone,
    is_valid_password,
)
from . import token_service

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10

DUPLICATE_REGISTRATION_MESSAGE = "Already Register please login"

# Order is precedence: the first blank field is the one reported.
REGISTRATION_REQUIRED_FIELDS = [
    ("name", "Name is Required"),
    ("email", "Email is Required"),
    ("password", "Password is Required"),
    ("phone", "Phone no is Required"),
    ("address", "Address is Required"),
    ("answer", "Answer is Required"),
]

RESET_REQUIRED_FIELDS = [
    ("email", "Email is required"),
    ("answer", "answer is required"),
    ("newPassword", "New Password is required"),
]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str | None:
    """
    Hash password using bcrypt with a fresh salt.

    Returns None (and logs) if hashing fails; callers must treat a missing
    hash as failure.
    """
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    except (TypeError, ValueError, AttributeError):
        logger.exception("Password hashing failed")
        return None
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    A mismatch returns False. A malformed hash raises ValueError.
    """
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def _rounds() -> int:
    return current_app.config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)


def _clean(value) -> str:
    return str(value).strip()


def register_user(payload: dict, *, role: int = ROLE_CUSTOMER) -> User:
    """
    Create a user from a registration payload.

    Raises:
        ValidationError: blank field, bad email/phone format, weak password
        ConflictError: email already registered (wire status 200)
        StorefrontError: hashing failed (500)
    """
    require_fields(payload, REGISTRATION_REQUIRED_FIELDS)

    email = _clean(payload["email"])
    phone = _clean(payload["phone"])
    password = payload["password"]

    if not is_valid_email(email):
        raise ValidationError("Invalid Email")
    if not is_valid_phone(phone):
        raise ValidationError("Invalid Phone Number")
    if not is_valid_password(password):
        raise ValidationError("Invalid password")

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        raise ConflictError(DUPLICATE_REGISTRATION_MESSAGE, status_code=200)

    password_hash = hash_password(password, _rounds())
    if password_hash is None:
        raise StorefrontError("Error in Registeration")

    user = User(
        name=_clean(payload["name"]),
        email=email,
        password_hash=password_hash,
        phone=phone,
        address=_clean(payload["address"]),
        answer=_clean(payload["answer"]),
        role=role,
    )

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        raise ConflictError(DUPLICATE_REGISTRATION_MESSAGE, status_code=200)

    logger.info("Registered user id=%s", user.id)
    return user


def login(email, password) -> tuple[User, str]:
    """
    Check credentials and issue a bearer token.

    Returns (user, token).
    """
    if is_blank(email) or is_blank(password):
        raise NotFoundError("Invalid email or password")

    user = db.session.query(User).filter_by(email=_clean(email)).first()
    if not user:
        raise NotFoundError("Email is not registerd")

    # Non-string passwords (JSON numbers, lists) can never match a hash
    if not isinstance(password, str) or not verify_password(password, user.password_hash):
        raise AuthorizationError("Invalid Password", status_code=200)

    token = token_service.create_access_token(user.id)
    return user, token


def reset_password(payload: dict) -> User:
    """
    Replace the password of the user matching BOTH email and answer.

    The not-found message does not say which of the two was wrong.
    """
    require_fields(payload, RESET_REQUIRED_FIELDS)

    new_password = payload["newPassword"]
    if not is_valid_password(new_password):
        raise ValidationError("Invalid password")

    user = db.session.query(User).filter_by(
        email=_clean(payload["email"]),
        answer=_clean(payload["answer"]),
    ).first()
    if not user:
        raise NotFoundError("Wrong Email Or Answer")

    password_hash = hash_password(new_password, _rounds())
    if password_hash is None:
        raise StorefrontError("Something went wrong")

    user.password_hash = password_hash
    db.session.commit()

    logger.info("Password reset for user id=%s", user.id)
    return user


def set_role(email: str, role: int) -> User:
    """Change a user's role (CLI)."""
    user = db.session.query(User).filter_by(email=email).first()
    if not user:
        raise NotFoundError(f"User {email} not found")
    user.role = role
    db.session.commit()
    return user
