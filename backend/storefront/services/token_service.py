# Overview: Service-layer operations for bearer tokens; signs and verifies JWTs.

"""
Bearer Token Service

Tokens are HS256 JWTs carrying the user id under "_id" and an "exp"
claim. They are not stored server-side; validity is signature + expiry.

The secret, algorithm and lifetime come from app config (JWT_SECRET,
JWT_ALGORITHM, JWT_EXPIRES_DAYS) unless passed explicitly.
"""

from __future__ import annotations

from datetime import timedelta

from flask import current_app
from jose import jwt

from storefront.time_utils import expires_after


def _config(key: str, override=None):
    if override is not None:
        return override
    return current_app.config[key]


def create_access_token(
    user_id: int,
    *,
    secret: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a token for `user_id`.

    A negative `expires_delta` yields an already-expired token.
    """
    if expires_delta is None:
        expires_delta = timedelta(days=current_app.config["JWT_EXPIRES_DAYS"])

    claims = {
        "_id": user_id,
        "exp": expires_after(expires_delta),
    }
    return jwt.encode(
        claims,
        _config("JWT_SECRET", secret),
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def decode_access_token(token: str, *, secret: str | None = None) -> dict:
    """
    Verify signature and expiry and return the claims.

    Raises JWTError (ExpiredSignatureError, JWSError, ...) on any failure.
    """
    return jwt.decode(
        token,
        _config("JWT_SECRET", secret),
        algorithms=[current_app.config["JWT_ALGORITHM"]],
    )
