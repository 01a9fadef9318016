# Overview: Request decorators gating API routes on bearer token and role.

from functools import wraps
from flask import request, g, current_app
from jose import JWTError

from .extensions import db
from .models import User
from .responses import fail
from .services import token_service

UNAUTHORIZED_MESSAGE = "UnAuthorized Access"


def _extract_token() -> str | None:
    """
    Token from the Authorization header, with or without a "Bearer " prefix.
    """
    header = (request.headers.get("Authorization") or "").strip()
    if header[:7].lower() == "bearer ":
        header = header[7:].strip()
    return header or None


def require_auth(f):
    """
    Require a valid bearer token.

    Sets:
    - g.user_id: id carried by the token
    - g.token_claims: the decoded claims

    Returns 401 (and never calls the route) if the token is missing,
    malformed, signed with another secret, or expired.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _extract_token()
        if not token:
            current_app.logger.warning("Rejected %s %s: no token", request.method, request.path)
            return fail(UNAUTHORIZED_MESSAGE, 401)

        try:
            claims = token_service.decode_access_token(token)
        except JWTError as exc:
            current_app.logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
            return fail(UNAUTHORIZED_MESSAGE, 401)

        user_id = claims.get("_id")
        if user_id is None:
            current_app.logger.warning("Rejected %s %s: token without user id", request.method, request.path)
            return fail(UNAUTHORIZED_MESSAGE, 401)

        g.user_id = user_id
        g.token_claims = claims
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """
    Require the authenticated user to be an administrator (role 1).

    Must be stacked under @require_auth. Loads the user record fresh on
    every request and sets g.current_user.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not hasattr(g, "user_id"):
            return fail(UNAUTHORIZED_MESSAGE, 401)

        try:
            user = db.session.get(User, g.user_id)
        except Exception as exc:
            current_app.logger.exception("Error in admin middleware")
            error = str(exc) if current_app.config.get("ERROR_DETAILS_IN_RESPONSES") else None
            return fail("Error in admin middleware", 401, error=error)

        if user is None or not user.is_admin:
            return fail(UNAUTHORIZED_MESSAGE, 401)

        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function
