# Overview: The single JSON envelope every route answers with.

"""
Every response body is {success, message, ...payload}; failures may add
`error`. Routes build bodies only through these helpers so status codes and
shapes stay uniform across blueprints.
"""

from __future__ import annotations

from flask import current_app, jsonify

from .validation import StorefrontError


def ok(message: str | None = None, status: int = 200, **payload):
    body = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(payload)
    return jsonify(body), status


def fail(message: str, status: int, error=None, **payload):
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    body.update(payload)
    return jsonify(body), status


def from_error(exc: StorefrontError):
    """Map a taxonomy error to its envelope."""
    return fail(exc.message, exc.status_code, error=exc.error)


def server_error(message: str, exc: BaseException):
    """
    Log an unexpected failure and answer 500 with the route's message.

    The underlying error text is embedded only when
    ERROR_DETAILS_IN_RESPONSES is set.
    """
    current_app.logger.exception(message)
    error = None
    if current_app.config.get("ERROR_DETAILS_IN_RESPONSES"):
        error = str(exc) or type(exc).__name__
    return fail(message, 500, error=error)
