# Overview: Flask API routes for auth and order operations; parses input and returns JSON responses.

# backend/storefront/routes/auth.py
"""
Authentication and order API routes.

Registration, login and password reset are public. Order routes require a
bearer token; listing every order and changing status also require the
administrator role.

Every failure answers {success: false, message}. Unexpected errors are
logged and answered 500 with the route's message.
"""

from flask import Blueprint, request, g

from ..extensions import db
from ..services import auth_service
from ..services import order_service
from ..validation import StorefrontError
from ..responses import ok, from_error, server_error
from ..decorators import require_auth, require_admin


auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


@auth_bp.post("/register")
def register_route():
    """
    Register a customer account.

    Request body: name, email, password, phone, address, answer (all required).

    Returns 201 with the created user (no password hash). A known email
    answers 200 with success=false.
    """
    data = request.get_json(silent=True) or {}
    try:
        user = auth_service.register_user(data)
        return ok("User Register Successfully", 201, user=user.to_dict())
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error in Registeration", e)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate by email and password and issue a bearer token.

    Status codes are kept for existing clients: missing input and unknown
    email answer 404, a wrong password answers 200 with success=false.
    """
    data = request.get_json(silent=True) or {}
    try:
        user, token = auth_service.login(data.get("email"), data.get("password"))
        return ok("login successfully", 200, user=user.to_dict(), token=token)
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        return server_error("Error in login", e)


@auth_bp.post("/forgot-password")
def forgot_password_route():
    """
    Reset a password with the security-question answer.

    Request body: email, answer, newPassword.
    """
    data = request.get_json(silent=True) or {}
    try:
        auth_service.reset_password(data)
        return ok("Password Reset Successfully", 200)
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Something went wrong", e)


@auth_bp.get("/test")
@require_auth
def test_route():
    """Token probe used by the storefront client."""
    return "Protected Routes", 200, {"Content-Type": "text/plain; charset=utf-8"}


@auth_bp.get("/orders")
@require_auth
def orders_route():
    """Orders placed by the caller, with products and buyer name expanded."""
    try:
        orders = order_service.list_orders_for_buyer(g.user_id)
        return [order.to_dict() for order in orders], 200
    except Exception as e:
        return server_error("Error While Getting Orders", e)


@auth_bp.get("/all-orders")
@require_auth
@require_admin
def all_orders_route():
    """Every order, newest first."""
    try:
        orders = order_service.list_all_orders()
        return [order.to_dict() for order in orders], 200
    except Exception as e:
        return server_error("Error While Getting All Orders", e)


@auth_bp.put("/order-status/<int:order_id>")
@require_auth
@require_admin
def order_status_route(order_id: int):
    """
    Change an order's status.

    Request body: {"status": "<one of ORDER_STATUSES>"}

    Returns the updated order. Unknown order answers 404; an unknown status
    or a transition the status table does not allow answers 400.
    """
    data = request.get_json(silent=True) or {}
    try:
        order = order_service.update_order_status(order_id, data.get("status"))
        return order.to_dict(), 200
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Failed to update order status", e)
