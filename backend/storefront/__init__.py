# backend/storefront/__init__.py
from __future__ import annotations

from flask import Flask, request

from .config import Config
from .extensions import db, migrate
from .responses import fail

_NO_GATEWAY = object()


def create_app(config_overrides: dict | None = None, payment_gateway=_NO_GATEWAY) -> Flask:
    """
    Build the application.

    config_overrides: applied on top of Config before extensions bind
        (tests pass an in-memory database here).
    payment_gateway: a PaymentGateway to use instead of the one built from
        BRAINTREE_* config. Passing None runs without a gateway.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    from .services.payment_service import build_payment_gateway
    if payment_gateway is _NO_GATEWAY:
        payment_gateway = build_payment_gateway(app.config)
    app.extensions["payment_gateway"] = payment_gateway
    if payment_gateway is None:
        app.logger.warning("Payment gateway not configured; checkout routes will answer 500")

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.categories import category_bp
    from .routes.products import product_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(category_bp)
    app.register_blueprint(product_bp)

    @app.errorhandler(404)
    def not_found(error):
        return fail("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return fail("Method not allowed", 405)

    register_cors(app)

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def register_cors(app: Flask) -> None:
    """Echo allowed browser origins (CORS_ORIGINS) on every response."""
    allowed = set(app.config["CORS_ORIGINS"])

    @app.after_request
    def allow_storefront_origin(response):
        origin = request.headers.get("Origin")
        if origin and origin in allowed:
            response.headers.update({
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Headers": "Authorization, Content-Type",
                "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
                "Vary": "Origin",
            })
        return response
