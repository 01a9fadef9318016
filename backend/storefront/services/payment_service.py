# Overview: Service-layer operations for payments; wraps the external gateway and records orders.

"""
Payment Processing Service

The gateway is an external collaborator with a two-call contract:
- generate_client_token(): token the browser drop-in needs
- sale(amount, nonce): submit a sale for settlement, return the result

The gateway instance is built once by the app factory and kept on
app.extensions["payment_gateway"]; tests inject their own.

A sale that returns a result (approved or declined) becomes an Order that
stores the result verbatim. A sale that raises creates nothing.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import braintree
from flask import current_app

from ..validation import StorefrontError, ValidationError, is_blank
from . import order_service

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

BRAINTREE_ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
}


class PaymentGatewayError(StorefrontError):
    """Raised when the gateway is unavailable or fails."""
    status_code = 500


class PaymentGateway:
    """Interface for payment gateways."""

    def generate_client_token(self) -> str:
        raise NotImplementedError

    def sale(self, amount: Decimal, nonce: str) -> dict:
        """Submit a sale and return the normalised result dict."""
        raise NotImplementedError


class BraintreePaymentGateway(PaymentGateway):
    """Braintree implementation of PaymentGateway."""

    def __init__(self, environment: str, merchant_id: str, public_key: str, private_key: str):
        env = BRAINTREE_ENVIRONMENTS.get(environment.lower())
        if env is None:
            raise ValueError(f"Unknown Braintree environment: {environment}")
        self._gateway = braintree.BraintreeGateway(
            braintree.Configuration(
                environment=env,
                merchant_id=merchant_id,
                public_key=public_key,
                private_key=private_key,
            )
        )

    def generate_client_token(self) -> str:
        return self._gateway.client_token.generate()

    def sale(self, amount: Decimal, nonce: str) -> dict:
        result = self._gateway.transaction.sale({
            "amount": str(amount),
            "payment_method_nonce": nonce,
            "options": {
                "submit_for_settlement": True,
            },
        })
        return normalize_sale_result(result)


def normalize_sale_result(result: Any) -> dict:
    """
    Flatten a Braintree SuccessfulResult/ErrorResult into JSON-safe data.
    """
    data = {
        "success": bool(getattr(result, "is_success", False)),
        "message": getattr(result, "message", None),
        "transaction": None,
        "errors": [],
    }

    transaction = getattr(result, "transaction", None)
    if transaction is not None:
        data["transaction"] = {
            "id": transaction.id,
            "status": transaction.status,
            "amount": str(transaction.amount),
        }

    errors = getattr(result, "errors", None)
    if errors is not None:
        for error in errors.deep_errors:
            data["errors"].append({
                "code": error.code,
                "attribute": error.attribute,
                "message": error.message,
            })

    return data


def build_payment_gateway(config) -> PaymentGateway | None:
    """
    Build the configured gateway, or None when credentials are missing.
    """
    merchant_id = config.get("BRAINTREE_MERCHANT_ID")
    public_key = config.get("BRAINTREE_PUBLIC_KEY")
    private_key = config.get("BRAINTREE_PRIVATE_KEY")
    if not (merchant_id and public_key and private_key):
        return None

    return BraintreePaymentGateway(
        environment=config.get("BRAINTREE_ENVIRONMENT", "sandbox"),
        merchant_id=merchant_id,
        public_key=public_key,
        private_key=private_key,
    )


def get_payment_gateway() -> PaymentGateway:
    gateway = current_app.extensions.get("payment_gateway")
    if gateway is None:
        raise PaymentGatewayError("Payment gateway is not configured")
    return gateway


def cart_prices(cart) -> list[Decimal]:
    """
    Validate each cart entry's price.

    Raises ValidationError("Cart is Empty") or
    ValidationError("Invalid cart item price").
    """
    if not isinstance(cart, list) or not cart:
        raise ValidationError("Cart is Empty")

    prices = []
    for entry in cart:
        if not isinstance(entry, dict):
            raise ValidationError("Invalid cart item price")
        raw = entry.get("price")
        if raw is None or isinstance(raw, bool):
            raise ValidationError("Invalid cart item price")
        try:
            price = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise ValidationError("Invalid cart item price")
        if not price.is_finite() or price < 0:
            raise ValidationError("Invalid cart item price")
        prices.append(price.quantize(CENTS))
    return prices


def generate_client_token(gateway: PaymentGateway) -> str:
    try:
        return gateway.generate_client_token()
    except Exception as exc:
        logger.exception("Client token generation failed")
        raise PaymentGatewayError("Error while getting payment token") from exc


def process_payment(gateway: PaymentGateway, buyer_id: int, cart, nonce):
    """
    Charge the cart total and record the order.

    Returns the created Order.

    Raises:
        ValidationError: missing nonce, empty cart, bad price
        PaymentGatewayError: the gateway call raised (no order is created)
    """
    if is_blank(nonce):
        raise ValidationError("Nonce is required")

    prices = cart_prices(cart)
    amount = sum(prices, Decimal("0")).quantize(CENTS)

    try:
        result = gateway.sale(amount, nonce)
    except Exception as exc:
        logger.exception("Sale of %s failed for buyer id=%s", amount, buyer_id)
        raise PaymentGatewayError("Error in payment") from exc

    if not result.get("success"):
        logger.warning("Sale of %s declined for buyer id=%s: %s", amount, buyer_id, result.get("message"))

    return order_service.create_order(buyer_id, cart, prices, result)
