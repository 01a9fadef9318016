# Overview: Service-layer operations for orders; listing, creation and status transitions.

"""
Order Service

Orders are created once from a payment result and then only move through
the status table below. Every read re-queries the store; nothing is cached
between requests.

STATUS TABLE:
    Not Process -> Processing -> Shipped -> Delivered
    any non-terminal status -> Cancelled
    Delivered and Cancelled are terminal.
Re-setting the current status is accepted as a no-op.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy.orm import joinedload, selectinload

from ..extensions import db
from ..models import (
    Order,
    OrderItem,
    Product,
    ORDER_STATUSES,
    ORDER_NOT_PROCESSED,
    ORDER_PROCESSING,
    ORDER_SHIPPED,
    ORDER_DELIVERED,
    ORDER_CANCELLED,
)
from ..validation import ValidationError, NotFoundError

logger = logging.getLogger(__name__)


ORDER_TRANSITIONS = {
    ORDER_NOT_PROCESSED: {ORDER_PROCESSING, ORDER_CANCELLED},
    ORDER_PROCESSING: {ORDER_SHIPPED, ORDER_CANCELLED},
    ORDER_SHIPPED: {ORDER_DELIVERED, ORDER_CANCELLED},
    ORDER_DELIVERED: set(),
    ORDER_CANCELLED: set(),
}


def can_transition(current: str, new: str) -> bool:
    if current == new:
        return True
    return new in ORDER_TRANSITIONS.get(current, set())


def _expanded_query():
    return db.session.query(Order).options(
        selectinload(Order.items).joinedload(OrderItem.product),
        joinedload(Order.buyer),
    )


def list_orders_for_buyer(buyer_id: int) -> list[Order]:
    """All orders placed by `buyer_id`, oldest first."""
    return (
        _expanded_query()
        .filter(Order.buyer_id == buyer_id)
        .order_by(Order.created_at.asc(), Order.id.asc())
        .all()
    )


def list_all_orders() -> list[Order]:
    """All orders, newest first (ties broken by id, newest first)."""
    return (
        _expanded_query()
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_order(order_id: int) -> Order | None:
    return _expanded_query().filter(Order.id == order_id).first()


def update_order_status(order_id: int, new_status) -> Order:
    """
    Move an order to `new_status`.

    Raises:
        ValidationError: unknown status, or a transition outside the table
        NotFoundError: no such order
    """
    if not isinstance(new_status, str) or new_status not in ORDER_STATUSES:
        raise ValidationError("Invalid order status")

    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    if not can_transition(order.status, new_status):
        raise ValidationError(f"Cannot change order status from {order.status} to {new_status}")

    if order.status != new_status:
        logger.info("Order %s status %s -> %s", order.id, order.status, new_status)
        order.status = new_status
        db.session.commit()

    return get_order(order.id)


def _cart_product_id(entry: dict) -> int | None:
    raw = entry.get("id", entry.get("_id"))
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def create_order(buyer_id: int, cart: list[dict], prices: list[Decimal], payment: dict) -> Order:
    """
    Persist an order for a captured payment.

    `prices` holds the already-validated price of each cart entry, in cart
    order. Entries that name an existing product keep a reference to it.
    """
    order = Order(buyer_id=buyer_id, payment=payment, status=ORDER_NOT_PROCESSED)

    for position, (entry, price) in enumerate(zip(cart, prices)):
        product_id = _cart_product_id(entry)
        product = db.session.get(Product, product_id) if product_id is not None else None
        name = entry.get("name") or (product.name if product else None)
        order.items.append(OrderItem(
            product_id=product.id if product else None,
            position=position,
            name=name,
            price=price,
        ))

    db.session.add(order)
    db.session.commit()

    logger.info("Created order id=%s for buyer id=%s (%d items)", order.id, buyer_id, len(order.items))
    return order
