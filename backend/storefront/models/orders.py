from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z, utcnow


# Lifecycle status
ORDER_NOT_PROCESSED = "Not Process"
ORDER_PROCESSING = "Processing"
ORDER_SHIPPED = "Shipped"
ORDER_DELIVERED = "Delivered"
ORDER_CANCELLED = "Cancelled"

ORDER_STATUSES = (
    ORDER_NOT_PROCESSED,
    ORDER_PROCESSING,
    ORDER_SHIPPED,
    ORDER_DELIVERED,
    ORDER_CANCELLED,
)


class Order(db.Model):
    """
    An order is created once, when the payment gateway returns a sale result,
    and afterwards only its status changes. Orders are never deleted.

    `payment` holds the normalised gateway result verbatim (success flag,
    transaction detail, provider errors).
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_buyer_created", "buyer_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Not a hard guarantee: the buyer may have been removed out of band
    buyer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    payment = db.Column(db.JSON, nullable=False, default=dict)
    status = db.Column(db.String(32), nullable=False, default=ORDER_NOT_PROCESSED, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    buyer = db.relationship("User", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem",
        backref="order",
        order_by="OrderItem.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} buyer_id={self.buyer_id} status={self.status!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "products": [item.to_dict() for item in self.items],
            "payment": self.payment,
            "buyer": {"id": self.buyer.id, "name": self.buyer.name} if self.buyer else None,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class OrderItem(db.Model):
    """One cart entry as purchased: product reference plus name/price snapshot."""
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    position = db.Column(db.Integer, nullable=False)

    name = db.Column(db.String(255), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        # Expanded product when it still exists, else the snapshot.
        if self.product is not None:
            data = self.product.to_dict(include_category=False)
        else:
            data = {"id": self.product_id, "name": self.name}
        data["price_paid"] = float(self.price)
        return data
