# backend/storefront/services/products_service.py
"""
Products Service

Create/update validate fields in a fixed precedence so the first problem
reported is stable: name, description, price, category, quantity, then the
numeric checks. Slugs follow the product name.
"""
from __future__ import annotations

from decimal import Decimal

from flask import current_app
from slugify import slugify
from sqlalchemy import or_

from ..extensions import db
from ..models import Product, Category
from ..validation import (
    ValidationError,
    NotFoundError,
    require_fields,
    parse_positive_number,
)

PRODUCT_REQUIRED_FIELDS = [
    ("name", "Name is required"),
    ("description", "Description is required"),
    ("price", "Price is required"),
    ("category", "Category is required"),
    ("quantity", "Quantity is required"),
]


def _parse_shipping(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def validate_product_payload(payload: dict) -> dict:
    """
    Validate a create/update payload and return normalised column values.

    Raises ValidationError or NotFoundError("Category not found").
    """
    require_fields(payload, PRODUCT_REQUIRED_FIELDS)

    price = parse_positive_number(payload["price"], "Price")
    quantity = parse_positive_number(payload["quantity"], "Quantity", integer=True)

    try:
        category_id = int(payload["category"])
    except (TypeError, ValueError):
        raise ValidationError("Category must be a valid id")
    if db.session.get(Category, category_id) is None:
        raise NotFoundError("Category not found")

    name = str(payload["name"]).strip()
    return {
        "name": name,
        "slug": slugify(name),
        "description": str(payload["description"]).strip(),
        "price": price.quantize(Decimal("0.01")),
        "category_id": category_id,
        "quantity": quantity,
        "shipping": _parse_shipping(payload.get("shipping", False)),
    }


def create_product(payload: dict) -> Product:
    fields = validate_product_payload(payload)
    product = Product(**fields)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(product_id: int, payload: dict) -> Product:
    fields = validate_product_payload(payload)

    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")

    for key, value in fields.items():
        setattr(product, key, value)
    db.session.commit()
    return product


def delete_product(product_id: int) -> None:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    db.session.delete(product)
    db.session.commit()


def get_product_by_slug(slug: str) -> Product | None:
    return db.session.query(Product).filter_by(slug=slug).first()


def _newest_first(query):
    return query.order_by(Product.created_at.desc(), Product.id.desc())


def list_products(limit: int | None = None) -> list[Product]:
    if limit is None:
        limit = current_app.config["PRODUCT_LIST_LIMIT"]
    return _newest_first(db.session.query(Product)).limit(limit).all()


def count_products() -> int:
    return db.session.query(Product).count()


def list_products_page(page: int, per_page: int | None = None) -> list[Product]:
    """1-indexed page of products, newest first."""
    if per_page is None:
        per_page = current_app.config["PRODUCTS_PER_PAGE"]
    page = max(page, 1)
    return (
        _newest_first(db.session.query(Product))
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )


def filter_products(category_ids=None, price_range=None) -> list[Product]:
    """
    Filter by any of `category_ids` and an inclusive [min, max] price range.
    Empty arguments do not filter.
    """
    query = db.session.query(Product)
    if category_ids:
        try:
            ids = [int(c) for c in category_ids]
        except (TypeError, ValueError):
            raise ValidationError("Invalid category filter")
        query = query.filter(Product.category_id.in_(ids))
    if price_range:
        if not isinstance(price_range, (list, tuple)) or len(price_range) != 2:
            raise ValidationError("Invalid price filter")
        try:
            low, high = (Decimal(str(v)) for v in price_range)
        except ArithmeticError:
            raise ValidationError("Invalid price filter")
        query = query.filter(Product.price >= low, Product.price <= high)
    return _newest_first(query).all()


def search_products(keyword: str) -> list[Product]:
    """Case-insensitive substring match on name or description."""
    pattern = f"%{keyword}%"
    return (
        db.session.query(Product)
        .filter(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
        .order_by(Product.id.asc())
        .all()
    )


def related_products(product_id: int, category_id: int, limit: int | None = None) -> list[Product]:
    if limit is None:
        limit = current_app.config["RELATED_PRODUCTS_LIMIT"]
    return (
        db.session.query(Product)
        .filter(Product.category_id == category_id, Product.id != product_id)
        .order_by(Product.id.asc())
        .limit(limit)
        .all()
    )


def products_in_category(slug: str) -> tuple[Category | None, list[Product]]:
    category = db.session.query(Category).filter_by(slug=slug).first()
    if category is None:
        return None, []
    products = (
        db.session.query(Product)
        .filter(Product.category_id == category.id)
        .order_by(Product.id.asc())
        .all()
    )
    return category, products
