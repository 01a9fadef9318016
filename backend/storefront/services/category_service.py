# Overview: Service-layer operations for categories; encapsulates business logic and database work.

from __future__ import annotations

from slugify import slugify

from ..extensions import db
from ..models import Category
from ..validation import ValidationError, NotFoundError, is_blank


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.name.asc()).all()


def get_category_by_slug(slug: str) -> Category | None:
    return db.session.query(Category).filter_by(slug=slug).first()


def find_category_by_name(name: str) -> Category | None:
    return db.session.query(Category).filter_by(name=name).first()


def create_category(name, description=None) -> tuple[Category, bool]:
    """
    Create a category unless one with the same name exists.

    Returns (category, created).
    """
    if is_blank(name):
        raise ValidationError("Name is required")
    name = str(name).strip()

    existing = find_category_by_name(name)
    if existing:
        return existing, False

    category = Category(name=name, slug=slugify(name), description=description)
    db.session.add(category)
    db.session.commit()
    return category, True


def update_category(category_id: int, name, description=None) -> Category:
    """Rename a category. The slug follows the new name."""
    if is_blank(name):
        raise ValidationError("Name is required")

    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")

    category.name = str(name).strip()
    category.slug = slugify(category.name)
    if description is not None:
        category.description = description
    db.session.commit()
    return category


def delete_category(category_id: int) -> None:
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    # Products keep existing, uncategorised
    for product in category.products:
        product.category_id = None
    db.session.delete(category)
    db.session.commit()
