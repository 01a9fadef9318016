# Overview: Flask API routes for category operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..extensions import db
from ..services import category_service
from ..validation import StorefrontError
from ..responses import ok, from_error, server_error
from ..decorators import require_auth, require_admin


category_bp = Blueprint("category", __name__, url_prefix="/api/v1/category")


@category_bp.post("/create-category")
@require_auth
@require_admin
def create_category_route():
    """
    Create a category. An existing name answers 200 with the existing record.
    """
    data = request.get_json(silent=True) or {}
    try:
        category, created = category_service.create_category(data.get("name"), data.get("description"))
        if not created:
            return ok("Category Already Exists", 200, category=category.to_dict())
        return ok("new category created", 201, category=category.to_dict())
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error in Category", e)


@category_bp.put("/update-category/<int:category_id>")
@require_auth
@require_admin
def update_category_route(category_id: int):
    data = request.get_json(silent=True) or {}
    try:
        category = category_service.update_category(category_id, data.get("name"), data.get("description"))
        return ok("Category Updated Successfully", 200, category=category.to_dict())
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error while updating category", e)


@category_bp.get("/get-category")
def list_categories_route():
    try:
        categories = category_service.list_categories()
        return ok("All Categories List", 200, category=[c.to_dict() for c in categories])
    except Exception as e:
        return server_error("Error while getting all categories", e)


@category_bp.get("/single-category/<slug>")
def single_category_route(slug: str):
    """Category by slug; `category` is null when nothing matches."""
    try:
        category = category_service.get_category_by_slug(slug)
        return ok(
            "Get Single Category Successfully",
            200,
            category=category.to_dict() if category else None,
        )
    except Exception as e:
        return server_error("Error While getting Single Category", e)


@category_bp.delete("/delete-category/<int:category_id>")
@require_auth
@require_admin
def delete_category_route(category_id: int):
    try:
        category_service.delete_category(category_id)
        return ok("Category Deleted Successfully", 200)
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("error while deleting category", e)
