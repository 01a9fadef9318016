# Overview: Flask API routes for product and payment operations; parses input and returns JSON responses.

# backend/storefront/routes/products.py
"""
Product catalog and checkout routes.

Reads are public. Create/update/delete require an administrator token.
The Braintree routes require a token; payment records an order for the
caller.
"""
from flask import Blueprint, request, g, current_app

from ..extensions import db
from ..services import products_service
from ..services import payment_service
from ..validation import StorefrontError
from ..responses import ok, fail, from_error, server_error
from ..decorators import require_auth, require_admin

product_bp = Blueprint("product", __name__, url_prefix="/api/v1/product")


@product_bp.post("/create-product")
@require_auth
@require_admin
def create_product_route():
    """
    Create a product.

    Request body: name, description, price, category (id), quantity,
    shipping (optional).
    """
    data = request.get_json(silent=True) or {}
    try:
        product = products_service.create_product(data)
        return ok("Product created successfully", 201, products=product.to_dict())
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error in creating product", e)


@product_bp.put("/update-product/<int:product_id>")
@require_auth
@require_admin
def update_product_route(product_id: int):
    """Replace a product's fields. Same validation as create."""
    data = request.get_json(silent=True) or {}
    try:
        product = products_service.update_product(product_id, data)
        return ok("Product updated successfully", 200, products=product.to_dict())
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error in updating product", e)


@product_bp.get("/get-product")
def list_products_route():
    """Newest products (PRODUCT_LIST_LIMIT)."""
    try:
        products = products_service.list_products()
        return ok(
            "All Products",
            200,
            countTotal=len(products),
            products=[p.to_dict() for p in products],
        )
    except Exception as e:
        return server_error("Error in getting products", e)


@product_bp.get("/get-product/<slug>")
def single_product_route(slug: str):
    try:
        product = products_service.get_product_by_slug(slug)
        if product is None:
            return fail("Product not found", 404)
        return ok("Single Product Fetched", 200, product=product.to_dict())
    except Exception as e:
        return server_error("Error while getting single product", e)


@product_bp.delete("/delete-product/<int:product_id>")
@require_auth
@require_admin
def delete_product_route(product_id: int):
    try:
        products_service.delete_product(product_id)
        return ok("Product Deleted successfully", 200)
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error while deleting product", e)


@product_bp.post("/product-filters")
def filter_products_route():
    """
    Request body:
    - checked: list of category ids (any match)
    - radio: [min, max] price, inclusive
    """
    data = request.get_json(silent=True) or {}
    try:
        products = products_service.filter_products(data.get("checked"), data.get("radio"))
        return ok(None, 200, products=[p.to_dict() for p in products])
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        return server_error("Error While Filtering Products", e)


@product_bp.get("/product-count")
def product_count_route():
    try:
        return ok(None, 200, total=products_service.count_products())
    except Exception as e:
        return server_error("Error in product count", e)


@product_bp.get("/product-list/<int:page>")
def product_page_route(page: int):
    try:
        products = products_service.list_products_page(page)
        return ok(None, 200, products=[p.to_dict(include_category=False) for p in products])
    except Exception as e:
        return server_error("Error in per page products", e)


@product_bp.get("/search/<keyword>")
def search_products_route(keyword: str):
    try:
        products = products_service.search_products(keyword)
        return [p.to_dict(include_category=False) for p in products], 200
    except Exception as e:
        return server_error("Error In Search Product API", e)


@product_bp.get("/related-product/<int:product_id>/<int:category_id>")
def related_products_route(product_id: int, category_id: int):
    try:
        products = products_service.related_products(product_id, category_id)
        return ok(None, 200, products=[p.to_dict() for p in products])
    except Exception as e:
        return server_error("Error while getting related products", e)


@product_bp.get("/product-category/<slug>")
def products_by_category_route(slug: str):
    try:
        category, products = products_service.products_in_category(slug)
        return ok(
            None,
            200,
            category=category.to_dict() if category else None,
            products=[p.to_dict() for p in products],
        )
    except Exception as e:
        return server_error("Error While Getting products", e)


# =============================================================================
# PAYMENT GATEWAY ROUTES
# =============================================================================

@product_bp.get("/braintree/token")
@require_auth
def braintree_token_route():
    """Client token for the browser drop-in."""
    try:
        gateway = payment_service.get_payment_gateway()
        token = payment_service.generate_client_token(gateway)
        return ok(None, 200, clientToken=token)
    except StorefrontError as e:
        return from_error(e)
    except Exception as e:
        return server_error("Error while getting payment token", e)


@product_bp.post("/braintree/payment")
@require_auth
def braintree_payment_route():
    """
    Charge the cart and record an order for the caller.

    Request body:
    {
        "nonce": "<payment method nonce>",
        "cart": [{"id": 1, "name": "...", "price": 19.99}, ...]
    }

    Returns {"ok": true} once the order is recorded.
    """
    data = request.get_json(silent=True) or {}
    try:
        gateway = payment_service.get_payment_gateway()
        order = payment_service.process_payment(gateway, g.user_id, data.get("cart"), data.get("nonce"))
        current_app.logger.info("Payment recorded as order id=%s", order.id)
        return {"ok": True}, 200
    except StorefrontError as e:
        db.session.rollback()
        return from_error(e)
    except Exception as e:
        db.session.rollback()
        return server_error("Error in payment", e)
