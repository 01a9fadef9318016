"""
Pytest fixtures for storefront backend tests.

Provides an in-memory database, a fake payment gateway, users of both roles
and bearer-token helpers.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from slugify import slugify

from storefront import create_app
from storefront.extensions import db
from storefront.models import User, Category, Product, Order, OrderItem, ROLE_ADMIN, ROLE_CUSTOMER
from storefront.services.auth_service import hash_password
from storefront.services.payment_service import PaymentGateway
from storefront.services import token_service
from storefront.time_utils import utcnow


TEST_JWT_SECRET = "test-jwt-secret"
CUSTOMER_PASSWORD = "Passw0rd!"
ADMIN_PASSWORD = "Adm1nPass!"


class FakeGateway(PaymentGateway):
    """Records sales; approves them unless `approve` is False."""

    def __init__(self, approve: bool = True):
        self.approve = approve
        self.sales = []

    def generate_client_token(self) -> str:
        return "fake-client-token"

    def sale(self, amount, nonce):
        self.sales.append((amount, nonce))
        if not self.approve:
            return {
                "success": False,
                "message": "Do Not Honor",
                "transaction": None,
                "errors": [],
            }
        return {
            "success": True,
            "message": None,
            "transaction": {"id": f"txn-{len(self.sales)}", "status": "submitted_for_settlement", "amount": str(amount)},
            "errors": [],
        }


class FailingGateway(PaymentGateway):
    """Every call raises, as when the provider is unreachable."""

    def generate_client_token(self) -> str:
        raise ConnectionError("gateway unreachable")

    def sale(self, amount, nonce):
        raise ConnectionError("gateway unreachable")


@pytest.fixture(scope='session')
def gateway():
    return FakeGateway()


@pytest.fixture(scope='session')
def app(gateway):
    """Create application for testing."""
    app = create_app(
        {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
            'JWT_SECRET': TEST_JWT_SECRET,
            'BCRYPT_ROUNDS': 4,
        },
        payment_gateway=gateway,
    )

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app, gateway):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        gateway.approve = True
        gateway.sales.clear()
        app.extensions["payment_gateway"] = gateway

        yield db.session

        # Cleanup after test
        db.session.rollback()


def make_user(session, email, password, role=ROLE_CUSTOMER, name="Test User", answer="blue"):
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=4),
        phone="555-123-4567",
        address="1 Main St",
        answer=answer,
        role=role,
    )
    session.add(user)
    session.commit()
    return user


@pytest.fixture(scope='function')
def customer(db_session):
    """Customer account (role 0)."""
    return make_user(db_session, "shopper@example.com", CUSTOMER_PASSWORD, name="Sam Shopper")


@pytest.fixture(scope='function')
def other_customer(db_session):
    return make_user(db_session, "other@example.com", CUSTOMER_PASSWORD, name="Olive Other")


@pytest.fixture(scope='function')
def admin(db_session):
    """Administrator account (role 1)."""
    return make_user(db_session, "admin@example.com", ADMIN_PASSWORD, role=ROLE_ADMIN, name="Ada Admin")


def token_for(user, **kwargs) -> str:
    """Sign a bearer token for `user` (inside the app context)."""
    return token_service.create_access_token(user.id, **kwargs)


def auth_headers(token: str, bearer: bool = True) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}' if bearer else token}


@pytest.fixture(scope='function')
def customer_headers(customer):
    return auth_headers(token_for(customer))


@pytest.fixture(scope='function')
def admin_headers(admin):
    return auth_headers(token_for(admin))


@pytest.fixture(scope='function')
def category(db_session):
    category = Category(name="Books", slug="books", description="Paper and ink")
    db_session.add(category)
    db_session.commit()
    return category


def make_product(session, category, name, price, quantity=5, created_at=None):
    product = Product(
        name=name,
        slug=slugify(name),
        description=f"About {name}",
        price=Decimal(str(price)),
        category_id=category.id if category else None,
        quantity=quantity,
        shipping=True,
        created_at=created_at or utcnow(),
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def products(db_session, category):
    """Three books, created one minute apart (oldest first)."""
    base = utcnow() - timedelta(hours=1)
    return [
        make_product(db_session, category, "Python Tricks", "19.99", created_at=base),
        make_product(db_session, category, "Fluent Python", "49.50", created_at=base + timedelta(minutes=1)),
        make_product(db_session, category, "Learning SQL", "35.00", created_at=base + timedelta(minutes=2)),
    ]


def make_order(session, buyer, products, created_at=None, status=None):
    order = Order(
        buyer_id=buyer.id,
        payment={"success": True, "transaction": {"id": "seed"}},
        created_at=created_at or utcnow(),
    )
    if status:
        order.status = status
    for position, product in enumerate(products):
        order.items.append(OrderItem(
            product_id=product.id,
            position=position,
            name=product.name,
            price=product.price,
        ))
    session.add(order)
    session.commit()
    return order
