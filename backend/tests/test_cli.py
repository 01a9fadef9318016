"""
Flask CLI commands.
"""

from storefront.models import User, ROLE_ADMIN

from conftest import make_order


class TestUsersCommands:

    def test_create_admin(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create-admin",
            "--name", "Root Admin",
            "--email", "root@shop.local",
            "--password", "R00t!pass",
            "--phone", "555-123-4567",
            "--address", "HQ",
            "--answer", "blue",
        ])
        assert result.exit_code == 0, result.output
        assert "Created admin" in result.output

        db_session.expire_all()
        user = db_session.query(User).filter_by(email="root@shop.local").one()
        assert user.role == ROLE_ADMIN

    def test_create_admin_rejects_weak_password(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create-admin",
            "--name", "Root Admin",
            "--email", "root@shop.local",
            "--password", "weak",
            "--phone", "555-123-4567",
            "--address", "HQ",
            "--answer", "blue",
        ])
        assert result.exit_code != 0
        assert "Invalid password" in result.output

    def test_promote(self, app, db_session, customer):
        result = app.test_cli_runner().invoke(args=["users", "promote", customer.email])
        assert result.exit_code == 0, result.output

        db_session.expire_all()
        assert db_session.get(User, customer.id).is_admin

    def test_promote_unknown(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["users", "promote", "ghost@example.com"])
        assert result.exit_code != 0

    def test_list(self, app, customer, admin):
        result = app.test_cli_runner().invoke(args=["users", "list"])
        assert result.exit_code == 0
        assert "shopper@example.com" in result.output
        assert "admin@example.com" in result.output


class TestOrdersCommands:

    def test_list_by_status(self, app, db_session, customer, products):
        make_order(db_session, customer, products[:1])
        make_order(db_session, customer, products[1:], status="Shipped")

        result = app.test_cli_runner().invoke(args=["orders", "list", "--status", "Shipped"])
        assert result.exit_code == 0, result.output
        assert "Shipped" in result.output
        assert "Not Process" not in result.output

    def test_list_empty(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["orders", "list"])
        assert "No orders found." in result.output
