# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create all tables (idempotent). Prefer `flask db upgrade` once migrations are in use.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# User inspection/bootstrap:
# - python -m flask users list
#   List all users with role.
# - python -m flask users create-admin --name Admin --email admin@shop.local --password "Admin123!" --phone 555-123-4567 --address "HQ" --answer "blue"
#   Create an administrator (prompts if options are omitted).
# - python -m flask users promote someone@shop.local
#   Give an existing user the administrator role.
#
# Orders:
# - python -m flask orders list [--status Processing]
#   List orders, newest first.

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import User, ROLE_ADMIN, ORDER_STATUSES
from .services import auth_service, order_service
from .validation import StorefrontError


def _print_table(columns, rows):
    """columns: (title, width) pairs; width 0 leaves the last column unpadded."""
    def line(values):
        return " ".join(f"{str(v):<{w}}" if w else str(v) for v, (_, w) in zip(values, columns))

    rule = "=" * 80
    click.echo(f"\n{rule}\n{line([title for title, _ in columns])}\n{rule}")
    for row in rows:
        click.echo(line(row))
    click.echo(f"{rule}\n")


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables that do not exist yet."""
    click.echo("START Initializing storefront database...")
    db.create_all()
    click.echo("PASS Tables ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@with_appcontext
def reset_db(yes):
    """Drop every table and create the schema again. Local databases only."""
    if not yes:
        click.confirm("WARN Every user, product and order will be lost. Continue?", abort=True)

    db.drop_all()
    click.echo("DELETE  Tables dropped.")
    db.create_all()
    click.echo("PASS Empty schema recreated.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their role."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users found.")
        return

    _print_table(
        [("ID", 5), ("Name", 20), ("Email", 35), ("Role", 0)],
        [(u.id, u.name, u.email, "admin" if u.is_admin else "customer") for u in users],
    )


@users_group.command('create-admin')
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--phone', prompt=True)
@click.option('--address', prompt=True)
@click.option('--answer', prompt='Security answer')
@with_appcontext
def create_admin(name, email, password, phone, address, answer):
    """
    Create an administrator account.

    Goes through the same validation as public registration
    (email/phone format, password policy, unique email).
    """
    payload = {
        "name": name,
        "email": email,
        "password": password,
        "phone": phone,
        "address": address,
        "answer": answer,
    }
    try:
        user = auth_service.register_user(payload, role=ROLE_ADMIN)
    except StorefrontError as e:
        raise click.ClickException(e.message)

    click.echo(f"PASS Created admin: {user.name} ({user.email}) id={user.id}")


@users_group.command('promote')
@click.argument('email')
@with_appcontext
def promote_user(email):
    """Give an existing user the administrator role."""
    try:
        user = auth_service.set_role(email, ROLE_ADMIN)
    except StorefrontError as e:
        raise click.ClickException(e.message)
    click.echo(f"PASS {user.email} is now an administrator")


@click.group('orders')
def orders_group():
    """Order inspection commands."""


@orders_group.command('list')
@click.option('--status', type=click.Choice(ORDER_STATUSES), help='Only orders in this status')
@with_appcontext
def list_orders(status):
    """List orders, newest first."""
    orders = order_service.list_all_orders()
    if status:
        orders = [o for o in orders if o.status == status]

    if not orders:
        click.echo("No orders found.")
        return

    rows = []
    for order in orders:
        created = order.created_at.isoformat(timespec="seconds") if order.created_at else "-"
        paid = "yes" if (order.payment or {}).get("success") else "no"
        buyer = order.buyer.name if order.buyer else "-"
        rows.append((order.id, created, buyer, len(order.items), paid, order.status))

    _print_table(
        [("ID", 6), ("Created", 26), ("Buyer", 20), ("Items", 6), ("Paid", 6), ("Status", 0)],
        rows,
    )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(orders_group)
