# Overview: Flask CLI command groups for bootstrap, inspection, and demo data.

# backend/spm/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Idempotent bootstrap: creates tables and one default user per role.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
#   List all users with role and active status.
# - python -m flask users create --username ana --password "Password123!" --rol cajero
#   Create a user (prompts if options are omitted).
#
# Demo data:
# - python -m flask seed demo
#   Insert a handful of catalog products (skips names that already exist).

from decimal import Decimal

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Product, User
from .models.auth import ROLES
from .services.auth_service import create_user, PasswordValidationError


DEFAULT_PASSWORD = "Password123!"

DEFAULT_USERS = [
    ("jefe", "jefe"),
    ("almacen", "almacen"),
    ("cajero", "cajero"),
]

DEMO_PRODUCTS = [
    ("7750001000011", "Agua", Decimal("1.50"), 24),
    ("7750001000028", "Gaseosa 500ml", Decimal("2.50"), 18),
    ("7750001000035", "Pan de molde", Decimal("6.90"), 8),
    ("7750001000042", "Leche entera 1L", Decimal("4.20"), 12),
    ("7750001000059", "Arroz 1kg", Decimal("4.80"), 3),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_system():
    """
    Create all tables and one default user per role.

    Users: jefe, almacen, cajero. All passwords default to "Password123!".

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing SPM...")
    db.create_all()
    click.echo("PASS Tables ready")

    for username, rol in DEFAULT_USERS:
        existing = db.session.query(User).filter_by(username=username).first()
        if existing:
            click.echo(f"WARN  User '{username}' already exists, skipping...")
            continue
        try:
            create_user(username=username, password=DEFAULT_PASSWORD, rol=rol)
        except (PasswordValidationError, ValueError) as e:
            click.echo(f"FAIL Failed to create user '{username}': {e}")
            continue
        click.echo(f"PASS Created user: {username} with role '{rol}'")

    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    for username, _ in DEFAULT_USERS:
        click.echo(f"   {username:<8} / {DEFAULT_PASSWORD}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init-db' to initialize.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--rol', type=click.Choice(list(ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(username, password, rol):
    """
    Create a new user.

    Password must meet strength requirements: 8+ chars, uppercase,
    lowercase, digit, special char.
    """
    try:
        user = create_user(username=username, password=password, rol=rol)
    except PasswordValidationError as e:
        click.echo(f"FAIL Password validation failed: {e}")
        click.echo("Requirements: 8+ chars, uppercase, lowercase, digit, special char")
        raise SystemExit(1)
    except ValueError as e:
        click.echo(f"FAIL Failed to create user: {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created user: {user.username} with role '{user.rol}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their role."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*60)
    click.echo(f"{'ID':<5} {'Username':<20} {'Rol':<10} {'Active':<8}")
    click.echo("="*60)

    for user in users:
        active_str = "Yes" if user.activo else "No"
        click.echo(f"{user.id:<5} {user.username:<20} {user.rol:<10} {active_str:<8}")

    click.echo("="*60 + "\n")


@click.group('seed')
def seed_group():
    """Demo data commands."""


@seed_group.command('demo')
@with_appcontext
def seed_demo():
    """Insert demo catalog products (idempotent by barcode)."""
    created = 0
    for codigo_barras, nombre, precio, stock in DEMO_PRODUCTS:
        if db.session.query(Product).filter_by(codigo_barras=codigo_barras).first():
            continue
        db.session.add(Product(codigo_barras=codigo_barras, nombre=nombre, precio=precio, stock=stock))
        created += 1
    db.session.commit()
    click.echo(f"PASS Seeded {created} product(s)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(seed_group)
