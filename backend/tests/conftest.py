"""
Pytest fixtures for SPM backend tests.

Provides in-memory database setup, one user per role, login helpers and
catalog fixtures.
"""

from decimal import Decimal

import pytest

from spm import create_app
from spm.extensions import db
from spm.models import Product
from spm.models.auth import ROLE_ALMACEN, ROLE_CAJERO, ROLE_JEFE
from spm.services.auth_service import create_user


PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'LOW_STOCK_THRESHOLD': 5,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def users(db_session):
    """One active user per role; bcrypt at minimum cost to keep tests fast."""
    return {
        rol: create_user(username=rol, password=PASSWORD, rol=rol, rounds=4)
        for rol in (ROLE_JEFE, ROLE_ALMACEN, ROLE_CAJERO)
    }


@pytest.fixture(scope='function')
def jefe_headers(client, users):
    return auth_headers(get_auth_token(client, ROLE_JEFE, PASSWORD))


@pytest.fixture(scope='function')
def almacen_headers(client, users):
    return auth_headers(get_auth_token(client, ROLE_ALMACEN, PASSWORD))


@pytest.fixture(scope='function')
def cajero_headers(client, users):
    return auth_headers(get_auth_token(client, ROLE_CAJERO, PASSWORD))


@pytest.fixture(scope='function')
def agua(db_session):
    """Catalog product: Agua, 1.50, 10 in stock."""
    product = Product(
        codigo_barras="7750001000011",
        nombre="Agua",
        precio=Decimal("1.50"),
        stock=10,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def galletas(db_session):
    """Catalog product: Galletas, 2.00, 3 in stock."""
    product = Product(
        codigo_barras="7750001000066",
        nombre="Galletas",
        precio=Decimal("2.00"),
        stock=3,
    )
    db_session.add(product)
    db_session.commit()
    return product


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def reload(model, pk):
    """Fetch a row as the database holds it now, bypassing the identity map."""
    db.session.expire_all()
    return db.session.get(model, pk)
