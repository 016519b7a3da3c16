from __future__ import annotations

from pathlib import Path
import sys

import pytest
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from storefront import create_app
from storefront.auth.services import register_user
from storefront.auth.session import SESSION_ID_KEY
from storefront.catalog.services import create_product
from storefront.config import Config
from storefront.extensions import db

DEFAULT_PASSWORD = "secret-pass"


class TestingConfig(Config):
    """Configuration tuned for isolated unit tests."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }
    SEED_CATALOG = False
    DEFERRED_FEEDS = ()


@pytest.fixture()
def app():
    """Create a Flask app instance backed by an in-memory database."""

    application = create_app(TestingConfig)
    yield application
    with application.app_context():
        db.drop_all()
        db.session.remove()


@pytest.fixture()
def client(app):
    """Provide a Flask test client for request assertions."""

    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Create accounts and return their ids."""

    def factory(username: str = "shopper", *, is_admin: bool = False, email: str | None = None) -> int:
        with app.app_context():
            user = register_user(
                username=username,
                email=email or f"{username}@example.com",
                password=DEFAULT_PASSWORD,
                is_admin=is_admin,
            )
            return user.id

    return factory


@pytest.fixture()
def make_product(app):
    """Create catalog products and return their ids."""

    def factory(name: str = "Desk Lamp", price: str = "40.00", category: str = "lifestyle", **extra) -> int:
        with app.app_context():
            return create_product(name=name, price=price, category=category, **extra).id

    return factory


@pytest.fixture()
def login(client):
    """Sign the test client in through the auth form."""

    def do_login(username: str = "shopper", password: str = DEFAULT_PASSWORD):
        return client.post("/auth/login", data={"username": username, "password": password})

    return do_login


@pytest.fixture()
def session_store(app, client):
    """Return the session store bound to the test client's cookie."""

    def resolve():
        client.get("/help/faqs")
        with client.session_transaction() as cookie:
            session_id = cookie[SESSION_ID_KEY]
        return app.extensions["session_registry"].get(session_id)

    return resolve
