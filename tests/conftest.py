"""Shared test fixtures for the token auth API."""

import pytest

from api import create_app
from services import auth as auth_service


PASSWORD = "pw123"


@pytest.fixture
def app():
    """Application on a fresh in-memory database."""
    app = create_app("testing")
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as client:
        yield client


@pytest.fixture
def app_ctx(app):
    """Pushed app context for calling the service and codec directly."""
    with app.app_context():
        yield app


@pytest.fixture
def user(app_ctx):
    """A registered account. Returns (user, password)."""
    user = auth_service.register("a@x.com", PASSWORD)
    return user, PASSWORD


@pytest.fixture
def tokens(user):
    """(access_token, refresh_token) from a successful sign-in."""
    registered, password = user
    return auth_service.authenticate(registered.email, password)


@pytest.fixture
def auth_headers(tokens):
    """Authorization header carrying a valid access token."""
    access_token, _refresh_token = tokens
    return {"Authorization": f"Bearer {access_token}"}
