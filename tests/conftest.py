"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.config import APIConfig
from api.main import create_app
from catalog.store import BookStore, UserStore
from utilities.config import AppConfig


@pytest.fixture
def app_config():
    """Core settings with a cheap hash and a known signing key."""
    return AppConfig(
        secret_key="test-secret-key-for-hs256-signing-0123456789",
        algorithm="HS256",
        access_token_expire_minutes=60,
        password_hash_iterations=1000,
        review_delete_delay_seconds=0.0,
        log_level="WARNING",
        log_format="console",
        log_file=None,
        debug=False,
    )


@pytest.fixture
def api_config():
    """HTTP settings for testing."""
    return APIConfig(api_title="Bookshelf Test API", api_version="9.9.9", debug=False)


@pytest.fixture
def book_store():
    """Freshly seeded book store."""
    return BookStore()


@pytest.fixture
def user_store(app_config):
    """Empty user store."""
    return UserStore(password_hash_iterations=app_config.password_hash_iterations)


@pytest.fixture
def app(app_config, api_config, book_store, user_store):
    """Application wired to the per-test stores."""
    return create_app(
        app_config=app_config,
        api_config=api_config,
        book_store=book_store,
        user_store=user_store,
    )


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    """Register (if needed) and log in a user, returning auth headers."""
    def _login(username: str, password: str = "pw") -> dict:
        client.post("/register", json={"username": username, "password": password})
        response = client.post("/customer/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _login
