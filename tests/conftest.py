"""
Pytest configuration and fixtures for Recipeshare tests.
"""

import os

import pytest

# Set test environment before importing recipeshare modules
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ["RECIPESHARE_ENV"] = "development"

from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from recipeshare.auth.session import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE  # noqa: E402
from recipeshare.web import auth as web_auth  # noqa: E402
from recipeshare.web.app import app  # noqa: E402

from tests.fakes import FakeBackend  # noqa: E402


@pytest.fixture
def backend():
    """In-memory Supabase with two categories."""
    fake = FakeBackend()
    fake.seed(
        "categories",
        {"id": 1, "category_name": "Supid"},
        {"id": 2, "category_name": "Pearoad"},
    )
    return fake


@pytest.fixture
def alice(backend):
    return backend.auth.create_user("alice@example.com", "salasona", "alice")


@pytest.fixture
def bob(backend):
    return backend.auth.create_user("bob@example.com", "parool123", "bob")


@pytest.fixture
def sample_form():
    """Posted fields of a complete recipe form."""
    return {
        "title": "Supp",
        "ingredient_name": ["sool"],
        "ingredient_quantity": ["1tl"],
        "servings": "2",
        "category_id": "1",
        "total_time_minutes": "30",
        "steps_description": "Keeda.",
        "action": "submit",
    }


@pytest.fixture
def client(backend):
    """TestClient wired to the fake backend; redirects are not followed."""

    def user_client(user: web_auth.AuthenticatedUser = Depends(web_auth.get_current_user)):
        backend.auth.set_session(user.access_token, user.refresh_token)
        return backend

    app.dependency_overrides[web_auth.get_anon_client] = lambda: backend
    app.dependency_overrides[web_auth.get_backend_service_client] = lambda: backend
    app.dependency_overrides[web_auth.get_user_client] = user_client

    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(client, alice):
    """Client carrying alice's session cookies."""
    client.cookies.set(ACCESS_TOKEN_COOKIE, alice.access_token)
    client.cookies.set(REFRESH_TOKEN_COOKIE, alice.refresh_token)
    return client
