import os

# Settings are read once at import time, so configure before importing abhaya.
os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = ""
os.environ["AUTHORITY_EMAILS"] = "authority@example.org"

import pytest
from fastapi.testclient import TestClient

from abhaya.config.firebase import get_db, reset_db
from abhaya.main import app
from abhaya.models.user import AuthenticatedUser
from abhaya.utils.security import get_optional_user

CITIZEN = AuthenticatedUser(uid="citizen-1", email="citizen@example.org")
AUTHORITY = AuthenticatedUser(uid="authority-1", email="authority@example.org", is_authority=True)


@pytest.fixture(autouse=True)
def db():
    """Fresh in-memory store for every test."""
    reset_db()
    yield get_db()
    reset_db()


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Call login(user) to act as that user for subsequent requests; login(None) logs out."""
    def _login(user):
        app.dependency_overrides[get_optional_user] = lambda: user
    yield _login
    app.dependency_overrides.clear()
