# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from main import create_app
from core.config import settings
from dependencies.auth import CurrentUser, get_current_permissions, get_current_user
from models.enums import Role
from models.permission import UserPermissionRecord


BOOTSTRAP_EMAIL = "owner@example.com"


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    application = create_app()
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_record():
    """Build a permission record with sensible defaults."""
    def _make(role=Role.user, permissions=None, allowed_branches=None, user_id="user-1", email="user@example.com"):
        return UserPermissionRecord(
            user_id=user_id,
            email=email,
            role=role,
            permissions=permissions or {},
            allowed_branches=allowed_branches or [],
        )
    return _make


@pytest.fixture
def as_record(app):
    """Make every request resolve to the given permission record (or None)."""
    def _as(record):
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(
            id=record.user_id if record else "anon",
            email=record.email if record else None,
        )
        app.dependency_overrides[get_current_permissions] = lambda: record
    return _as


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client


@pytest.fixture(autouse=True)
def bootstrap_email(monkeypatch):
    monkeypatch.setattr(settings, "BOOTSTRAP_MASTER_EMAIL", BOOTSTRAP_EMAIL)
    return BOOTSTRAP_EMAIL


@pytest.fixture(autouse=True)
def reset_state():
    """Reset the record cache and watcher before each test."""
    from core.cache import cache_clear
    from core.permission_watch import get_watcher
    cache_clear()
    get_watcher().clear()
    yield
    cache_clear()
    get_watcher().clear()
