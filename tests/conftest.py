# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

from datetime import date
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from main import create_app
from dependencies.auth import CurrentUser, get_current_user
from core.access_guard import AccessGuard
from core.navigation import NavigationResolver
from core.permissions import PermissionTable
from core.screens import ScreenGate
from core.streaks import StreakEngine


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


# ------------------------------------------------------------------
# Services
# ------------------------------------------------------------------
@pytest.fixture
def permission_table() -> PermissionTable:
    return PermissionTable()


@pytest.fixture
def screen_gate(permission_table) -> ScreenGate:
    return ScreenGate(permission_table)


@pytest.fixture
def access_guard(permission_table, screen_gate) -> AccessGuard:
    return AccessGuard(permission_table, screen_gate)


@pytest.fixture
def navigation_resolver(screen_gate) -> NavigationResolver:
    return NavigationResolver(screen_gate)


@pytest.fixture
def streak_engine() -> StreakEngine:
    return StreakEngine()


@pytest.fixture
def today() -> date:
    return date(2024, 6, 15)


# ------------------------------------------------------------------
# Users
# ------------------------------------------------------------------
def make_user(role: str, user_id: str = "test-user-id") -> CurrentUser:
    return CurrentUser(
        id=user_id,
        email=f"{role.lower()}@example.com",
        role=role,
        full_name="Test User",
    )


@pytest.fixture
def mock_admin_user():
    return make_user("ADMIN", "admin-user-id")


@pytest.fixture
def mock_trash_hero_user():
    return make_user("TRASH_HERO", "hero-user-id")


@pytest.fixture
def mock_impact_warrior_user():
    return make_user("IMPACT_WARRIOR", "warrior-user-id")


@pytest.fixture
def login_as(app):
    """Pretend auth already succeeded for the given user."""
    def _login(user: CurrentUser):
        app.dependency_overrides[get_current_user] = lambda: user
        return user
    return _login


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client
