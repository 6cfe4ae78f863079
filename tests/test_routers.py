# tests/test_routers.py

"""
Tests for the HTTP surface: access, navigation, progression and health.
"""

from datetime import date, timedelta
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from models.progression import ProgressState, StreakRecord
from core.errors import ConcurrentUpdateError
from core.progress_store import ProgressStore
from core.progression import ProgressionEngine
from dependencies.services import get_progress_store
from dependencies.auth import CurrentUser


TODAY = date(2024, 6, 15)


@pytest.fixture
def mock_store(app):
    store = Mock(spec=ProgressStore)
    store.save_streak.side_effect = lambda record, previous: record
    store.save_progress.side_effect = lambda state, previous_total_xp: state
    app.dependency_overrides[get_progress_store] = lambda: store
    return store


@pytest.fixture(autouse=True)
def fixed_today():
    with patch.object(ProgressionEngine, "today", return_value=TODAY):
        yield


# ------------------------------------------------------------------
# Public endpoints
# ------------------------------------------------------------------
def test_health_app(client: TestClient):
    response = client.get("/health/app")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_roles_listing(client: TestClient):
    response = client.get("/access/roles")
    assert response.status_code == 200
    roles = response.json()["roles"]
    assert [r["role"] for r in roles] == ["ADMIN", "ECO_DEFENDER", "TRASH_HERO", "IMPACT_WARRIOR"]
    assert roles[0]["color"] == "#ea580c"


def test_protected_endpoint_requires_token(client: TestClient):
    response = client.get("/access/permissions")
    assert response.status_code in (401, 403)


# ------------------------------------------------------------------
# Access
# ------------------------------------------------------------------
def test_my_permissions(client: TestClient, login_as, mock_trash_hero_user):
    login_as(mock_trash_hero_user)
    response = client.get("/access/permissions")

    assert response.status_code == 200
    data = response.json()
    assert data["role_label"] == "Trash Hero"
    assert "ViewEarnings" in data["permissions"]


def test_unknown_role_has_no_permissions(client: TestClient, login_as):
    login_as(CurrentUser(id="visitor-id", email="visitor@example.com", role="VISITOR"))
    data = client.get("/access/permissions").json()
    assert data["permissions"] == []
    assert data["role_label"] == "VISITOR"


def test_screen_decision_denied(client: TestClient, login_as, mock_impact_warrior_user):
    login_as(mock_impact_warrior_user)
    response = client.get("/access/screens/AdminDashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["allowed"] is False
    assert data["outcome"] == "denied"
    assert data["denial"]["title"] == "Access Restricted"
    assert data["denial"]["required_capability"] == "SystemSettings"
    assert "ImpactWarriorMissions" in data["denial"]["permissions"]


def test_screen_decision_with_fallback(client: TestClient, login_as, mock_impact_warrior_user):
    login_as(mock_impact_warrior_user)
    data = client.get("/access/screens/AdminDashboard", params={"has_fallback": True}).json()
    assert data["outcome"] == "fallback"
    assert data["denial"] is None


def test_unknown_screen_is_404(client: TestClient, login_as, mock_admin_user):
    login_as(mock_admin_user)
    response = client.get("/access/screens/SecretMenu")
    assert response.status_code == 404
    assert response.json()["detail"] == "Unknown screen: SecretMenu"


def test_screen_table(client: TestClient, login_as, mock_admin_user):
    login_as(mock_admin_user)
    rows = {row["screen"]: row for row in client.get("/access/screens").json()}
    assert rows["AdminDashboard"]["allowed"] is True
    assert rows["MapScreen"]["allowed"] is False


def test_guard_check_allow_list_overrides_capability(client: TestClient, login_as, mock_admin_user):
    login_as(mock_admin_user)
    response = client.post(
        "/access/check",
        json={"allowed_roles": ["TRASH_HERO"], "required_permission": "SystemSettings"},
    )
    data = response.json()
    assert data["allowed"] is False
    assert data["rule"]["kind"] == "allow_roles"
    assert data["denial"]["required_roles"] == ["TRASH_HERO"]


# ------------------------------------------------------------------
# Navigation
# ------------------------------------------------------------------
def test_admin_navigation(client: TestClient, login_as, mock_admin_user):
    login_as(mock_admin_user)
    data = client.get("/navigation/tabs").json()

    assert [tab["name"] for tab in data["tabs"]] == ["Dashboard", "Missions"]
    assert data["tabs"][1]["label"] == "Users"
    assert data["home"]["dashboard_screen"] == "AdminDashboard"


def test_hero_navigation(client: TestClient, login_as, mock_trash_hero_user):
    login_as(mock_trash_hero_user)
    data = client.get("/navigation/tabs").json()
    assert [tab["label"] for tab in data["tabs"]] == ["Dashboard", "Missions", "Map", "Wallet", "Profile"]


# ------------------------------------------------------------------
# Progression
# ------------------------------------------------------------------
def test_first_activity_creates_streak(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.return_value = None

    response = client.post("/progression/streak/activity")

    assert response.status_code == 200
    data = response.json()
    assert data["update"]["record"]["current_streak"] == 1
    assert data["summary"]["next_milestone"] == 3
    mock_store.save_streak.assert_called_once()


def test_activity_reaching_milestone(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.return_value = StreakRecord(
        user_id="hero-user-id",
        current_streak=6,
        longest_streak=6,
        last_activity_date=TODAY - timedelta(days=1),
        streak_rewards=[3],
    )

    data = client.post("/progression/streak/activity").json()

    assert data["update"]["milestone_reached"] == 7
    assert data["summary"]["bonus_multiplier"] == 1.25


def test_second_activity_same_day_is_not_saved(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.return_value = StreakRecord(
        user_id="hero-user-id", current_streak=2, longest_streak=2, last_activity_date=TODAY
    )

    data = client.post("/progression/streak/activity").json()

    assert data["update"]["changed"] is False
    mock_store.save_streak.assert_not_called()


def test_backdated_activity_is_conflict(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.return_value = StreakRecord(
        user_id="hero-user-id", current_streak=2, longest_streak=2, last_activity_date=TODAY + timedelta(days=1)
    )

    response = client.post("/progression/streak/activity")

    assert response.status_code == 409
    mock_store.save_streak.assert_not_called()


def test_concurrent_streak_write_is_conflict(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.return_value = None
    mock_store.save_streak.side_effect = ConcurrentUpdateError("Streak for hero-user-id was created concurrently")

    assert client.post("/progression/streak/activity").status_code == 409


def test_my_progress(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_progress.return_value = ProgressState(user_id="hero-user-id", total_xp=300, badge_count=1)
    mock_store.get_streak.return_value = None

    data = client.get("/progression/me").json()

    assert data["level"]["current_level"]["title"] == "Rising Hero"
    assert data["level"]["progress_percent"] == 20
    assert data["attributes"]["reliability"] == 94
    assert data["streak"]["current_streak"] == 0


def test_my_progress_needs_my_card_screen(client: TestClient, login_as, mock_admin_user, mock_store):
    login_as(mock_admin_user)
    response = client.get("/progression/me")

    assert response.status_code == 403
    assert response.json()["detail"]["required_capability"] == "ViewMissions"
    mock_store.get_progress.assert_not_called()


def test_streak_store_failure_is_500(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    mock_store.get_streak.side_effect = Exception("connection refused")

    response = client.get("/progression/streak")
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to load streak failed"


def test_grant_xp_requires_manage_rewards(client: TestClient, login_as, mock_trash_hero_user, mock_store):
    login_as(mock_trash_hero_user)
    response = client.post("/progression/xp", json={"user_id": "u-9", "amount": 50})

    assert response.status_code == 403
    assert response.json()["detail"]["required_capability"] == "ManageRewards"
    mock_store.save_progress.assert_not_called()


def test_admin_grants_xp(client: TestClient, login_as, mock_admin_user, mock_store):
    login_as(mock_admin_user)
    mock_store.get_progress.return_value = ProgressState(user_id="u-9", total_xp=480)

    response = client.post("/progression/xp", json={"user_id": "u-9", "amount": 50, "source": "cleanup"})

    assert response.status_code == 200
    data = response.json()
    assert data["state"]["total_xp"] == 530
    assert data["leveled_up"] is True
    mock_store.save_progress.assert_called_once()
    assert mock_store.save_progress.call_args.kwargs["previous_total_xp"] == 480


def test_negative_xp_rejected(client: TestClient, login_as, mock_admin_user, mock_store):
    login_as(mock_admin_user)
    response = client.post("/progression/xp", json={"user_id": "u-9", "amount": -5})
    assert response.status_code == 422
