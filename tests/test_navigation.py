# tests/test_navigation.py

"""
Tests for bottom-tab visibility and labels.
"""

from models.enums import Capability, Role
from core.navigation import PRIMARY_NAVIGATION, NavDestination, NavigationResolver
from core.permissions import PermissionTable
from core.screens import Screen, ScreenGate


def names(tabs):
    return [tab.name for tab in tabs]


def test_admin_sees_users_tab_instead_of_missions(navigation_resolver):
    tabs = navigation_resolver.resolve(Role.ADMIN)
    missions = next(tab for tab in tabs if tab.name == "Missions")

    assert missions.label == "Users"
    assert missions.screens == [Screen.UserManagement]


def test_admin_only_sees_management_tabs(navigation_resolver):
    # ADMIN does not hold ViewMissions, which gates Map / Wallet / Profile.
    assert names(navigation_resolver.resolve(Role.ADMIN)) == ["Dashboard", "Missions"]


def test_field_roles_see_every_tab_in_order(navigation_resolver):
    for role in (Role.TRASH_HERO, Role.IMPACT_WARRIOR, Role.ECO_DEFENDER):
        tabs = navigation_resolver.resolve(role)
        assert names(tabs) == ["Dashboard", "Missions", "Map", "Wallet", "Profile"]
        assert next(tab for tab in tabs if tab.name == "Missions").label == "Missions"


def test_tabs_only_list_permitted_screens(navigation_resolver):
    tabs = navigation_resolver.resolve(Role.ECO_DEFENDER)
    dashboard = next(tab for tab in tabs if tab.name == "Dashboard")
    assert dashboard.screens == [Screen.EcoDefenderDashboard, Screen.TrashHeroMissions]
    assert dashboard.primary_screen == Screen.EcoDefenderDashboard


def test_unknown_role_sees_no_tabs(navigation_resolver):
    assert navigation_resolver.resolve("VISITOR") == []


def test_destination_order_is_never_changed():
    table = PermissionTable({Role.TRASH_HERO: [Capability.VIEW_MISSIONS]})
    gate = ScreenGate(table, {Screen.ProfileScreen: Capability.VIEW_MISSIONS, Screen.MapScreen: Capability.VIEW_MISSIONS})
    resolver = NavigationResolver(gate)

    assert names(resolver.resolve(Role.TRASH_HERO)) == ["Map", "Profile"]


def test_destination_with_unregistered_screens_is_hidden():
    table = PermissionTable()
    gate = ScreenGate(table, {})
    resolver = NavigationResolver(
        gate,
        [NavDestination(name="Map", label="Map", icon="map", screens=[Screen.MapScreen])],
    )
    assert resolver.resolve(Role.TRASH_HERO) == []


def test_primary_navigation_names():
    assert [d.name for d in PRIMARY_NAVIGATION] == ["Dashboard", "Missions", "Map", "Wallet", "Profile"]


def test_home_screens(navigation_resolver):
    admin = navigation_resolver.home_screens(Role.ADMIN)
    assert admin.dashboard_screen == Screen.AdminDashboard
    assert admin.missions_screen == Screen.UserManagement
    assert admin.tab_bar_color == "#ea580c"

    warrior = navigation_resolver.home_screens("IMPACT_WARRIOR")
    assert warrior.dashboard_screen == Screen.UnifiedHeroDashboard
    assert warrior.missions_screen == Screen.ImpactWarriorMissions

    unknown = navigation_resolver.home_screens("VISITOR")
    assert unknown.dashboard_screen is None
    assert unknown.tab_bar_color is None


def test_is_visible(navigation_resolver):
    wallet = next(d for d in PRIMARY_NAVIGATION if d.name == "Wallet")
    assert navigation_resolver.is_visible(Role.IMPACT_WARRIOR, wallet)
    assert not navigation_resolver.is_visible(Role.ADMIN, wallet)
    assert not navigation_resolver.is_visible("VISITOR", wallet)
