# core/navigation.py

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from models.enums import Role
from core.roles import get_role_color
from core.screens import Screen, ScreenGate


# ============================================================
# Primary navigation destinations
# ============================================================
class NavDestination(BaseModel):
    """
    One bottom-tab slot.

    `screens` is what the tab reaches by default; `role_screens` replaces it
    for specific roles (ADMIN's Missions slot opens user management).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    icon: str
    screens: List[Screen]
    role_screens: Dict[Role, List[Screen]] = {}
    role_labels: Dict[Role, str] = {}


PRIMARY_NAVIGATION: List[NavDestination] = [
    NavDestination(
        name="Dashboard",
        label="Dashboard",
        icon="home",
        screens=[
            Screen.AdminDashboard,
            Screen.EcoDefenderDashboard,
            Screen.TrashHeroMissions,
        ],
    ),
    NavDestination(
        name="Missions",
        label="Missions",
        icon="list",
        screens=[
            Screen.TrashHeroMissions,
            Screen.ImpactWarriorMissions,
            Screen.EcoDefenderMissions,
        ],
        role_screens={Role.ADMIN: [Screen.UserManagement]},
        role_labels={Role.ADMIN: "Users"},
    ),
    NavDestination(name="Map", label="Map", icon="map", screens=[Screen.MapScreen]),
    NavDestination(name="Wallet", label="Wallet", icon="wallet", screens=[Screen.WalletScreen]),
    NavDestination(name="Profile", label="Profile", icon="person", screens=[Screen.ProfileScreen]),
]


# -----------------------------------------------------
# Landing screens per role
# -----------------------------------------------------
ROLE_HOME_SCREENS: Dict[Role, Dict[str, Screen]] = {
    Role.TRASH_HERO: {
        "dashboard": Screen.UnifiedHeroDashboard,
        "missions": Screen.TrashHeroMissions,
    },
    Role.IMPACT_WARRIOR: {
        "dashboard": Screen.UnifiedHeroDashboard,
        "missions": Screen.ImpactWarriorMissions,
    },
    Role.ECO_DEFENDER: {
        "dashboard": Screen.EcoDefenderDashboard,
        "missions": Screen.EcoDefenderMissions,
    },
    Role.ADMIN: {
        "dashboard": Screen.AdminDashboard,
        "missions": Screen.UserManagement,
    },
}


class VisibleTab(BaseModel):
    name: str
    label: str
    icon: str
    screens: List[Screen]

    @property
    def primary_screen(self) -> Screen:
        return self.screens[0]


class RoleHome(BaseModel):
    dashboard_screen: Optional[Screen] = None
    missions_screen: Optional[Screen] = None
    tab_bar_color: Optional[str] = None


# ============================================================
# Resolver
# ============================================================
class NavigationResolver:
    def __init__(self, screen_gate: ScreenGate, destinations: Optional[List[NavDestination]] = None):
        self.screen_gate = screen_gate
        self.destinations = list(destinations if destinations is not None else PRIMARY_NAVIGATION)

    def screens_for(self, role: Union[str, Role, None], destination: NavDestination) -> List[Screen]:
        for override_role, screens in destination.role_screens.items():
            if role == override_role:
                return list(screens)
        return list(destination.screens)

    def label_for(self, role: Union[str, Role, None], destination: NavDestination) -> str:
        for override_role, label in destination.role_labels.items():
            if role == override_role:
                return label
        return destination.label

    def permitted_screens(self, role: Union[str, Role, None], destination: NavDestination) -> List[Screen]:
        return [
            screen for screen in self.screens_for(role, destination)
            if self.screen_gate.can_access_screen(role, screen)
        ]

    def is_visible(self, role: Union[str, Role, None], destination: NavDestination) -> bool:
        return bool(self.permitted_screens(role, destination))

    def resolve(self, role: Union[str, Role, None]) -> List[VisibleTab]:
        """
        Tabs the role may see, in the fixed destination order.

        A destination is kept when at least one screen it reaches is
        permitted; the tab only lists those permitted screens.
        """
        tabs: List[VisibleTab] = []
        for destination in self.destinations:
            permitted = self.permitted_screens(role, destination)
            if not permitted:
                continue
            tabs.append(
                VisibleTab(
                    name=destination.name,
                    label=self.label_for(role, destination),
                    icon=destination.icon,
                    screens=permitted,
                )
            )
        return tabs

    def home_screens(self, role: Union[str, Role, None]) -> RoleHome:
        home: Dict[str, Screen] = {}
        for known_role, screens in ROLE_HOME_SCREENS.items():
            if role == known_role:
                home = screens
                break

        return RoleHome(
            dashboard_screen=home.get("dashboard"),
            missions_screen=home.get("missions"),
            tab_bar_color=get_role_color(role) if home else None,
        )
