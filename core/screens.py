# core/screens.py

"""
Screen registry and the Screen Gate.

Every navigable screen is a member of the closed `Screen` enum and is gated
by exactly one capability. Route parameters are typed per screen, so the
client never dispatches on free-form strings and dicts.
"""

from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from models.enums import BaseStrEnum, Capability, Role
from core.permissions import PermissionTable
from core.roles import normalize_role
from core.errors import UnregisteredScreenError
from core.logging_config import logger


# -----------------------------------------------------
# SCREEN
# -----------------------------------------------------
class Screen(BaseStrEnum):
    # Admin
    AdminDashboard = "AdminDashboard"
    AdminMissionControl = "AdminMissionControl"
    AdminIssueResolution = "AdminIssueResolution"
    AdminRewards = "AdminRewards"
    AdminSuggestedSpots = "AdminSuggestedSpots"
    UserManagement = "UserManagement"
    Analytics = "Analytics"

    # Eco Defender
    EcoDefenderDashboard = "EcoDefenderDashboard"
    EcoDefenderMissions = "EcoDefenderMissions"
    EcoDefenderImpact = "EcoDefenderImpact"
    PostJob = "PostJob"

    # Trash Hero
    TrashHeroMissions = "TrashHeroMissions"
    TrashHeroEarnings = "TrashHeroEarnings"

    # Impact Warrior
    ImpactWarriorMissions = "ImpactWarriorMissions"
    ImpactWarriorImpact = "ImpactWarriorImpact"
    SuggestCleanup = "SuggestCleanup"

    # Shared
    UnifiedHeroDashboard = "UnifiedHeroDashboard"
    MyCard = "MyCard"
    WalletScreen = "WalletScreen"
    ProfileScreen = "ProfileScreen"
    Notifications = "Notifications"
    MapScreen = "MapScreen"
    EcoNewsScreen = "EcoNewsScreen"
    RewardsScreen = "RewardsScreen"
    PearVerifiedMissions = "PearVerifiedMissions"
    JobListings = "JobListings"
    EcoStationQuest = "EcoStationQuest"


# ============================================
# SCREEN → REQUIRED CAPABILITY
# ============================================
SCREEN_PERMISSIONS: Dict[Screen, Capability] = {
    # Admin screens
    Screen.AdminDashboard: Capability.SYSTEM_SETTINGS,
    Screen.AdminMissionControl: Capability.MISSION_CONTROL,
    Screen.AdminIssueResolution: Capability.ISSUE_RESOLUTION,
    Screen.AdminRewards: Capability.MANAGE_REWARDS,
    Screen.AdminSuggestedSpots: Capability.SUGGESTED_SPOTS,
    Screen.UserManagement: Capability.USER_MANAGEMENT,
    Screen.Analytics: Capability.PLATFORM_ANALYTICS,

    # Eco Defender screens
    Screen.EcoDefenderDashboard: Capability.BUSINESS_DASHBOARD,
    Screen.EcoDefenderMissions: Capability.VIEW_MISSIONS,
    Screen.EcoDefenderImpact: Capability.TRACK_IMPACT,
    Screen.PostJob: Capability.POST_JOBS,

    # Trash Hero screens
    Screen.TrashHeroMissions: Capability.VIEW_MISSIONS,
    Screen.TrashHeroEarnings: Capability.VIEW_EARNINGS,

    # Impact Warrior screens
    Screen.ImpactWarriorMissions: Capability.VIEW_MISSIONS,
    Screen.ImpactWarriorImpact: Capability.REPORT_ISSUES,
    Screen.SuggestCleanup: Capability.SUGGEST_CLEANUP,

    # Shared screens (every field role holds ViewMissions)
    Screen.UnifiedHeroDashboard: Capability.VIEW_MISSIONS,
    Screen.MyCard: Capability.VIEW_MISSIONS,
    Screen.WalletScreen: Capability.VIEW_MISSIONS,
    Screen.ProfileScreen: Capability.VIEW_MISSIONS,
    Screen.Notifications: Capability.VIEW_MISSIONS,
    Screen.MapScreen: Capability.VIEW_MISSIONS,
    Screen.EcoNewsScreen: Capability.VIEW_MISSIONS,
    Screen.RewardsScreen: Capability.VIEW_MISSIONS,
    Screen.PearVerifiedMissions: Capability.VIEW_MISSIONS,
    Screen.JobListings: Capability.VIEW_MISSIONS,
    Screen.EcoStationQuest: Capability.VIEW_MISSIONS,
}


# ============================================
# TYPED ROUTE PARAMETERS
# ============================================
class ScreenParams(BaseModel):
    """Screens that take no parameters."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class RoleViewParams(ScreenParams):
    """Wallet / Profile can be opened in the context of a specific role."""

    role: Optional[Role] = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalize(cls, value: Any):
        if value is None or isinstance(value, Role):
            return value
        resolved = normalize_role(value)
        if resolved is None:
            raise ValueError(f"Unknown role: {value!r}")
        return resolved


SCREEN_PARAMS: Dict[Screen, Type[ScreenParams]] = {
    Screen.WalletScreen: RoleViewParams,
    Screen.ProfileScreen: RoleViewParams,
}


class ScreenRoute(BaseModel):
    """
    A screen plus the parameters that screen accepts.

    The params type is fixed by the screen: WalletScreen / ProfileScreen
    take RoleViewParams, every other screen takes empty ScreenParams.
    """

    model_config = ConfigDict(frozen=True)

    screen: Screen
    params: Union[RoleViewParams, ScreenParams]

    @model_validator(mode="before")
    @classmethod
    def _params_for_screen(cls, data: Any):
        if not isinstance(data, dict) or not isinstance(data.get("params"), dict):
            return data
        screen = resolve_screen(data.get("screen"))
        if screen is None:
            return data
        params_model = SCREEN_PARAMS.get(screen, ScreenParams)
        return {**data, "params": params_model(**data["params"])}

    @model_validator(mode="after")
    def _params_match_screen(self):
        expected = SCREEN_PARAMS.get(self.screen, ScreenParams)
        if type(self.params) is not expected:
            raise ValueError(
                f"{self.screen} takes {expected.__name__}, got {type(self.params).__name__}"
            )
        return self


def resolve_screen(name: Union[str, Screen, None]) -> Optional[Screen]:
    """Screen for a name, or None when the name is not registered."""
    if isinstance(name, Screen):
        return name
    try:
        return Screen(name)
    except (ValueError, TypeError):
        return None


def route_to(screen: Union[str, Screen], **params: Any) -> ScreenRoute:
    """
    Build a typed route.

    Raises UnregisteredScreenError for unknown screens and a pydantic
    ValidationError when params do not fit the screen.
    """
    resolved = resolve_screen(screen)
    if resolved is None:
        raise UnregisteredScreenError(str(screen))

    params_model = SCREEN_PARAMS.get(resolved, ScreenParams)
    return ScreenRoute(screen=resolved, params=params_model(**params))


# ============================================
# SCREEN GATE
# ============================================
class ScreenGate:
    def __init__(
        self,
        permission_table: PermissionTable,
        screen_permissions: Optional[Dict[Screen, Capability]] = None,
    ):
        self.permission_table = permission_table
        self._screens: Dict[Screen, Capability] = dict(
            screen_permissions if screen_permissions is not None else SCREEN_PERMISSIONS
        )

    def is_registered(self, screen_name: Union[str, Screen, None]) -> bool:
        screen = resolve_screen(screen_name)
        return screen is not None and screen in self._screens

    def required_capability(self, screen_name: Union[str, Screen, None]) -> Optional[Capability]:
        screen = resolve_screen(screen_name)
        if screen is None:
            return None
        return self._screens.get(screen)

    def can_access_screen(self, role: Union[str, Role, None], screen_name: Union[str, Screen, None]) -> bool:
        required = self.required_capability(screen_name)
        if required is None:
            # Unregistered screens are a wiring bug, never an open door.
            logger.warning(f"Screen '{screen_name}' has no registered capability; denying access")
            return False
        return self.permission_table.has_permission(role, required)

    def accessible_screens(self, role: Union[str, Role, None]) -> List[Screen]:
        held = self.permission_table.permissions_for(role)
        return [screen for screen, cap in self._screens.items() if cap in held]

    def screens(self) -> List[Screen]:
        return list(self._screens.keys())

    def required_capabilities(self) -> List[Capability]:
        return list(dict.fromkeys(self._screens.values()))
