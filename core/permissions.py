# core/permissions.py

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Union

from models.enums import Capability, Role
from core.logging_config import logger


# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Each role is enumerated independently: there is no inheritance between
# roles. Adding a capability to one role does not add it to any other.
ROLE_PERMISSIONS: Dict[Role, List[Capability]] = {

    # =====================================================
    # ADMIN — platform management, no field work
    # =====================================================
    Role.ADMIN: [
        Capability.MANAGE_USERS,
        Capability.POST_MISSIONS,
        Capability.VIEW_ANALYTICS,
        Capability.RESOLVE_ISSUES,
        Capability.MANAGE_REWARDS,
        Capability.VIEW_ALL_DATA,
        Capability.SYSTEM_SETTINGS,
        Capability.ISSUE_RESOLUTION,
        Capability.USER_MANAGEMENT,
        Capability.MISSION_CONTROL,
        Capability.SUGGESTED_SPOTS,
        Capability.PLATFORM_ANALYTICS,
    ],

    # =====================================================
    # ECO DEFENDER — businesses & sponsors
    # =====================================================
    Role.ECO_DEFENDER: [
        Capability.POST_JOBS,
        Capability.FUND_CLEANUPS,
        Capability.TRACK_IMPACT,
        Capability.VIEW_MISSIONS,
        Capability.COMPLETE_JOBS,
        Capability.EARN_BADGES,
        Capability.VIEW_ANALYTICS,
        Capability.MANAGE_BUSINESS_PROFILE,
        Capability.POST_JOB,
        Capability.ECO_DEFENDER_IMPACT,
        Capability.BUSINESS_DASHBOARD,
    ],

    # =====================================================
    # TRASH HERO — paid cleanups
    # =====================================================
    Role.TRASH_HERO: [
        Capability.VIEW_MISSIONS,
        Capability.COMPLETE_JOBS,
        Capability.EARN_BADGES,
        Capability.VIEW_EARNINGS,
        Capability.WITHDRAW_EARNINGS,
        Capability.TRASH_HERO_MISSIONS,
        Capability.TRASH_HERO_EARNINGS,
        Capability.PROFESSIONAL_CLEANUP,
    ],

    # =====================================================
    # IMPACT WARRIOR — volunteers
    # =====================================================
    Role.IMPACT_WARRIOR: [
        Capability.VIEW_MISSIONS,
        Capability.COMPLETE_JOBS,
        Capability.REPORT_ISSUES,
        Capability.EARN_BADGES,
        Capability.IMPACT_WARRIOR_MISSIONS,
        Capability.IMPACT_WARRIOR_IMPACT,
        Capability.COMMUNITY_VOLUNTEER,
        Capability.SUGGEST_CLEANUP,
    ],
}


def _as_role(role: Union[str, Role, None]) -> Optional[Role]:
    # Exact match only. Alias handling belongs to session creation.
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except (ValueError, TypeError):
        return None


class PermissionTable:
    """
    Immutable role → capability lookup.

    Constructed once and handed to the services that need it
    (ScreenGate, AccessGuard) instead of being read from module state.
    Every query is total: an unrecognized role simply holds nothing.
    """

    def __init__(self, role_permissions: Optional[Mapping[Role, Sequence[Capability]]] = None):
        source = role_permissions if role_permissions is not None else ROLE_PERMISSIONS

        # Keep declared order for display, plus a frozenset for membership.
        self._ordered: Dict[Role, tuple] = {
            role: tuple(dict.fromkeys(caps)) for role, caps in source.items()
        }
        self._sets: Dict[Role, FrozenSet[Capability]] = {
            role: frozenset(caps) for role, caps in self._ordered.items()
        }

    # -----------------------------------------------------
    # Queries
    # -----------------------------------------------------
    def permissions_for(self, role: Union[str, Role, None]) -> FrozenSet[Capability]:
        resolved = _as_role(role)
        if resolved is None:
            return frozenset()
        return self._sets.get(resolved, frozenset())

    def list_permissions(self, role: Union[str, Role, None]) -> List[Capability]:
        """Same set as permissions_for, in the order the table declares it."""
        resolved = _as_role(role)
        if resolved is None:
            return []
        return list(self._ordered.get(resolved, ()))

    def has_permission(self, role: Union[str, Role, None], capability: Union[str, Capability]) -> bool:
        return capability in self.permissions_for(role)

    def has_any_permission(self, role: Union[str, Role, None], capabilities: Iterable[Capability]) -> bool:
        held = self.permissions_for(role)
        return any(cap in held for cap in capabilities)

    def has_all_permissions(self, role: Union[str, Role, None], capabilities: Iterable[Capability]) -> bool:
        held = self.permissions_for(role)
        return all(cap in held for cap in capabilities)

    def roles(self) -> List[Role]:
        return list(self._ordered.keys())

    def roles_with(self, capability: Capability) -> List[Role]:
        return [role for role, caps in self._sets.items() if capability in caps]

    # -----------------------------------------------------
    # Table integrity
    # -----------------------------------------------------
    def validate_screen_coverage(self, required: Iterable[Capability]) -> List[Capability]:
        """
        Return every required capability that no role holds.

        A non-empty result is a configuration defect: the screens gated by
        those capabilities are unreachable for everyone.
        """
        granted = set()
        for caps in self._sets.values():
            granted.update(caps)

        dead = sorted({cap for cap in required if cap not in granted}, key=str)
        for cap in dead:
            logger.warning(f"Capability '{cap}' is required by a screen but held by no role")
        return dead

    def empty_roles(self) -> List[Role]:
        """Roles declared with no capabilities at all (should never happen)."""
        return [role for role in Role if not self._sets.get(role)]
