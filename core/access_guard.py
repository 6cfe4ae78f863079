# core/access_guard.py

"""
Access Guard.

A guard protects a piece of UI behind one rule:

    AllowRoles(roles)             -> current role must be in the allow-list
    RequireCapability(capability) -> current role must hold the capability
    Unguarded()                   -> always allowed

`guard_rule()` turns the loose "allowed_roles / required_permission" pair the
client sends into exactly one of these, so the allow-list always wins when
both are present.

On denial the guard decides between the caller's fallback, the built-in
denial explanation (current role, what was required, what the role can do)
or rendering nothing.
"""

from typing import Annotated, Any, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from models.enums import Capability, GuardOutcome, Role
from core.permissions import PermissionTable
from core.roles import normalize_role, role_label
from core.screens import Screen, ScreenGate
from core.errors import UnregisteredScreenError
from core.logging_config import logger


ACCESS_DENIED_TITLE = "Access Restricted"
ACCESS_DENIED_MESSAGE = "You don't have permission to access this section."


# ============================================================
# Guard rules
# ============================================================
class AllowRoles(BaseModel):
    """
    Allow-list of roles. Legacy spellings ("VOLUNTEER", "trash-hero") are
    mapped to their role; values that name no role are rejected.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["allow_roles"] = "allow_roles"
    roles: List[Role]

    @field_validator("roles", mode="before")
    @classmethod
    def _normalize(cls, value: Any):
        if isinstance(value, (str, Role)) or value is None:
            return value
        return [normalize_role(role) or role for role in value]

    @field_validator("roles")
    @classmethod
    def _non_empty(cls, value: List[Role]) -> List[Role]:
        if not value:
            raise ValueError("AllowRoles needs at least one role; use Unguarded instead")
        return list(dict.fromkeys(value))


class RequireCapability(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["require_capability"] = "require_capability"
    capability: Capability


class Unguarded(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unguarded"] = "unguarded"


GuardRule = Annotated[
    Union[AllowRoles, RequireCapability, Unguarded],
    Field(discriminator="kind"),
]


def guard_rule(
    allowed_roles: Optional[Iterable[Union[str, Role]]] = None,
    required_permission: Optional[Union[str, Capability]] = None,
) -> Union[AllowRoles, RequireCapability, Unguarded]:
    """
    Build the single rule a guard enforces.

    A non-empty allow-list takes precedence and the capability is dropped.
    Neither supplied means the guard is a no-op.
    """
    roles = list(allowed_roles or [])
    if roles:
        return AllowRoles(roles=roles)
    if required_permission:
        return RequireCapability(capability=required_permission)
    return Unguarded()


# ============================================================
# Decisions
# ============================================================
class AccessDenial(BaseModel):
    """Everything the standard denial view shows."""

    title: str = ACCESS_DENIED_TITLE
    message: str = ACCESS_DENIED_MESSAGE
    current_role: str
    current_role_label: str
    required_roles: List[Role] = []
    required_capability: Optional[Capability] = None
    permissions: List[Capability] = []


class GuardDecision(BaseModel):
    outcome: GuardOutcome
    rule: GuardRule
    denial: Optional[AccessDenial] = None

    @computed_field
    @property
    def allowed(self) -> bool:
        return self.outcome == GuardOutcome.granted


class ScreenDecision(GuardDecision):
    screen: Screen


# ============================================================
# Guard service
# ============================================================
class AccessGuard:
    def __init__(self, permission_table: PermissionTable, screen_gate: ScreenGate):
        self.permission_table = permission_table
        self.screen_gate = screen_gate

    # -----------------------------------------------------
    # Rule evaluation
    # -----------------------------------------------------
    def is_allowed(self, role: Union[str, Role, None], rule: Union[AllowRoles, RequireCapability, Unguarded]) -> bool:
        if isinstance(rule, AllowRoles):
            # Capability is never consulted on this branch.
            return role in rule.roles
        if isinstance(rule, RequireCapability):
            return self.permission_table.has_permission(role, rule.capability)
        return True

    def denial_for(self, role: Union[str, Role, None], rule: Union[AllowRoles, RequireCapability, Unguarded]) -> AccessDenial:
        required_roles: List[Role] = []
        required_capability = None

        if isinstance(rule, AllowRoles):
            required_roles = [r for r in Role if r in rule.roles]
        elif isinstance(rule, RequireCapability):
            required_capability = rule.capability

        return AccessDenial(
            current_role=str(role),
            current_role_label=role_label(role),
            required_roles=required_roles,
            required_capability=required_capability,
            permissions=self.permission_table.list_permissions(role),
        )

    def evaluate(
        self,
        role: Union[str, Role, None],
        rule: Union[AllowRoles, RequireCapability, Unguarded],
        has_fallback: bool = False,
        show_access_denied: bool = True,
    ) -> GuardDecision:
        """
        Decide what to render for `role` behind `rule`.

        granted  -> protected content
        fallback -> caller's fallback (takes priority over the denial view)
        denied   -> standard denial view, see `decision.denial`
        hidden   -> nothing at all (silent gate)
        """
        if self.is_allowed(role, rule):
            return GuardDecision(outcome=GuardOutcome.granted, rule=rule)

        logger.info(f"Access denied for role {role} ({rule.kind})")

        if has_fallback:
            return GuardDecision(outcome=GuardOutcome.fallback, rule=rule)

        if show_access_denied:
            return GuardDecision(
                outcome=GuardOutcome.denied,
                rule=rule,
                denial=self.denial_for(role, rule),
            )

        return GuardDecision(outcome=GuardOutcome.hidden, rule=rule)

    def check(
        self,
        role: Union[str, Role, None],
        allowed_roles: Optional[Iterable[Union[str, Role]]] = None,
        required_permission: Optional[Union[str, Capability]] = None,
        has_fallback: bool = False,
        show_access_denied: bool = True,
    ) -> GuardDecision:
        """Same as evaluate() for callers still passing the two optional fields."""
        return self.evaluate(
            role,
            guard_rule(allowed_roles, required_permission),
            has_fallback=has_fallback,
            show_access_denied=show_access_denied,
        )

    # -----------------------------------------------------
    # Screens
    # -----------------------------------------------------
    def check_screen(
        self,
        role: Union[str, Role, None],
        screen_name: Union[str, Screen],
        has_fallback: bool = False,
        show_access_denied: bool = True,
    ) -> ScreenDecision:
        """
        Guard a registered screen by the capability it requires.

        Raises UnregisteredScreenError for names missing from the registry;
        that is a wiring defect and must not be presented as a denial.
        """
        required = self.screen_gate.required_capability(screen_name)
        if required is None:
            logger.warning(f"Guard requested for unregistered screen '{screen_name}'")
            raise UnregisteredScreenError(str(screen_name))

        decision = self.evaluate(
            role,
            RequireCapability(capability=required),
            has_fallback=has_fallback,
            show_access_denied=show_access_denied,
        )
        return ScreenDecision(
            screen=Screen(screen_name),
            outcome=decision.outcome,
            rule=decision.rule,
            denial=decision.denial,
        )

    # -----------------------------------------------------
    # Role helpers
    # -----------------------------------------------------
    @staticmethod
    def is_role(current_role: Union[str, Role, None], role: Role) -> bool:
        return current_role == role

    @staticmethod
    def is_any_role(current_role: Union[str, Role, None], roles: Iterable[Role]) -> bool:
        return current_role in set(roles)
