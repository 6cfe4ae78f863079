# routers/access.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from models.enums import Capability, Role
from core.access_guard import AccessGuard, GuardDecision, ScreenDecision
from core.errors import UnregisteredScreenError
from core.permissions import PermissionTable
from core.roles import list_roles, role_label
from core.screens import Screen, ScreenGate
from dependencies.auth import CurrentUser, get_current_user
from dependencies.services import get_access_guard, get_permission_table, get_screen_gate

router = APIRouter(
    prefix="/access",
    tags=["Access Control"],
)


# ============================================================
# Pydantic Models
# ============================================================
class RolePermissionsRead(BaseModel):
    role: str
    role_label: str
    permissions: List[Capability]


class ScreenAccessRead(BaseModel):
    screen: Screen
    required_capability: Capability
    allowed: bool


class GuardCheckRequest(BaseModel):
    allowed_roles: Optional[List[Role]] = None
    required_permission: Optional[Capability] = None
    has_fallback: bool = False
    show_access_denied: bool = True


# ============================================================
# Role registry
# ============================================================
@router.get("/roles", summary="Role registry metadata")
def get_roles():
    """Colour, icon and display name for every role. No auth required."""
    return {"roles": list_roles()}


# ============================================================
# Current role's capabilities
# ============================================================
@router.get(
    "/permissions",
    summary="Capabilities held by the current role",
    response_model=RolePermissionsRead,
)
def get_my_permissions(
    current_user: CurrentUser = Depends(get_current_user),
    table: PermissionTable = Depends(get_permission_table),
):
    return RolePermissionsRead(
        role=current_user.role,
        role_label=role_label(current_user.role),
        permissions=table.list_permissions(current_user.role),
    )


# ============================================================
# Screen decisions
# ============================================================
@router.get(
    "/screens",
    summary="Access table for every registered screen",
    response_model=List[ScreenAccessRead],
)
def list_screen_access(
    current_user: CurrentUser = Depends(get_current_user),
    gate: ScreenGate = Depends(get_screen_gate),
):
    return [
        ScreenAccessRead(
            screen=screen,
            required_capability=gate.required_capability(screen),
            allowed=gate.can_access_screen(current_user.role, screen),
        )
        for screen in gate.screens()
    ]


@router.get(
    "/screens/{screen_name}",
    summary="Guard decision for one screen",
    response_model=ScreenDecision,
)
def check_screen_access(
    screen_name: str,
    has_fallback: bool = False,
    show_access_denied: bool = True,
    current_user: CurrentUser = Depends(get_current_user),
    guard: AccessGuard = Depends(get_access_guard),
):
    """
    Returns the outcome the client should render: granted, fallback,
    denied (with the denial details) or hidden.
    Unknown screen names are a client wiring error (404), not a denial.
    """
    try:
        return guard.check_screen(
            current_user.role,
            screen_name,
            has_fallback=has_fallback,
            show_access_denied=show_access_denied,
        )
    except UnregisteredScreenError:
        raise HTTPException(status_code=404, detail=f"Unknown screen: {screen_name}")


# ============================================================
# Ad-hoc guard evaluation
# ============================================================
@router.post(
    "/check",
    summary="Evaluate a role allow-list or capability guard",
    response_model=GuardDecision,
)
def check_guard(
    payload: GuardCheckRequest,
    current_user: CurrentUser = Depends(get_current_user),
    guard: AccessGuard = Depends(get_access_guard),
):
    return guard.check(
        current_user.role,
        allowed_roles=payload.allowed_roles,
        required_permission=payload.required_permission,
        has_fallback=payload.has_fallback,
        show_access_denied=payload.show_access_denied,
    )
