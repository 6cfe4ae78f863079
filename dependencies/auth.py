from typing import Iterable, Optional, Union

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from models.enums import Capability, Role
from core.access_guard import AccessGuard, AllowRoles, RequireCapability
from core.errors import UnregisteredScreenError
from core.logging_config import logger
from core.roles import normalize_role
from core.screens import Screen
from core.supabase_client import get_supabase_client
from dependencies.services import get_access_guard


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (the session)
# ============================================================
class CurrentUser(BaseModel):
    id: str
    email: str

    # Role value as stored in user_metadata after normalization.
    # An unrecognized role is kept verbatim and simply holds no permissions.
    role: str

    full_name: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase: validates JWT + reads metadata)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except HTTPException:
        raise
    except Exception:
        raise unauthorized

    # ---------------------------------------------------------
    # Extract identity
    # ---------------------------------------------------------
    email = auth_user.email
    metadata = auth_user.user_metadata or {}

    if not email:
        raise unauthorized

    raw_role = metadata.get("role")
    role = normalize_role(raw_role)
    if role is None:
        logger.warning(f"User {auth_user.id} has unrecognized role {raw_role!r}; no permissions granted")

    return CurrentUser(
        id=auth_user.id,
        email=email,
        role=role.value if role else str(raw_role),
        full_name=metadata.get("full_name"),
    )


# ============================================================
# ROLE CHECKER (allow-list guard)
# ============================================================
def requires_role(allowed_roles: Iterable[Union[str, Role]]):
    rule = AllowRoles(roles=list(allowed_roles))

    def checker(
        current_user: CurrentUser = Depends(get_current_user),
        guard: AccessGuard = Depends(get_access_guard),
    ):
        decision = guard.evaluate(current_user.role, rule)
        if not decision.allowed:
            raise HTTPException(
                status_code=403,
                detail=decision.denial.model_dump(mode="json"),
            )
        return current_user
    return checker


# ============================================================
# PERMISSION CHECK (capability guard)
# ============================================================
def requires_permission(permission: Union[str, Capability]):
    """
    Usage:
        @router.post("/", dependencies=[Depends(requires_permission(Capability.MANAGE_REWARDS))])
    """
    rule = RequireCapability(capability=permission)

    def checker(
        current_user: CurrentUser = Depends(get_current_user),
        guard: AccessGuard = Depends(get_access_guard),
    ):
        decision = guard.evaluate(current_user.role, rule)
        if not decision.allowed:
            raise HTTPException(
                status_code=403,
                detail=decision.denial.model_dump(mode="json"),
            )
        return current_user
    return checker


# ============================================================
# SCREEN CHECK (capability of a registered screen)
# ============================================================
def requires_screen(screen: Union[str, Screen]):
    def checker(
        current_user: CurrentUser = Depends(get_current_user),
        guard: AccessGuard = Depends(get_access_guard),
    ):
        try:
            decision = guard.check_screen(current_user.role, screen)
        except UnregisteredScreenError:
            raise HTTPException(status_code=500, detail=f"Screen '{screen}' is not registered")

        if not decision.allowed:
            raise HTTPException(
                status_code=403,
                detail=decision.denial.model_dump(mode="json"),
            )
        return current_user
    return checker
