# routers/navigation.py

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.navigation import NavigationResolver, RoleHome, VisibleTab
from core.roles import role_label
from dependencies.auth import CurrentUser, get_current_user
from dependencies.services import get_navigation_resolver

router = APIRouter(
    prefix="/navigation",
    tags=["Navigation"],
)


class NavigationRead(BaseModel):
    role: str
    role_label: str
    tabs: List[VisibleTab]
    home: RoleHome


# -----------------------------------------------------
# GET /navigation/tabs
# Visible bottom tabs for the current role, fixed order
# -----------------------------------------------------
@router.get("/tabs", summary="Primary navigation for the current role", response_model=NavigationRead)
def get_tabs(
    current_user: CurrentUser = Depends(get_current_user),
    resolver: NavigationResolver = Depends(get_navigation_resolver),
):
    return NavigationRead(
        role=current_user.role,
        role_label=role_label(current_user.role),
        tabs=resolver.resolve(current_user.role),
        home=resolver.home_screens(current_user.role),
    )
