# core/roles.py

from typing import Dict, List, Optional, Union

from models.enums import Role


# ============================================
# CENTRALIZED ROLE METADATA
# ============================================
# Single source for colour / icon / display name so that screens never
# switch on role strings themselves.
ROLE_CONFIG: Dict[Role, Dict[str, str]] = {

    Role.TRASH_HERO: {
        "display_name": "Trash Hero",
        "description": "Paid cleanups and environmental restoration",
        "color": "#9AE630",
        "icon": "trash",
        "short_name": "trash-hero",
    },

    Role.IMPACT_WARRIOR: {
        "display_name": "Impact Warrior",
        "description": "Volunteer environmental action",
        "color": "#dc2626",
        "icon": "leaf",
        "short_name": "impact-warrior",
    },

    Role.ECO_DEFENDER: {
        "display_name": "Eco Defender",
        "description": "Businesses & sponsors",
        "color": "#007bff",
        "icon": "business",
        "short_name": "eco-defender",
    },

    Role.ADMIN: {
        "display_name": "Admin",
        "description": "Missions & analytics management",
        "color": "#ea580c",
        "icon": "shield-checkmark",
        "short_name": "admin",
    },
}


# -----------------------------------------------------
# Legacy / alternate spellings still sent by older clients
# -----------------------------------------------------
ROLE_ALIASES: Dict[str, Role] = {
    "VOLUNTEER": Role.IMPACT_WARRIOR,
    "BUSINESS": Role.ECO_DEFENDER,
    "business": Role.ECO_DEFENDER,
    "trash-hero": Role.TRASH_HERO,
    "impact-warrior": Role.IMPACT_WARRIOR,
    "eco-defender": Role.ECO_DEFENDER,
    "admin": Role.ADMIN,
}


def normalize_role(value: Union[str, Role, None]) -> Optional[Role]:
    """
    Map any accepted spelling of a role to a Role.

    Unknown values return None rather than a default role, so an
    unrecognized account never inherits someone else's permissions.
    """
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None

    try:
        return Role(value)
    except ValueError:
        pass

    return ROLE_ALIASES.get(value)


def _metadata(role: Union[str, Role]) -> Dict[str, str]:
    resolved = normalize_role(role)
    if resolved is None:
        return {}
    return ROLE_CONFIG[resolved]


def get_role_color(role: Union[str, Role]) -> Optional[str]:
    return _metadata(role).get("color")


def get_role_display_name(role: Union[str, Role]) -> Optional[str]:
    return _metadata(role).get("display_name")


def get_role_icon(role: Union[str, Role]) -> Optional[str]:
    return _metadata(role).get("icon")


def get_role_short_name(role: Union[str, Role]) -> Optional[str]:
    return _metadata(role).get("short_name")


def role_label(role: Union[str, Role]) -> str:
    """Human label for a role; falls back to the raw value for unknown roles."""
    return get_role_display_name(role) or str(role)


def list_roles() -> List[Dict[str, str]]:
    """All roles with their metadata, in declaration order."""
    return [
        {"role": role.value, **ROLE_CONFIG[role]}
        for role in Role
    ]
