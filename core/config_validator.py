# core/config_validator.py

from typing import List, Optional

import pytz

from core.config import settings
from core.logging_config import logger
from core.permissions import PermissionTable
from core.screens import ScreenGate


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing or invalid required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_SERVICE_ROLE_KEY")

    if settings.STREAK_TIMEZONE not in pytz.all_timezones_set:
        missing.append(f"STREAK_TIMEZONE (unknown zone '{settings.STREAK_TIMEZONE}')")

    return missing


def validate_optional_config() -> List[str]:
    """
    Validate optional but recommended configuration.
    Returns list of missing optional variables (warnings only).
    """
    warnings = []

    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (optional but recommended)")

    return warnings


def validate_permission_tables(table: Optional[PermissionTable] = None) -> List[str]:
    """
    Check the role / screen tables against each other.
    Returns capabilities that gate a screen but are held by no role.
    """
    table = table or PermissionTable()
    gate = ScreenGate(table)
    return [str(cap) for cap in table.validate_screen_coverage(gate.required_capabilities())]


def validate_config_on_startup():
    """
    Validate configuration on application startup.
    Raises RuntimeError if critical config is missing outside development.
    Logs warnings for optional config.
    """
    missing_required = validate_required_config()
    missing_optional = validate_optional_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        logger.error(error_msg)
        if settings.ENV != "development":
            raise RuntimeError(error_msg)

    for warning in missing_optional:
        logger.warning(f"Optional configuration missing: {warning}")

    dead_capabilities = validate_permission_tables()
    if dead_capabilities:
        logger.warning(f"Screens unreachable by every role, gated by: {', '.join(dead_capabilities)}")

    if not missing_required:
        logger.info("Configuration validation passed")
