"""Role-level hierarchy and the authorization checks built on it.

This is the only place role levels are defined. Endpoints gate on
:class:`RoleLevel` members and the UI-facing capability list is derived from
:data:`CAPABILITIES`, so no code compares against bare integers.
"""
import logging
from enum import IntEnum
from aisentinel.config import DEVELOPER_EMAILS

_logger = logging.getLogger(__name__)


class RoleLevel(IntEnum):
    DEMO = 0
    USER = 1
    ADMIN = 2
    ADMINISTRATOR = 98
    OWNER = 99
    SUPER_USER = 1000


ROLE_LABELS = {
    RoleLevel.DEMO: "demo",
    RoleLevel.USER: "user",
    RoleLevel.ADMIN: "admin",
    RoleLevel.ADMINISTRATOR: "administrator",
    RoleLevel.OWNER: "owner",
    RoleLevel.SUPER_USER: "super-user",
}

_LEVELS_BY_LABEL = {label: level for level, label in ROLE_LABELS.items()}
# Employee records use "employee" for ordinary members
_LEVELS_BY_LABEL["employee"] = RoleLevel.USER

CUSTOM_ROLE_PREFIX = "custom-"

# Capability classes and the minimum level that unlocks each one
CAPABILITIES = {
    "read_only": RoleLevel.DEMO,
    "chat": RoleLevel.USER,
    "admin_screens": RoleLevel.ADMIN,
    "security_settings": RoleLevel.ADMINISTRATOR,
    "user_management": RoleLevel.ADMINISTRATOR,
    "monitoring": RoleLevel.ADMINISTRATOR,
    "company_configuration": RoleLevel.OWNER,
    "api_keys": RoleLevel.OWNER,
    "model_setup": RoleLevel.OWNER,
    "system_management": RoleLevel.SUPER_USER,
    "cross_company_management": RoleLevel.SUPER_USER,
}


def role_label(level: int) -> str:
    """Label of the highest defined role at or below ``level``."""
    for defined in sorted(RoleLevel, reverse=True):
        if level >= defined:
            return ROLE_LABELS[defined]
    return ROLE_LABELS[RoleLevel.DEMO]


def level_for_role(label: str | None) -> int:
    """Level for a role label from an employee record; unknown labels get USER."""
    if not label:
        return RoleLevel.USER
    return int(_LEVELS_BY_LABEL.get(label.strip().lower(), RoleLevel.USER))


def has_access_level(session, required_level: int) -> bool:
    """Whether ``session.role_level`` meets ``required_level``; every role gate goes through here."""
    return session.role_level >= required_level


def capabilities_for(level: int) -> list[str]:
    return [name for name, minimum in CAPABILITIES.items() if level >= minimum]


def is_developer_email(email: str | None) -> bool:
    return bool(email) and email.strip().lower() in DEVELOPER_EMAILS


def parse_test_role(test_role: str | None) -> int | None:
    """
    Level named by a test role override.

    Accepts a role label ("owner", "super-user", ...) or ``custom-<level>``.

    Returns:
        int | None: the level, or None if the value is empty or unrecognised
    """
    if not test_role:
        return None
    value = test_role.strip().lower()
    if value in _LEVELS_BY_LABEL and value != "employee":
        return int(_LEVELS_BY_LABEL[value])
    if value.startswith(CUSTOM_ROLE_PREFIX):
        try:
            level = int(value[len(CUSTOM_ROLE_PREFIX):])
        except ValueError:
            return None
        return level if level >= 0 else None
    return None


def effective_role_level(session, is_developer: bool) -> int:
    """
    Level used for authorization decisions.

    A developer's test role replaces the stored level, but only downwards:
    the result is ``min(test role level, stored level)``. A test role naming a
    higher level than the account holds is clamped to the stored level, so a
    developer session set to "super-user" on an owner account still acts as
    owner. Non-developers always get their stored level, whatever the
    session's test_role column says.
    """
    actual = session.role_level
    if not is_developer:
        if session.test_role:
            _logger.warning(f"Ignoring test role on non-developer session for user {session.user_id}")
        return actual

    override = parse_test_role(session.test_role)
    if override is None:
        return actual
    return min(override, actual)
