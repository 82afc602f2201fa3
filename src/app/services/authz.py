"""Проверка прав пользователей портала.

Права задаются явной таблицей «роль → разрешённые действия»
и проверяются в каждом обработчике вызовом `ensure_allowed`.
"""

import enum

from app.exceptions.handlers import PermissionDeniedError
from app.models.portal_user import PortalRole, PortalUser


class Action(str, enum.Enum):
    """Действия, требующие проверки роли."""

    VIEW = "view"
    VIEW_AUDIT = "view_audit"
    UPDATE_VPN_USER = "update_vpn_user"
    KILL_SESSION = "kill_session"
    MANAGE_PORTAL_USERS = "manage_portal_users"
    MANAGE_VPN_SERVERS = "manage_vpn_servers"


ROLE_PERMISSIONS: dict[PortalRole, frozenset[Action]] = {
    PortalRole.ADMIN: frozenset(Action),
    PortalRole.OPERATOR: frozenset(
        {
            Action.VIEW,
            Action.VIEW_AUDIT,
            Action.UPDATE_VPN_USER,
            Action.KILL_SESSION,
        }
    ),
    PortalRole.VIEWER: frozenset({Action.VIEW}),
}


def is_allowed(role: PortalRole, action: Action) -> bool:
    """Разрешено ли действие для роли."""
    return action in ROLE_PERMISSIONS.get(role, frozenset())


def ensure_allowed(user: PortalUser, action: Action) -> None:
    """Проверить право пользователя на действие.

    Raises:
        PermissionDeniedError: Роль пользователя не допускает действие.
    """
    if not user.is_active or not is_allowed(user.role, action):
        raise PermissionDeniedError(action.value)
