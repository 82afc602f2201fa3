"""ORM-модели SQLAlchemy."""

from app.models.audit_log import AuditAction, AuditLog
from app.models.base import Base
from app.models.portal_user import PortalRole, PortalUser
from app.models.processed_event import ProcessedEvent
from app.models.vpn_server import VpnServer
from app.models.vpn_session import SessionStatus, VpnSession
from app.models.vpn_user import (
    AccountStatus,
    ConnectionStatus,
    VpnUser,
    VpnUserType,
)

__all__ = [
    "Base",
    "AuditAction",
    "AuditLog",
    "PortalRole",
    "PortalUser",
    "ProcessedEvent",
    "VpnServer",
    "SessionStatus",
    "VpnSession",
    "AccountStatus",
    "ConnectionStatus",
    "VpnUser",
    "VpnUserType",
]
