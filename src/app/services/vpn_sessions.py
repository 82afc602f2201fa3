"""Сервис просмотра и принудительного завершения VPN-сессий."""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.handlers import (
    VpnSessionAlreadyClosedError,
    VpnSessionNotFoundError,
)
from app.models.audit_log import AuditAction
from app.models.portal_user import PortalUser
from app.models.vpn_session import SessionStatus, VpnSession
from app.repositories.audit_log import AuditLogRepository
from app.repositories.vpn_session import VpnSessionRepository

logger = logging.getLogger(__name__)


class VpnSessionService:
    """Активные сессии, история и ручное завершение.

    Attributes:
        _session_repo: Репозиторий сессий.
        _audit_repo: Репозиторий аудит-лога.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session_repo = VpnSessionRepository(session)
        self._audit_repo = AuditLogRepository(session)

    async def get_active(self, server_id: str | None = None) -> list[VpnSession]:
        """Активные сессии."""
        return await self._session_repo.get_active(server_id=server_id)

    async def get_history(
        self,
        limit: int,
        server_id: str | None = None,
    ) -> list[VpnSession]:
        """Закрытые сессии, не более limit."""
        return await self._session_repo.get_history(limit=limit, server_id=server_id)

    async def kill_session(
        self,
        actor: PortalUser,
        session_id: uuid.UUID,
    ) -> VpnSession:
        """Принудительно закрыть активную сессию.

        Только закрывает запись в портале: отключение клиента
        на VPN-сервере выполняет агент.

        Raises:
            VpnSessionNotFoundError: Сессия не найдена.
            VpnSessionAlreadyClosedError: Сессия уже закрыта.
        """
        vpn_session = await self._session_repo.get_by_id(session_id)
        if vpn_session is None:
            raise VpnSessionNotFoundError(str(session_id))
        if vpn_session.status == SessionStatus.CLOSED:
            raise VpnSessionAlreadyClosedError()

        end_time = max(datetime.now(tz=timezone.utc), vpn_session.start_time)
        vpn_session = await self._session_repo.close(vpn_session, end_time)

        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.KILL_SESSION,
            entity_type="session",
            entity_id=str(vpn_session.id),
            details="Forcibly terminated active VPN session",
        )
        logger.info("Сессия %s завершена пользователем %s", session_id, actor.username)
        return vpn_session
