"""Сводная статистика для главной страницы дашборда."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vpn_user import ConnectionStatus
from app.repositories.vpn_server import VpnServerRepository
from app.repositories.vpn_session import VpnSessionRepository
from app.repositories.vpn_user import VpnUserRepository
from app.schemas.stats import StatsResponse


class StatsService:
    """Агрегаты по сессиям, идентичностям и серверам."""

    def __init__(self, session: AsyncSession) -> None:
        self._vpn_user_repo = VpnUserRepository(session)
        self._session_repo = VpnSessionRepository(session)
        self._server_repo = VpnServerRepository(session)

    async def get_stats(self) -> StatsResponse:
        """Собрать сводку."""
        return StatsResponse(
            active_sessions=await self._session_repo.count_active(),
            total_vpn_users=await self._vpn_user_repo.count(),
            online_vpn_users=await self._vpn_user_repo.count(
                status=ConnectionStatus.ONLINE
            ),
            bytes_transferred=await self._session_repo.total_bytes(),
            registered_servers=await self._server_repo.count(),
            active_servers=await self._server_repo.count(active_only=True),
        )
