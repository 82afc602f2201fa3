"""Репозиторий для работы с таблицей vpn_servers."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vpn_server import VpnServer


class VpnServerRepository:
    """Объект доступа к регистрациям VPN-серверов.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, server: VpnServer) -> VpnServer:
        """Добавить регистрацию сервера."""
        self._session.add(server)
        await self._session.flush()
        await self._session.refresh(server)
        return server

    async def get_by_id(self, server_pk: uuid.UUID) -> VpnServer | None:
        """Получить регистрацию по UUID записи."""
        return await self._session.get(VpnServer, server_pk)

    async def get_by_server_id(self, server_id: str) -> VpnServer | None:
        """Получить регистрацию по идентификатору сервера из телеметрии.

        Args:
            server_id: Идентификатор, который агент присылает в батче.

        Returns:
            Регистрация или None.
        """
        stmt = select(VpnServer).where(VpnServer.server_id == server_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_list(self) -> list[VpnServer]:
        """Все регистрации, новые первыми."""
        stmt = select(VpnServer).order_by(VpnServer.created_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, server: VpnServer) -> VpnServer:
        """Сохранить изменения регистрации."""
        await self._session.flush()
        await self._session.refresh(server)
        return server

    async def delete(self, server: VpnServer) -> None:
        """Удалить регистрацию."""
        await self._session.delete(server)
        await self._session.flush()

    async def count(self, active_only: bool = False) -> int:
        """Количество регистраций."""
        stmt = select(func.count(VpnServer.id))
        if active_only:
            stmt = stmt.where(VpnServer.is_active.is_(True))
        result = await self._session.execute(stmt)
        return result.scalar() or 0
