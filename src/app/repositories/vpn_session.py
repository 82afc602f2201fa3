"""Репозиторий для работы с таблицей vpn_sessions."""

import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vpn_session import SessionStatus, VpnSession


class VpnSessionRepository:
    """Объект доступа к данным VPN-сессий.

    Инкапсулирует все SQL-запросы к таблице `vpn_sessions`.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, vpn_session: VpnSession) -> VpnSession | None:
        """Добавить новую сессию.

        Если event_id уже занят (параллельная повторная доставка),
        вставка откатывается до точки сохранения.

        Args:
            vpn_session: Экземпляр модели VpnSession.

        Returns:
            Сохранённая сессия или None, если событие уже записано.
        """
        try:
            async with self._session.begin_nested():
                self._session.add(vpn_session)
                await self._session.flush()
        except IntegrityError:
            if vpn_session.event_id is None:
                raise
            return None

        await self._session.refresh(vpn_session)
        return vpn_session

    async def get_by_id(self, session_id: uuid.UUID) -> VpnSession | None:
        """Получить сессию по UUID."""
        return await self._session.get(VpnSession, session_id)

    async def get_latest_active(self, vpn_user_id: uuid.UUID) -> VpnSession | None:
        """Получить самую позднюю по start_time активную сессию идентичности.

        Args:
            vpn_user_id: UUID идентичности.

        Returns:
            Сессия или None, если активных нет.
        """
        stmt = (
            select(VpnSession)
            .where(
                VpnSession.vpn_user_id == vpn_user_id,
                VpnSession.status == SessionStatus.ACTIVE,
            )
            .order_by(VpnSession.start_time.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def close(self, vpn_session: VpnSession, end_time: datetime) -> VpnSession:
        """Закрыть сессию.

        Args:
            vpn_session: Активная сессия.
            end_time: Время отключения.

        Returns:
            Закрытая сессия.
        """
        vpn_session.status = SessionStatus.CLOSED
        vpn_session.end_time = end_time
        await self._session.flush()
        await self._session.refresh(vpn_session)
        return vpn_session

    async def get_active(self, server_id: str | None = None) -> list[VpnSession]:
        """Активные сессии, новые первыми."""
        stmt = select(VpnSession).where(VpnSession.status == SessionStatus.ACTIVE)
        if server_id is not None:
            stmt = stmt.where(VpnSession.server_id == server_id)
        stmt = stmt.order_by(VpnSession.start_time.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_history(
        self,
        limit: int,
        server_id: str | None = None,
    ) -> list[VpnSession]:
        """Закрытые сессии, недавно завершённые первыми.

        Args:
            limit: Максимальное количество записей.
            server_id: Фильтр по VPN-серверу.

        Returns:
            Список закрытых сессий.
        """
        stmt = select(VpnSession).where(VpnSession.status == SessionStatus.CLOSED)
        if server_id is not None:
            stmt = stmt.where(VpnSession.server_id == server_id)
        stmt = stmt.order_by(VpnSession.end_time.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_vpn_user(self, vpn_user_id: uuid.UUID) -> list[VpnSession]:
        """Все сессии идентичности, новые первыми."""
        stmt = (
            select(VpnSession)
            .where(VpnSession.vpn_user_id == vpn_user_id)
            .order_by(VpnSession.start_time.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self) -> int:
        """Количество активных сессий."""
        stmt = select(func.count(VpnSession.id)).where(
            VpnSession.status == SessionStatus.ACTIVE
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def total_bytes(self) -> int:
        """Суммарный учтённый трафик по всем сессиям."""
        stmt = select(
            func.coalesce(
                func.sum(VpnSession.bytes_received + VpnSession.bytes_sent),
                0,
            )
        )
        result = await self._session.execute(stmt)
        return int(result.scalar() or 0)
