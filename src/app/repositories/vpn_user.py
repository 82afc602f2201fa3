"""Репозиторий для работы с таблицей vpn_users."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vpn_user import ConnectionStatus, VpnUser


class VpnUserRepository:
    """Объект доступа к данным VPN-идентичностей.

    Инкапсулирует все SQL-запросы к таблице `vpn_users`.
    Не содержит бизнес-логики — только чтение/запись в БД.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, vpn_user_id: uuid.UUID) -> VpnUser | None:
        """Получить идентичность по UUID.

        Args:
            vpn_user_id: UUID записи.

        Returns:
            Идентичность или None, если не найдена.
        """
        return await self._session.get(VpnUser, vpn_user_id)

    async def get_by_server_and_common_name(
        self,
        server_id: str,
        common_name: str,
    ) -> VpnUser | None:
        """Получить идентичность по паре (server_id, common_name).

        Args:
            server_id: Идентификатор VPN-сервера.
            common_name: CN клиентского сертификата.

        Returns:
            Идентичность или None, если не найдена.
        """
        stmt = select(VpnUser).where(
            VpnUser.server_id == server_id,
            VpnUser.common_name == common_name,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_list(
        self,
        server_id: str | None = None,
    ) -> tuple[list[VpnUser], int]:
        """Получить список идентичностей.

        Сначала недавно подключавшиеся, затем никогда не подключавшиеся.

        Args:
            server_id: Фильтр по VPN-серверу.

        Returns:
            Кортеж (список идентичностей, общее количество).
        """
        stmt = select(VpnUser)
        count_stmt = select(func.count(VpnUser.id))

        if server_id is not None:
            stmt = stmt.where(VpnUser.server_id == server_id)
            count_stmt = count_stmt.where(VpnUser.server_id == server_id)

        stmt = stmt.order_by(
            VpnUser.last_connected_at.desc().nulls_last(),
            VpnUser.common_name,
        )

        result = await self._session.execute(stmt)
        vpn_users = list(result.scalars().all())

        count_result = await self._session.execute(count_stmt)
        total = count_result.scalar() or 0

        return vpn_users, total

    async def create_if_absent(self, vpn_user: VpnUser) -> tuple[VpnUser, bool]:
        """Добавить идентичность, если пары (server_id, common_name) ещё нет.

        Вставка идёт в точке сохранения: при гонке двух агентов
        уникальный индекс отклоняет проигравшую вставку, и возвращается
        строка победителя.

        Args:
            vpn_user: Новая идентичность.

        Returns:
            Кортеж (идентичность в БД, создана ли она этим вызовом).
        """
        try:
            async with self._session.begin_nested():
                self._session.add(vpn_user)
                await self._session.flush()
        except IntegrityError:
            existing = await self.get_by_server_and_common_name(
                vpn_user.server_id,
                vpn_user.common_name,
            )
            if existing is None:
                raise
            return existing, False

        await self._session.refresh(vpn_user)
        return vpn_user, True

    async def update(self, vpn_user: VpnUser) -> VpnUser:
        """Сохранить изменения идентичности.

        Args:
            vpn_user: Изменённый экземпляр.

        Returns:
            Обновлённая идентичность.
        """
        await self._session.flush()
        await self._session.refresh(vpn_user)
        return vpn_user

    async def count(self, status: ConnectionStatus | None = None) -> int:
        """Количество идентичностей (опционально — по статусу подключения)."""
        stmt = select(func.count(VpnUser.id))
        if status is not None:
            stmt = stmt.where(VpnUser.connection_status == status)
        result = await self._session.execute(stmt)
        return result.scalar() or 0
