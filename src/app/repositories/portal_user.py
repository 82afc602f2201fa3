"""Репозиторий для работы с таблицей portal_users."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.portal_user import PortalUser


class PortalUserRepository:
    """Объект доступа к учётным записям портала.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, user: PortalUser) -> PortalUser:
        """Добавить учётную запись."""
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> PortalUser | None:
        """Получить учётную запись по UUID."""
        return await self._session.get(PortalUser, user_id)

    async def get_by_username(self, username: str) -> PortalUser | None:
        """Получить учётную запись по логину."""
        stmt = select(PortalUser).where(PortalUser.username == username)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_list(self) -> list[PortalUser]:
        """Все учётные записи, новые первыми."""
        stmt = select(PortalUser).order_by(PortalUser.created_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, user: PortalUser) -> PortalUser:
        """Сохранить изменения учётной записи."""
        await self._session.flush()
        await self._session.refresh(user)
        return user

    async def count(self) -> int:
        """Количество учётных записей."""
        result = await self._session.execute(select(func.count(PortalUser.id)))
        return result.scalar() or 0
