"""Репозиторий для работы с таблицей audit_logs (аудит-лог)."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_log import AuditLog


class AuditLogRepository:
    """Объект доступа к данным аудит-лога.

    Записи только добавляются: методов изменения и удаления нет.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        action: str,
        entity_type: str,
        user_id: uuid.UUID | None = None,
        entity_id: str | None = None,
        details: str | None = None,
    ) -> AuditLog:
        """Создать запись аудит-лога.

        Args:
            action: Код действия.
            entity_type: Тип затронутой сущности.
            user_id: Пользователь портала, выполнивший действие.
            entity_id: Идентификатор сущности.
            details: Описание действия.

        Returns:
            Созданная запись.
        """
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        )
        self._session.add(entry)
        await self._session.flush()
        await self._session.refresh(entry)
        return entry

    async def get_list(self, limit: int | None = None) -> tuple[list[AuditLog], int]:
        """Получить записи аудит-лога, новые первыми.

        Args:
            limit: Максимальное количество записей.

        Returns:
            Кортеж (список записей, общее количество).
        """
        stmt = select(AuditLog).order_by(AuditLog.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        entries = list(result.scalars().all())

        count_result = await self._session.execute(select(func.count(AuditLog.id)))
        total = count_result.scalar() or 0

        return entries, total
