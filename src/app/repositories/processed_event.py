"""Репозиторий для работы с таблицей processed_events."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.processed_event import ProcessedEvent


class ProcessedEventRepository:
    """Журнал применённых event_id.

    Attributes:
        _session: Асинхронная сессия SQLAlchemy.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def mark(self, event_id: str, server_id: str, event_type: str) -> bool:
        """Отметить событие как применённое.

        Вставка идёт в точке сохранения: уникальность event_id решает,
        кто применит событие при повторной или параллельной доставке.

        Returns:
            True, если событие отмечено впервые; False, если уже было.
        """
        try:
            async with self._session.begin_nested():
                self._session.add(
                    ProcessedEvent(
                        event_id=event_id,
                        server_id=server_id,
                        event_type=event_type,
                    )
                )
                await self._session.flush()
        except IntegrityError:
            return False
        return True
