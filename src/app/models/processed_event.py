"""ORM-модель журнала обработанных событий агентов."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class ProcessedEvent(Base):
    """Отметка о применённом событии агента.

    Запись появляется в той же точке сохранения, что и изменения
    события, поэтому повторная доставка того же event_id пропускается.

    Attributes:
        event_id: Внешний идентификатор события (первичный ключ).
        server_id: Сервер, приславший событие.
        event_type: Тип события.
        processed_at: Время применения.
    """

    __tablename__ = "processed_events"

    event_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    server_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<ProcessedEvent {self.event_id} [{self.event_type}]>"
