"""ORM-модель зарегистрированного VPN-сервера."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class VpnServer(Base):
    """Регистрация VPN-сервера, от агента которого принимается телеметрия.

    Attributes:
        id: Уникальный идентификатор записи (UUID).
        name: Человекочитаемое имя.
        description: Произвольное описание.
        server_id: Сгенерированный идентификатор, который агент шлёт в батче.
        api_key: Ключ агента (Bearer-токен).
        is_active: Принимать ли телеметрию от сервера.
        last_seen_at: Время последнего принятого батча.
        created_at: Дата регистрации.
    """

    __tablename__ = "vpn_servers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    server_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        comment="Идентификатор сервера в телеметрии",
    )
    api_key: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bearer-ключ агента",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_seen_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<VpnServer {self.name} ({self.server_id})>"
