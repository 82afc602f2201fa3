"""ORM-модель VPN-сессии (от подключения до отключения)."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.vpn_user import VpnUser


class SessionStatus(str, enum.Enum):
    """Статусы VPN-сессии."""

    ACTIVE = "active"
    CLOSED = "closed"


class VpnSession(Base):
    """Запись об одном подключении VPN-клиента.

    Открывается событием SESSION_CONNECTED, закрывается событием
    SESSION_DISCONNECTED или вручную. Закрытая сессия не открывается повторно.

    Attributes:
        id: Уникальный идентификатор сессии (UUID).
        vpn_user_id: Ссылка на VPN-идентичность.
        server_id: Идентификатор VPN-сервера.
        event_id: Внешний идентификатор события подключения (для дедупликации).
        start_time: Время подключения.
        end_time: Время отключения (пусто у активной сессии).
        remote_ip: Внешний адрес клиента.
        virtual_ip: Адрес внутри туннеля.
        status: active / closed.
        bytes_received: Принято байт за сессию.
        bytes_sent: Отправлено байт за сессию.
    """

    __tablename__ = "vpn_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    vpn_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vpn_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Ссылка на VPN-идентичность",
    )
    server_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )
    event_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        comment="Идентификатор события агента",
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    remote_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    virtual_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, name="session_status", create_constraint=True),
        default=SessionStatus.ACTIVE,
        nullable=False,
        index=True,
        comment="Статус сессии: active / closed",
    )
    bytes_received: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
    )
    bytes_sent: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
    )

    # ── Связь с идентичностью ────────────────────────────
    vpn_user: Mapped[VpnUser] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<VpnSession {self.id} [{self.status.value}]>"
