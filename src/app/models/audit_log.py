"""ORM-модель журнала действий администраторов (аудит)."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.portal_user import PortalUser


class AuditAction:
    """Коды действий, фиксируемых в аудит-логе."""

    LOGIN = "LOGIN"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    KILL_SESSION = "KILL_SESSION"
    REGENERATE_KEY = "REGENERATE_KEY"


class AuditLog(Base):
    """Запись аудит-лога. Только добавляется, не изменяется и не удаляется.

    Attributes:
        id: Уникальный идентификатор записи (UUID).
        user_id: Пользователь портала, выполнивший действие.
        action: Код действия (CREATE, KILL_SESSION и т.д.).
        entity_type: Тип сущности (user, vpn_user, session, vpn_server).
        entity_id: Идентификатор сущности.
        details: Человекочитаемое описание.
        created_at: Время действия.
    """

    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("portal_users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    entity_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # ── Связь с пользователем портала ────────────────────
    user: Mapped[PortalUser | None] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id}>"
