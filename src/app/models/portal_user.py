"""ORM-модель пользователя портала (оператора дашборда)."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class PortalRole(str, enum.Enum):
    """Роли пользователей портала."""

    ADMIN = "admin"
    OPERATOR = "operator"
    VIEWER = "viewer"


class PortalUser(Base):
    """Учётная запись для входа в портал.

    Attributes:
        id: Уникальный идентификатор (UUID).
        username: Логин.
        password_hash: Хэш пароля (passlib).
        email: Почта.
        full_name: Полное имя.
        role: admin / operator / viewer.
        is_active: Разрешён ли вход.
        created_at: Дата создания.
        updated_at: Дата последнего обновления.
    """

    __tablename__ = "portal_users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[PortalRole] = mapped_column(
        Enum(PortalRole, name="portal_role", create_constraint=True),
        default=PortalRole.VIEWER,
        nullable=False,
        comment="Роль: admin / operator / viewer",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PortalUser {self.username} [{self.role.value}]>"
