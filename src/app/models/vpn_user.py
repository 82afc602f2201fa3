"""ORM-модель VPN-идентичности (клиентского сертификата OpenVPN)."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Enum,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class VpnUserType(str, enum.Enum):
    """Категория владельца VPN-идентичности."""

    EMPLOYEE = "Employee"
    VENDOR = "Vendor"
    DEALER = "Dealer"
    OTHERS = "Others"


class ConnectionStatus(str, enum.Enum):
    """Текущее состояние подключения."""

    ONLINE = "online"
    OFFLINE = "offline"


class AccountStatus(str, enum.Enum):
    """Статус сертификата по данным index.txt на VPN-сервере."""

    VALID = "VALID"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


class VpnUser(Base):
    """VPN-идентичность, привязанная к конкретному серверу.

    Создаётся только из телеметрии (USERS_UPDATE) и никогда не удаляется.
    Уникальна в пределах пары (server_id, common_name).

    Attributes:
        id: Уникальный идентификатор записи (UUID).
        server_id: Идентификатор VPN-сервера, приславшего данные.
        common_name: CN клиентского сертификата.
        full_name: Имя владельца (заполняется администратором).
        email: Почта владельца.
        contact: Прочие контакты.
        type: Категория владельца.
        connection_status: online / offline.
        account_status: VALID / EXPIRED / REVOKED.
        expiration_date: Дата истечения сертификата.
        revocation_date: Дата отзыва сертификата.
        last_connected_at: Время последнего подключения.
        static_ip: Статический адрес из CCD (ifconfig-push).
        routes: Маршруты из CCD в виде `net/prefix,net/prefix`.
        total_bytes_received: Суммарно принято байт по закрытым сессиям.
        total_bytes_sent: Суммарно отправлено байт по закрытым сессиям.
    """

    __tablename__ = "vpn_users"
    __table_args__ = (
        UniqueConstraint(
            "server_id",
            "common_name",
            name="uq_vpn_users_server_common_name",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    server_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
        comment="Идентификатор VPN-сервера",
    )
    common_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="CN клиентского сертификата",
    )
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[VpnUserType] = mapped_column(
        Enum(VpnUserType, name="vpn_user_type", create_constraint=True),
        default=VpnUserType.OTHERS,
        nullable=False,
    )
    connection_status: Mapped[ConnectionStatus] = mapped_column(
        Enum(ConnectionStatus, name="connection_status", create_constraint=True),
        default=ConnectionStatus.OFFLINE,
        nullable=False,
        comment="Состояние подключения: online / offline",
    )
    account_status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, name="account_status", create_constraint=True),
        default=AccountStatus.VALID,
        nullable=False,
        comment="Статус сертификата: VALID / EXPIRED / REVOKED",
    )
    expiration_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    revocation_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_connected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    static_ip: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Статический адрес из CCD",
    )
    routes: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Маршруты из CCD: net/prefix через запятую",
    )
    total_bytes_received: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
        nullable=False,
    )
    total_bytes_sent: Mapped[int] = mapped_column(
        BigInteger,
        default=0,
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
        return (
            f"<VpnUser {self.server_id}/{self.common_name} "
            f"[{self.connection_status.value}]>"
        )
