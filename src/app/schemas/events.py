"""Pydantic-схемы батча телеметрии от агента OpenVPN."""

import enum
from datetime import datetime

from pydantic import BaseModel, Field


class EventType(str, enum.Enum):
    """Известные типы событий агента."""

    SESSION_CONNECTED = "SESSION_CONNECTED"
    SESSION_DISCONNECTED = "SESSION_DISCONNECTED"
    USERS_UPDATE = "USERS_UPDATE"
    CCD_INFO = "CCD_INFO"


class UsersUpdateAction(str, enum.Enum):
    """Действия события USERS_UPDATE."""

    INITIAL = "INITIAL"
    ADDED = "ADDED"
    REVOKED = "REVOKED"
    EXPIRED = "EXPIRED"


# ── Запрос ───────────────────────────────────────────────


class UserStatusEntry(BaseModel):
    """Строка index.txt: один сертификат в массовой синхронизации."""

    common_name: str = Field(..., min_length=1, max_length=255)
    status: str | None = Field(
        default=None,
        description="VALID / REVOKED / EXPIRED",
    )
    expires_at_index: str | None = Field(
        default=None,
        description="Дата истечения: YYMMDDHHmmssZ или ISO-8601",
    )


class TelemetryEvent(BaseModel):
    """Одно событие агента.

    Тип и действие — строки: неизвестные значения от будущих версий
    агента не ломают батч, а пропускаются при обработке.
    """

    event_id: str | None = Field(default=None, max_length=255)
    seq: int | None = None
    type: str = Field(..., min_length=1, examples=["SESSION_CONNECTED"])
    common_name: str | None = Field(default=None, max_length=255)
    real_ip: str | None = None
    real_port: str | None = None
    virtual_ip: str | None = None
    status: str | None = None
    action: str | None = None
    expires_at_index: str | None = None
    revoked_at_index: str | None = None
    users: list[UserStatusEntry] | None = None
    ccd_content_b64: str | None = None
    bytes_received: int | None = Field(default=None, ge=0)
    bytes_sent: int | None = Field(default=None, ge=0)
    event_time_vpn: str | None = None
    event_time_agent: str | None = None


class TelemetryBatch(BaseModel):
    """Батч событий от агента одного VPN-сервера."""

    server_id: str = Field(..., min_length=1, max_length=64)
    sent_at: datetime | None = None
    events: list[TelemetryEvent]


# ── Ответ ────────────────────────────────────────────────


class TelemetryAcceptedResponse(BaseModel):
    """Подтверждение приёма батча."""

    received: int
