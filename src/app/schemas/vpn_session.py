"""Pydantic-схемы VPN-сессий (DTO)."""

import uuid
from datetime import datetime

from pydantic import BaseModel

from app.models.vpn_session import SessionStatus
from app.schemas.vpn_user import VpnUserResponse


class VpnSessionResponse(BaseModel):
    """Ответ с данными сессии."""

    id: uuid.UUID
    vpn_user_id: uuid.UUID
    server_id: str
    event_id: str | None
    start_time: datetime
    end_time: datetime | None
    remote_ip: str | None
    virtual_ip: str | None
    status: SessionStatus
    bytes_received: int
    bytes_sent: int

    model_config = {"from_attributes": True}


class VpnSessionWithUserResponse(VpnSessionResponse):
    """Сессия вместе с идентичностью — для таблиц дашборда."""

    vpn_user: VpnUserResponse
