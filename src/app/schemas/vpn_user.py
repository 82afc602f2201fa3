"""Pydantic-схемы VPN-идентичностей (DTO)."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.vpn_user import AccountStatus, ConnectionStatus, VpnUserType


class VpnUserUpdateRequest(BaseModel):
    """Частичное обновление описательных полей. CN не меняется."""

    full_name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    contact: str | None = Field(default=None, max_length=255)
    type: VpnUserType | None = None


class VpnUserResponse(BaseModel):
    """Ответ с данными VPN-идентичности."""

    id: uuid.UUID
    server_id: str
    common_name: str
    full_name: str | None
    email: str | None
    contact: str | None
    type: VpnUserType
    connection_status: ConnectionStatus
    account_status: AccountStatus
    expiration_date: datetime | None
    revocation_date: datetime | None
    last_connected_at: datetime | None
    static_ip: str | None
    routes: str | None
    total_bytes_received: int
    total_bytes_sent: int
    created_at: datetime

    model_config = {"from_attributes": True}


class VpnUserListResponse(BaseModel):
    """Список идентичностей с мета-информацией."""

    items: list[VpnUserResponse]
    total: int
