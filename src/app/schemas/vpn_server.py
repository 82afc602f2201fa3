"""Pydantic-схемы регистраций VPN-серверов (DTO)."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class VpnServerCreateRequest(BaseModel):
    """Тело запроса на регистрацию сервера."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        examples=["vpn-prod-01"],
    )
    description: str | None = Field(default=None, max_length=2000)


class VpnServerResponse(BaseModel):
    """Регистрация сервера вместе с ключом агента."""

    id: uuid.UUID
    name: str
    description: str | None
    server_id: str
    api_key: str
    is_active: bool
    last_seen_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
