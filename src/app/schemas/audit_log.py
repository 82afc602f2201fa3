"""Pydantic-схемы аудит-лога (DTO)."""

import uuid
from datetime import datetime

from pydantic import BaseModel

from app.schemas.portal_user import PortalUserResponse


class AuditLogResponse(BaseModel):
    """Ответ с записью аудит-лога."""

    id: uuid.UUID
    user_id: uuid.UUID | None
    action: str
    entity_type: str
    entity_id: str | None
    details: str | None
    created_at: datetime
    user: PortalUserResponse | None

    model_config = {"from_attributes": True}


class AuditLogListResponse(BaseModel):
    """Список записей с мета-информацией."""

    items: list[AuditLogResponse]
    total: int
