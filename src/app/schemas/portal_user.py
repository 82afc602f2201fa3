"""Pydantic-схемы пользователей портала и входа (DTO)."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.portal_user import PortalRole


# ── Запросы ──────────────────────────────────────────────


class LoginRequest(BaseModel):
    """Тело запроса на вход."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Тело запроса на смену пароля."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=128)


class PortalUserCreateRequest(BaseModel):
    """Тело запроса на создание учётной записи."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=255,
        examples=["operator1"],
    )
    password: str = Field(..., min_length=8, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    full_name: str | None = Field(default=None, max_length=255)
    role: PortalRole = PortalRole.VIEWER
    is_active: bool = True


class PortalUserUpdateRequest(BaseModel):
    """Частичное обновление учётной записи."""

    password: str | None = Field(default=None, min_length=8, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    full_name: str | None = Field(default=None, max_length=255)
    role: PortalRole | None = None
    is_active: bool | None = None


# ── Ответы ───────────────────────────────────────────────


class PortalUserResponse(BaseModel):
    """Учётная запись без хэша пароля."""

    id: uuid.UUID
    username: str
    email: str | None
    full_name: str | None
    role: PortalRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
