"""Роутеры портала — учётные записи пользователей портала."""

import uuid

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user, get_portal_user_service
from app.models.portal_user import PortalUser
from app.schemas.portal_user import (
    PortalUserCreateRequest,
    PortalUserResponse,
    PortalUserUpdateRequest,
)
from app.services.authz import Action, ensure_allowed
from app.services.portal_users import PortalUserService

router = APIRouter(prefix="/users", tags=["пользователи портала"])


@router.get(
    "",
    response_model=list[PortalUserResponse],
    summary="Список пользователей",
)
async def list_users(
    current_user: PortalUser = Depends(get_current_user),
    service: PortalUserService = Depends(get_portal_user_service),
) -> list[PortalUserResponse]:
    """Получить все учётные записи портала."""
    ensure_allowed(current_user, Action.MANAGE_PORTAL_USERS)
    users = await service.get_users()
    return [PortalUserResponse.model_validate(u) for u in users]


@router.post(
    "",
    response_model=PortalUserResponse,
    status_code=201,
    summary="Создать пользователя",
)
async def create_user(
    body: PortalUserCreateRequest,
    current_user: PortalUser = Depends(get_current_user),
    service: PortalUserService = Depends(get_portal_user_service),
) -> PortalUserResponse:
    """Создать учётную запись (только admin)."""
    ensure_allowed(current_user, Action.MANAGE_PORTAL_USERS)
    user = await service.create_user(current_user, body)
    return PortalUserResponse.model_validate(user)


@router.patch(
    "/{user_id}",
    response_model=PortalUserResponse,
    summary="Изменить пользователя",
)
async def update_user(
    user_id: uuid.UUID,
    body: PortalUserUpdateRequest,
    current_user: PortalUser = Depends(get_current_user),
    service: PortalUserService = Depends(get_portal_user_service),
) -> PortalUserResponse:
    """Частично обновить учётную запись (только admin)."""
    ensure_allowed(current_user, Action.MANAGE_PORTAL_USERS)
    user = await service.update_user(current_user, user_id, body)
    return PortalUserResponse.model_validate(user)
