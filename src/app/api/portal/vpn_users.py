"""Роутеры портала — VPN-идентичности."""

import uuid

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_current_user, get_vpn_user_service
from app.models.portal_user import PortalUser
from app.schemas.vpn_session import VpnSessionResponse
from app.schemas.vpn_user import (
    VpnUserListResponse,
    VpnUserResponse,
    VpnUserUpdateRequest,
)
from app.services.authz import Action, ensure_allowed
from app.services.vpn_users import VpnUserService

router = APIRouter(prefix="/vpn-users", tags=["VPN-пользователи"])


@router.get(
    "",
    response_model=VpnUserListResponse,
    summary="Список VPN-пользователей",
)
async def list_vpn_users(
    server_id: str | None = Query(
        default=None,
        description="Фильтр по идентификатору VPN-сервера",
    ),
    current_user: PortalUser = Depends(get_current_user),
    service: VpnUserService = Depends(get_vpn_user_service),
) -> VpnUserListResponse:
    """Получить VPN-идентичности, недавно подключавшиеся — первыми."""
    ensure_allowed(current_user, Action.VIEW)
    vpn_users, total = await service.get_vpn_users(server_id=server_id)
    return VpnUserListResponse(
        items=[VpnUserResponse.model_validate(u) for u in vpn_users],
        total=total,
    )


@router.get(
    "/{vpn_user_id}",
    response_model=VpnUserResponse,
    summary="Карточка VPN-пользователя",
)
async def get_vpn_user(
    vpn_user_id: uuid.UUID,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnUserService = Depends(get_vpn_user_service),
) -> VpnUserResponse:
    """Получить VPN-идентичность."""
    ensure_allowed(current_user, Action.VIEW)
    vpn_user = await service.get_vpn_user(vpn_user_id)
    return VpnUserResponse.model_validate(vpn_user)


@router.patch(
    "/{vpn_user_id}",
    response_model=VpnUserResponse,
    summary="Изменить VPN-пользователя",
)
async def update_vpn_user(
    vpn_user_id: uuid.UUID,
    body: VpnUserUpdateRequest,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnUserService = Depends(get_vpn_user_service),
) -> VpnUserResponse:
    """Обновить описательные поля (имя, почта, контакт, категория)."""
    ensure_allowed(current_user, Action.UPDATE_VPN_USER)
    vpn_user = await service.update_vpn_user(current_user, vpn_user_id, body)
    return VpnUserResponse.model_validate(vpn_user)


@router.get(
    "/{vpn_user_id}/sessions",
    response_model=list[VpnSessionResponse],
    summary="Сессии VPN-пользователя",
)
async def list_vpn_user_sessions(
    vpn_user_id: uuid.UUID,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnUserService = Depends(get_vpn_user_service),
) -> list[VpnSessionResponse]:
    """Получить все сессии идентичности, новые первыми."""
    ensure_allowed(current_user, Action.VIEW)
    sessions = await service.get_sessions(vpn_user_id)
    return [VpnSessionResponse.model_validate(s) for s in sessions]
