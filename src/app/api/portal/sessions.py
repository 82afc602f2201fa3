"""Роутеры портала — активные сессии и история подключений."""

import uuid

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import (
    get_app_settings,
    get_current_user,
    get_vpn_session_service,
)
from app.config import Settings
from app.models.portal_user import PortalUser
from app.schemas.common import MessageResponse
from app.schemas.vpn_session import VpnSessionWithUserResponse
from app.services.authz import Action, ensure_allowed
from app.services.vpn_sessions import VpnSessionService

router = APIRouter(prefix="/sessions", tags=["сессии"])


@router.get(
    "/active",
    response_model=list[VpnSessionWithUserResponse],
    summary="Активные сессии",
)
async def list_active_sessions(
    server_id: str | None = Query(default=None),
    current_user: PortalUser = Depends(get_current_user),
    service: VpnSessionService = Depends(get_vpn_session_service),
) -> list[VpnSessionWithUserResponse]:
    """Получить активные сессии, новые первыми."""
    ensure_allowed(current_user, Action.VIEW)
    sessions = await service.get_active(server_id=server_id)
    return [VpnSessionWithUserResponse.model_validate(s) for s in sessions]


@router.get(
    "/history",
    response_model=list[VpnSessionWithUserResponse],
    summary="История сессий",
)
async def list_session_history(
    server_id: str | None = Query(default=None),
    current_user: PortalUser = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
    service: VpnSessionService = Depends(get_vpn_session_service),
) -> list[VpnSessionWithUserResponse]:
    """Получить закрытые сессии, недавно завершённые первыми."""
    ensure_allowed(current_user, Action.VIEW)
    sessions = await service.get_history(
        limit=settings.session_history_limit,
        server_id=server_id,
    )
    return [VpnSessionWithUserResponse.model_validate(s) for s in sessions]


@router.post(
    "/{session_id}/kill",
    response_model=MessageResponse,
    summary="Завершить сессию",
)
async def kill_session(
    session_id: uuid.UUID,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnSessionService = Depends(get_vpn_session_service),
) -> MessageResponse:
    """Принудительно закрыть активную сессию."""
    ensure_allowed(current_user, Action.KILL_SESSION)
    await service.kill_session(current_user, session_id)
    return MessageResponse(message="Сессия завершена")
