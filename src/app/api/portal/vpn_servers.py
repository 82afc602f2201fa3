"""Роутеры портала — регистрации VPN-серверов и ключи агентов."""

import uuid

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user, get_vpn_server_service
from app.models.portal_user import PortalUser
from app.schemas.common import MessageResponse
from app.schemas.vpn_server import VpnServerCreateRequest, VpnServerResponse
from app.services.authz import Action, ensure_allowed
from app.services.vpn_servers import VpnServerService

router = APIRouter(prefix="/vpn-servers", tags=["VPN-серверы"])


@router.get(
    "",
    response_model=list[VpnServerResponse],
    summary="Список серверов",
)
async def list_servers(
    current_user: PortalUser = Depends(get_current_user),
    service: VpnServerService = Depends(get_vpn_server_service),
) -> list[VpnServerResponse]:
    """Получить регистрации серверов вместе с ключами (только admin)."""
    ensure_allowed(current_user, Action.MANAGE_VPN_SERVERS)
    servers = await service.get_servers()
    return [VpnServerResponse.model_validate(s) for s in servers]


@router.post(
    "",
    response_model=VpnServerResponse,
    status_code=201,
    summary="Зарегистрировать сервер",
)
async def create_server(
    body: VpnServerCreateRequest,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnServerService = Depends(get_vpn_server_service),
) -> VpnServerResponse:
    """Зарегистрировать сервер и выдать ключ агента."""
    ensure_allowed(current_user, Action.MANAGE_VPN_SERVERS)
    server = await service.create_server(current_user, body)
    return VpnServerResponse.model_validate(server)


@router.delete(
    "/{server_pk}",
    response_model=MessageResponse,
    summary="Удалить сервер",
)
async def delete_server(
    server_pk: uuid.UUID,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnServerService = Depends(get_vpn_server_service),
) -> MessageResponse:
    """Удалить регистрацию. Агент сервера больше не сможет слать телеметрию."""
    ensure_allowed(current_user, Action.MANAGE_VPN_SERVERS)
    await service.delete_server(current_user, server_pk)
    return MessageResponse(message="Сервер удалён")


@router.post(
    "/{server_pk}/regenerate-key",
    response_model=VpnServerResponse,
    summary="Перевыпустить ключ агента",
)
async def regenerate_key(
    server_pk: uuid.UUID,
    current_user: PortalUser = Depends(get_current_user),
    service: VpnServerService = Depends(get_vpn_server_service),
) -> VpnServerResponse:
    """Выдать новый ключ агента. Старый ключ перестаёт работать."""
    ensure_allowed(current_user, Action.MANAGE_VPN_SERVERS)
    server = await service.regenerate_key(current_user, server_pk)
    return VpnServerResponse.model_validate(server)
