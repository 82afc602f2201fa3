"""Сервис регистрации VPN-серверов и ротации ключей агентов."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.handlers import VpnServerNotFoundError
from app.models.audit_log import AuditAction
from app.models.portal_user import PortalUser
from app.models.vpn_server import VpnServer
from app.repositories.audit_log import AuditLogRepository
from app.repositories.vpn_server import VpnServerRepository
from app.schemas.vpn_server import VpnServerCreateRequest
from app.security import generate_api_key, generate_server_id


class VpnServerService:
    """Регистрации серверов: создание, удаление, перевыпуск ключа.

    Attributes:
        _server_repo: Репозиторий регистраций.
        _audit_repo: Репозиторий аудит-лога.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._server_repo = VpnServerRepository(session)
        self._audit_repo = AuditLogRepository(session)

    async def get_servers(self) -> list[VpnServer]:
        """Все регистрации."""
        return await self._server_repo.get_list()

    async def get_server(self, server_pk: uuid.UUID) -> VpnServer:
        """Получить регистрацию.

        Raises:
            VpnServerNotFoundError: Регистрация не найдена.
        """
        server = await self._server_repo.get_by_id(server_pk)
        if server is None:
            raise VpnServerNotFoundError(str(server_pk))
        return server

    async def create_server(
        self,
        actor: PortalUser,
        data: VpnServerCreateRequest,
    ) -> VpnServer:
        """Зарегистрировать сервер: сгенерировать server_id и ключ агента."""
        server = await self._server_repo.create(
            VpnServer(
                name=data.name,
                description=data.description,
                server_id=generate_server_id(),
                api_key=generate_api_key(),
                is_active=True,
            )
        )

        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.CREATE,
            entity_type="vpn_server",
            entity_id=server.server_id,
            details=f"Registered VPN server {server.name}",
        )
        return server

    async def delete_server(self, actor: PortalUser, server_pk: uuid.UUID) -> None:
        """Удалить регистрацию. Данные телеметрии сервера сохраняются."""
        server = await self.get_server(server_pk)

        # Аудит пишем ДО удаления, пока доступно имя
        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.DELETE,
            entity_type="vpn_server",
            entity_id=server.server_id,
            details=f"Deleted VPN server {server.name}",
        )
        await self._server_repo.delete(server)

    async def regenerate_key(
        self,
        actor: PortalUser,
        server_pk: uuid.UUID,
    ) -> VpnServer:
        """Перевыпустить ключ агента. Старый ключ перестаёт работать."""
        server = await self.get_server(server_pk)
        server.api_key = generate_api_key()
        server = await self._server_repo.update(server)

        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.REGENERATE_KEY,
            entity_type="vpn_server",
            entity_id=server.server_id,
            details=f"Regenerated API key for VPN server {server.name}",
        )
        return server
