"""Сервис просмотра и редактирования VPN-идентичностей."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.handlers import VpnUserNotFoundError
from app.models.audit_log import AuditAction
from app.models.portal_user import PortalUser
from app.models.vpn_session import VpnSession
from app.models.vpn_user import VpnUser
from app.repositories.audit_log import AuditLogRepository
from app.repositories.vpn_session import VpnSessionRepository
from app.repositories.vpn_user import VpnUserRepository
from app.schemas.vpn_user import VpnUserUpdateRequest


class VpnUserService:
    """Чтение идентичностей и правка их описательных полей.

    CN, статусы и данные CCD меняет только телеметрия.

    Attributes:
        _vpn_user_repo: Репозиторий идентичностей.
        _session_repo: Репозиторий сессий.
        _audit_repo: Репозиторий аудит-лога.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._vpn_user_repo = VpnUserRepository(session)
        self._session_repo = VpnSessionRepository(session)
        self._audit_repo = AuditLogRepository(session)

    async def get_vpn_users(
        self,
        server_id: str | None = None,
    ) -> tuple[list[VpnUser], int]:
        """Список идентичностей с фильтром по серверу."""
        return await self._vpn_user_repo.get_list(server_id=server_id)

    async def get_vpn_user(self, vpn_user_id: uuid.UUID) -> VpnUser:
        """Получить идентичность.

        Raises:
            VpnUserNotFoundError: Идентичность не найдена.
        """
        vpn_user = await self._vpn_user_repo.get_by_id(vpn_user_id)
        if vpn_user is None:
            raise VpnUserNotFoundError(str(vpn_user_id))
        return vpn_user

    async def get_sessions(self, vpn_user_id: uuid.UUID) -> list[VpnSession]:
        """История сессий идентичности."""
        vpn_user = await self.get_vpn_user(vpn_user_id)
        return await self._session_repo.get_by_vpn_user(vpn_user.id)

    async def update_vpn_user(
        self,
        actor: PortalUser,
        vpn_user_id: uuid.UUID,
        data: VpnUserUpdateRequest,
    ) -> VpnUser:
        """Обновить описательные поля идентичности."""
        vpn_user = await self.get_vpn_user(vpn_user_id)

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(vpn_user, field, value)
        vpn_user = await self._vpn_user_repo.update(vpn_user)

        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            entity_type="vpn_user",
            entity_id=str(vpn_user.id),
            details=(
                f"Updated VPN user {vpn_user.common_name}: "
                f"{', '.join(sorted(changes)) or 'no changes'}"
            ),
        )
        return vpn_user
