"""Сервис управления учётными записями портала."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.handlers import (
    PortalUserAlreadyExistsError,
    PortalUserNotFoundError,
)
from app.models.audit_log import AuditAction
from app.models.portal_user import PortalUser
from app.repositories.audit_log import AuditLogRepository
from app.repositories.portal_user import PortalUserRepository
from app.schemas.portal_user import PortalUserCreateRequest, PortalUserUpdateRequest
from app.security import hash_password


class PortalUserService:
    """CRUD учётных записей с записью в аудит-лог.

    Attributes:
        _user_repo: Репозиторий учётных записей.
        _audit_repo: Репозиторий аудит-лога.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._user_repo = PortalUserRepository(session)
        self._audit_repo = AuditLogRepository(session)

    async def get_users(self) -> list[PortalUser]:
        """Все учётные записи."""
        return await self._user_repo.get_list()

    async def create_user(
        self,
        actor: PortalUser,
        data: PortalUserCreateRequest,
    ) -> PortalUser:
        """Создать учётную запись.

        Raises:
            PortalUserAlreadyExistsError: Логин занят.
        """
        if await self._user_repo.get_by_username(data.username) is not None:
            raise PortalUserAlreadyExistsError(data.username)

        user = await self._user_repo.create(
            PortalUser(
                username=data.username,
                password_hash=hash_password(data.password),
                email=data.email,
                full_name=data.full_name,
                role=data.role,
                is_active=data.is_active,
            )
        )

        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.CREATE,
            entity_type="user",
            entity_id=str(user.id),
            details=f"Created user {user.username} with role {user.role.value}",
        )
        return user

    async def update_user(
        self,
        actor: PortalUser,
        user_id: uuid.UUID,
        data: PortalUserUpdateRequest,
    ) -> PortalUser:
        """Частично обновить учётную запись.

        Raises:
            PortalUserNotFoundError: Учётная запись не найдена.
        """
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise PortalUserNotFoundError(str(user_id))

        changes = data.model_dump(exclude_unset=True)
        password = changes.pop("password", None)
        for field, value in changes.items():
            setattr(user, field, value)
        if password:
            user.password_hash = hash_password(password)

        user = await self._user_repo.update(user)

        changed = sorted([*changes, *(["password"] if password else [])])
        await self._audit_repo.create(
            user_id=actor.id,
            action=AuditAction.UPDATE,
            entity_type="user",
            entity_id=str(user.id),
            details=f"Updated user {user.username}: {', '.join(changed) or 'no changes'}",
        )
        return user
