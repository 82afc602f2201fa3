"""Сервис входа в портал, смены пароля и первичной инициализации."""

import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.handlers import (
    InvalidCredentialsError,
    PasswordChangeRejectedError,
)
from app.models.audit_log import AuditAction
from app.models.portal_user import PortalRole, PortalUser
from app.repositories.audit_log import AuditLogRepository
from app.repositories.portal_user import PortalUserRepository
from app.security import generate_password, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Аутентификация пользователей портала.

    Attributes:
        _user_repo: Репозиторий учётных записей.
        _audit_repo: Репозиторий аудит-лога.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._user_repo = PortalUserRepository(session)
        self._audit_repo = AuditLogRepository(session)

    async def login(self, username: str, password: str) -> PortalUser:
        """Проверить логин и пароль.

        Raises:
            InvalidCredentialsError: Нет такого пользователя, он отключён
                или пароль не подошёл.
        """
        user = await self._user_repo.get_by_username(username)
        if (
            user is None
            or not user.is_active
            or not verify_password(password, user.password_hash)
        ):
            logger.info("Неудачный вход пользователя %s", username)
            raise InvalidCredentialsError()

        await self._audit_repo.create(
            user_id=user.id,
            action=AuditAction.LOGIN,
            entity_type="user",
            entity_id=str(user.id),
            details=f"User {user.username} logged in",
        )
        return user

    async def change_password(
        self,
        user: PortalUser,
        current_password: str,
        new_password: str,
    ) -> None:
        """Сменить пароль текущего пользователя.

        Raises:
            PasswordChangeRejectedError: Текущий пароль неверен.
        """
        if not verify_password(current_password, user.password_hash):
            raise PasswordChangeRejectedError()

        user.password_hash = hash_password(new_password)
        await self._user_repo.update(user)

        await self._audit_repo.create(
            user_id=user.id,
            action=AuditAction.CHANGE_PASSWORD,
            entity_type="user",
            entity_id=str(user.id),
            details=f"User {user.username} changed password",
        )

    async def bootstrap_admin(
        self,
        username: str,
        password: str | None = None,
    ) -> PortalUser | None:
        """Создать администратора, если в системе нет ни одного пользователя.

        Повторный вызов ничего не меняет. Если пароль не задан,
        генерируется случайный и один раз выводится в stderr.

        Args:
            username: Логин администратора.
            password: Пароль; None — сгенерировать.

        Returns:
            Созданный администратор или None, если пользователи уже есть.
        """
        if await self._user_repo.count() > 0:
            return None

        generated = not password
        password = password or generate_password()

        user = await self._user_repo.create(
            PortalUser(
                username=username,
                password_hash=hash_password(password),
                role=PortalRole.ADMIN,
                is_active=True,
            )
        )

        if generated:
            # Пароль выводится только в stderr, не в лог
            print(
                f"Bootstrap admin '{username}' password: {password}",
                file=sys.stderr,
                flush=True,
            )
            logger.warning(
                "Создан администратор %s со сгенерированным паролем (выведен в stderr)",
                username,
            )
        else:
            logger.info("Создан администратор %s", username)
        return user
