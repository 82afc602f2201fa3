"""Провайдеры зависимостей FastAPI (Dependency Injection).

Центральная точка конфигурации DI: все сервисы и зависимости
создаются и предоставляются через функции-провайдеры.
"""

import uuid
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.database.session import get_session
from app.exceptions.handlers import NotAuthenticatedError
from app.models.portal_user import PortalUser
from app.repositories.portal_user import PortalUserRepository
from app.services.auth import AuthService
from app.services.ingestion import IngestionService
from app.services.portal_users import PortalUserService
from app.services.stats import StatsService
from app.services.vpn_servers import VpnServerService
from app.services.vpn_sessions import VpnSessionService
from app.services.vpn_users import VpnUserService

# Не отвечает 403 сам: отсутствие ключа обрабатывает IngestionService
bearer_scheme = HTTPBearer(auto_error=False)

SESSION_USER_KEY = "user_id"


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Внутренний фабричный метод — синглтон настроек."""
    return get_settings()


def get_app_settings() -> Settings:
    """Провайдер настроек приложения."""
    return _load_settings()


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Извлечь Bearer-ключ из заголовка Authorization (или None)."""
    if credentials is None:
        return None
    return credentials.credentials


# ── Текущий пользователь портала ─────────────────────────


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> PortalUser:
    """Получить пользователя портала из cookie-сессии.

    Raises:
        NotAuthenticatedError: Сессии нет, пользователь удалён или отключён.
    """
    raw_user_id = request.session.get(SESSION_USER_KEY)
    if not raw_user_id:
        raise NotAuthenticatedError()

    try:
        user_id = uuid.UUID(str(raw_user_id))
    except ValueError:
        request.session.clear()
        raise NotAuthenticatedError() from None

    user = await PortalUserRepository(session).get_by_id(user_id)
    if user is None or not user.is_active:
        request.session.clear()
        raise NotAuthenticatedError()
    return user


# ── Сервисы ──────────────────────────────────────────────


def get_ingestion_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> IngestionService:
    """Провайдер сервиса приёма телеметрии.

    Создаётся на каждый запрос (т.к. привязан к сессии БД).

    Args:
        session: Асинхронная сессия SQLAlchemy.
        settings: Настройки (общий ключ агентов).

    Returns:
        Экземпляр IngestionService.
    """
    return IngestionService(session=session, settings=settings)


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    """Провайдер сервиса входа."""
    return AuthService(session)


def get_portal_user_service(
    session: AsyncSession = Depends(get_session),
) -> PortalUserService:
    """Провайдер сервиса учётных записей."""
    return PortalUserService(session)


def get_vpn_user_service(
    session: AsyncSession = Depends(get_session),
) -> VpnUserService:
    """Провайдер сервиса VPN-идентичностей."""
    return VpnUserService(session)


def get_vpn_session_service(
    session: AsyncSession = Depends(get_session),
) -> VpnSessionService:
    """Провайдер сервиса VPN-сессий."""
    return VpnSessionService(session)


def get_vpn_server_service(
    session: AsyncSession = Depends(get_session),
) -> VpnServerService:
    """Провайдер сервиса регистраций серверов."""
    return VpnServerService(session)


def get_stats_service(session: AsyncSession = Depends(get_session)) -> StatsService:
    """Провайдер сервиса статистики."""
    return StatsService(session)
