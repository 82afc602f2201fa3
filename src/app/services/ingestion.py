"""Сервис приёма батчей телеметрии от агентов OpenVPN.

Проверяет ключ агента и передаёт события в TelemetryReconciler.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.exceptions.handlers import IngestionUnauthorizedError
from app.models.vpn_server import VpnServer
from app.repositories.vpn_server import VpnServerRepository
from app.schemas.events import TelemetryBatch
from app.security import keys_match
from app.services.reconciler import TelemetryReconciler

logger = logging.getLogger(__name__)


class IngestionService:
    """Точка входа телеметрии.

    Attributes:
        _server_repo: Репозиторий регистраций VPN-серверов.
        _reconciler: Применение событий к идентичностям и сессиям.
        _shared_secret: Общий ключ всех агентов (может отсутствовать).
    """

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._server_repo = VpnServerRepository(session)
        self._reconciler = TelemetryReconciler(session)
        self._shared_secret = settings.ingest_shared_secret

    async def authenticate(
        self,
        server_id: str,
        token: str | None,
    ) -> VpnServer | None:
        """Проверить Bearer-ключ агента.

        Сначала ключ сравнивается с ключом зарегистрированного и активного
        сервера, затем — с общим ключом развёртывания.

        Args:
            server_id: Идентификатор сервера из батча.
            token: Bearer-ключ из заголовка Authorization.

        Returns:
            Регистрация сервера или None, если принят общий ключ.

        Raises:
            IngestionUnauthorizedError: Ни один ключ не подошёл.
        """
        if not token:
            raise IngestionUnauthorizedError()

        server = await self._server_repo.get_by_server_id(server_id)
        if server is not None and server.is_active and keys_match(token, server.api_key):
            return server

        if self._shared_secret and keys_match(token, self._shared_secret):
            return server

        logger.warning("Отклонён батч от %s: неверный ключ агента", server_id)
        raise IngestionUnauthorizedError()

    async def ingest(self, batch: TelemetryBatch, token: str | None) -> int:
        """Принять батч: аутентификация, затем применение событий по порядку.

        Args:
            batch: Провалидированный батч.
            token: Bearer-ключ агента.

        Returns:
            Количество событий в батче (принято к обработке).
        """
        server = await self.authenticate(batch.server_id, token)
        received_at = datetime.now(tz=timezone.utc)

        if server is not None:
            server.last_seen_at = received_at
            await self._server_repo.update(server)

        applied = await self._reconciler.apply_batch(
            batch.server_id,
            batch.events,
            received_at=received_at,
        )
        logger.info(
            "Батч от %s: получено %s событий, применено %s",
            batch.server_id,
            len(batch.events),
            applied,
        )
        return len(batch.events)
