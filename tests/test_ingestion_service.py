"""Unit-тесты аутентификации агентов и приёма батчей."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.config import Settings
from app.exceptions.handlers import IngestionUnauthorizedError
from app.models.vpn_server import VpnServer
from app.schemas.events import TelemetryBatch, TelemetryEvent
from app.services.ingestion import IngestionService

SERVER_KEY = "ovpk_registered-key"
SHARED_KEY = "deployment-shared-secret"


# ── Фикстуры ────────────────────────────────────────────


def _make_server(is_active: bool = True) -> VpnServer:
    """Вспомогательная функция — зарегистрированный сервер."""
    return VpnServer(
        id=uuid.uuid4(),
        name="Main VPN",
        server_id="vpn-1",
        api_key=SERVER_KEY,
        is_active=is_active,
    )


def _make_service(
    server: VpnServer | None = None,
    shared_secret: str | None = SHARED_KEY,
) -> IngestionService:
    """Создать IngestionService с замоканными зависимостями."""
    settings = Settings(
        database_url="postgresql+asyncpg://x:x@localhost/x",
        session_secret_key="secret",
        ingest_shared_secret=shared_secret,
    )
    service = IngestionService(session=MagicMock(), settings=settings)

    service._server_repo = AsyncMock()
    service._server_repo.get_by_server_id.return_value = server
    service._reconciler = AsyncMock()
    service._reconciler.apply_batch.return_value = 0
    return service


def _make_batch(count: int = 2) -> TelemetryBatch:
    return TelemetryBatch(
        server_id="vpn-1",
        events=[
            TelemetryEvent(event_id=f"e-{i}", type="SESSION_CONNECTED", common_name="alice")
            for i in range(count)
        ],
    )


# ── Тесты: аутентификация ────────────────────────────────


@pytest.mark.asyncio
async def test_registered_server_key_accepted() -> None:
    """Ключ зарегистрированного сервера принимается и возвращает регистрацию."""
    server = _make_server()
    service = _make_service(server=server)

    assert await service.authenticate("vpn-1", SERVER_KEY) is server


@pytest.mark.asyncio
async def test_shared_secret_accepted_for_unregistered_server() -> None:
    """Общий ключ подходит и для незарегистрированного сервера."""
    service = _make_service(server=None)

    assert await service.authenticate("vpn-1", SHARED_KEY) is None


@pytest.mark.asyncio
async def test_inactive_server_key_rejected() -> None:
    """Ключ отключённого сервера не принимается."""
    service = _make_service(server=_make_server(is_active=False), shared_secret=None)

    with pytest.raises(IngestionUnauthorizedError):
        await service.authenticate("vpn-1", SERVER_KEY)


@pytest.mark.asyncio
async def test_inactive_server_still_accepts_shared_secret() -> None:
    server = _make_server(is_active=False)
    service = _make_service(server=server)

    assert await service.authenticate("vpn-1", SHARED_KEY) is server


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "wrong-key"])
async def test_missing_or_wrong_key_rejected(token: str | None) -> None:
    """Нет ключа или ключ не подошёл → 401."""
    service = _make_service(server=_make_server())

    with pytest.raises(IngestionUnauthorizedError) as exc_info:
        await service.authenticate("vpn-1", token)

    assert exc_info.value.status_code == 401


# ── Тесты: приём батча ───────────────────────────────────


@pytest.mark.asyncio
async def test_ingest_returns_batch_size_not_applied_count() -> None:
    """Ответ — число событий в батче, даже если применено меньше."""
    service = _make_service(server=_make_server())

    received = await service.ingest(_make_batch(3), SERVER_KEY)

    assert received == 3
    service._reconciler.apply_batch.assert_awaited_once()
    args, kwargs = service._reconciler.apply_batch.call_args
    assert args[0] == "vpn-1"
    assert len(args[1]) == 3
    assert kwargs["received_at"] is not None


@pytest.mark.asyncio
async def test_ingest_updates_last_seen_of_registered_server() -> None:
    server = _make_server()
    service = _make_service(server=server)

    await service.ingest(_make_batch(), SERVER_KEY)

    assert server.last_seen_at is not None
    service._server_repo.update.assert_awaited_once_with(server)


@pytest.mark.asyncio
async def test_ingest_unauthorized_applies_nothing() -> None:
    """При неверном ключе события не применяются."""
    service = _make_service(server=_make_server())

    with pytest.raises(IngestionUnauthorizedError):
        await service.ingest(_make_batch(), "wrong-key")

    service._reconciler.apply_batch.assert_not_awaited()
    service._server_repo.update.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_batch_accepted() -> None:
    service = _make_service(server=None)

    assert await service.ingest(_make_batch(0), SHARED_KEY) == 0
