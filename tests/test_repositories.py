"""Unit-тесты конфликтов вставки в репозиториях (гонки и повторы)."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.processed_event import ProcessedEvent
from app.models.vpn_session import SessionStatus, VpnSession
from app.models.vpn_user import AccountStatus, ConnectionStatus, VpnUser, VpnUserType
from app.repositories.processed_event import ProcessedEventRepository
from app.repositories.vpn_session import VpnSessionRepository
from app.repositories.vpn_user import VpnUserRepository
from app.schemas.events import TelemetryEvent
from app.services.reconciler import TelemetryReconciler


# ── Фикстуры ────────────────────────────────────────────


def _integrity_error() -> IntegrityError:
    """Вспомогательная функция — нарушение уникального индекса."""
    return IntegrityError("INSERT ...", {}, Exception("duplicate key value"))


def _make_db_session(
    flush_error: Exception | None = None,
    lookup_result: object | None = None,
) -> MagicMock:
    """Сессия-мок: MagicMock даёт `async with begin_nested()`, IO — AsyncMock."""
    session = MagicMock()
    session.flush = AsyncMock(side_effect=flush_error)
    session.refresh = AsyncMock()

    result = MagicMock()
    result.scalar_one_or_none.return_value = lookup_result
    session.execute = AsyncMock(return_value=result)
    return session


def _make_vpn_user(common_name: str = "alice") -> VpnUser:
    return VpnUser(
        id=uuid.uuid4(),
        server_id="vpn-1",
        common_name=common_name,
        type=VpnUserType.OTHERS,
        connection_status=ConnectionStatus.OFFLINE,
        account_status=AccountStatus.VALID,
    )


def _make_vpn_session(event_id: str | None) -> VpnSession:
    return VpnSession(
        vpn_user_id=uuid.uuid4(),
        server_id="vpn-1",
        event_id=event_id,
        start_time=datetime.now(tz=timezone.utc),
        status=SessionStatus.ACTIVE,
    )


# ── VpnUserRepository.create_if_absent ───────────────────


@pytest.mark.asyncio
async def test_create_if_absent_inserts_new_identity() -> None:
    session = _make_db_session()
    repo = VpnUserRepository(session)
    vpn_user = _make_vpn_user()

    stored, created = await repo.create_if_absent(vpn_user)

    assert stored is vpn_user
    assert created is True
    session.add.assert_called_once_with(vpn_user)
    session.begin_nested.assert_called_once()
    session.refresh.assert_awaited_once_with(vpn_user)


@pytest.mark.asyncio
async def test_create_if_absent_returns_winner_on_conflict() -> None:
    """Проигравшая вставка возвращает строку победителя, а не ошибку."""
    winner = _make_vpn_user()
    session = _make_db_session(flush_error=_integrity_error(), lookup_result=winner)
    repo = VpnUserRepository(session)

    stored, created = await repo.create_if_absent(_make_vpn_user())

    assert stored is winner
    assert created is False
    session.execute.assert_awaited_once()
    session.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_if_absent_reraises_when_winner_missing() -> None:
    """Конфликт не по (server_id, CN) пробрасывается дальше."""
    session = _make_db_session(flush_error=_integrity_error(), lookup_result=None)
    repo = VpnUserRepository(session)

    with pytest.raises(IntegrityError):
        await repo.create_if_absent(_make_vpn_user())


# ── VpnSessionRepository.create ──────────────────────────


@pytest.mark.asyncio
async def test_session_create_returns_none_on_duplicate_event_id() -> None:
    session = _make_db_session(flush_error=_integrity_error())
    repo = VpnSessionRepository(session)

    assert await repo.create(_make_vpn_session("c-1")) is None
    session.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_session_create_without_event_id_reraises() -> None:
    """Без event_id конфликт — не повтор, ошибка не скрывается."""
    session = _make_db_session(flush_error=_integrity_error())
    repo = VpnSessionRepository(session)

    with pytest.raises(IntegrityError):
        await repo.create(_make_vpn_session(None))


@pytest.mark.asyncio
async def test_session_create_persists_new_session() -> None:
    session = _make_db_session()
    repo = VpnSessionRepository(session)
    vpn_session = _make_vpn_session("c-1")

    assert await repo.create(vpn_session) is vpn_session
    session.refresh.assert_awaited_once_with(vpn_session)


# ── ProcessedEventRepository.mark ────────────────────────


@pytest.mark.asyncio
async def test_mark_new_event() -> None:
    session = _make_db_session()
    repo = ProcessedEventRepository(session)

    assert await repo.mark("d-1", "vpn-1", "SESSION_DISCONNECTED") is True
    (added,), _ = session.add.call_args
    assert isinstance(added, ProcessedEvent)
    assert added.event_id == "d-1"
    assert added.event_type == "SESSION_DISCONNECTED"


@pytest.mark.asyncio
async def test_mark_seen_event_returns_false() -> None:
    session = _make_db_session(flush_error=_integrity_error())
    repo = ProcessedEventRepository(session)

    assert await repo.mark("d-1", "vpn-1", "SESSION_DISCONNECTED") is False


# ── Reconciler поверх гонки вставки ──────────────────────


@pytest.mark.asyncio
async def test_sync_updates_winner_row_after_lost_insert() -> None:
    """При гонке USERS_UPDATE обновляет строку, вставленную параллельным батчем."""
    winner = _make_vpn_user()
    service = TelemetryReconciler(session=MagicMock())
    service._processed_repo = AsyncMock()
    service._processed_repo.mark.return_value = True
    service._vpn_user_repo = AsyncMock()
    service._vpn_user_repo.get_by_server_and_common_name.return_value = None
    service._vpn_user_repo.create_if_absent.return_value = (winner, False)

    applied = await service.apply_batch(
        "vpn-1",
        [
            TelemetryEvent(
                event_id="u-1",
                type="USERS_UPDATE",
                action="INITIAL",
                users=[{"common_name": "alice", "status": "REVOKED"}],
            )
        ],
    )

    assert applied == 1
    assert winner.account_status == AccountStatus.REVOKED
    service._vpn_user_repo.update.assert_awaited_once_with(winner)
