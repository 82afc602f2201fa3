"""Тесты API портала: cookie-сессия и проверка ролей."""

import uuid
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import pytest_asyncio

from app.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_vpn_server_service,
    get_vpn_session_service,
)
from app.database.session import get_session
from app.exceptions.handlers import (
    InvalidCredentialsError,
    VpnSessionAlreadyClosedError,
)
from app.main import app
from app.models.portal_user import PortalUser
from app.models.vpn_server import VpnServer
from app.models.vpn_session import SessionStatus, VpnSession


async def _fake_session() -> AsyncIterator[MagicMock]:
    yield MagicMock()


@pytest_asyncio.fixture
async def client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP-клиент к приложению без БД."""
    app.dependency_overrides[get_session] = _fake_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


def _login_as(user: PortalUser) -> None:
    app.dependency_overrides[get_current_user] = lambda: user


def _make_closed_session() -> VpnSession:
    now = datetime.now(tz=timezone.utc)
    return VpnSession(
        id=uuid.uuid4(),
        vpn_user_id=uuid.uuid4(),
        server_id="vpn-1",
        start_time=now,
        end_time=now,
        status=SessionStatus.CLOSED,
    )


# ── Вход ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_protected_route_without_cookie_is_401(client: httpx.AsyncClient) -> None:
    response = await client.get("/api/sessions/active")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_sets_cookie_and_restores_user(
    client: httpx.AsyncClient,
    admin_user: PortalUser,
) -> None:
    """После входа cookie-сессия определяет текущего пользователя."""
    auth_service = AsyncMock()
    auth_service.login.return_value = admin_user
    app.dependency_overrides[get_auth_service] = lambda: auth_service

    response = await client.post(
        "/api/login",
        json={"username": admin_user.username, "password": "secret"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert "ovpn_portal_session" in response.cookies

    with patch("app.api.dependencies.PortalUserRepository") as repo_cls:
        repo_cls.return_value.get_by_id = AsyncMock(return_value=admin_user)
        me = await client.get("/api/user")

    assert me.status_code == 200
    assert me.json()["username"] == admin_user.username
    repo_cls.return_value.get_by_id.assert_awaited_once_with(admin_user.id)


@pytest.mark.asyncio
async def test_login_with_bad_password_is_401(client: httpx.AsyncClient) -> None:
    auth_service = AsyncMock()
    auth_service.login.side_effect = InvalidCredentialsError()
    app.dependency_overrides[get_auth_service] = lambda: auth_service

    response = await client.post(
        "/api/login",
        json={"username": "admin", "password": "wrong"},
    )

    assert response.status_code == 401
    assert "ovpn_portal_session" not in response.cookies


@pytest.mark.asyncio
async def test_logout_clears_session(
    client: httpx.AsyncClient,
    admin_user: PortalUser,
) -> None:
    auth_service = AsyncMock()
    auth_service.login.return_value = admin_user
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    await client.post("/api/login", json={"username": "admin", "password": "secret"})

    await client.post("/api/logout")
    response = await client.get("/api/user")

    assert response.status_code == 401


# ── Роли ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_viewer_cannot_kill_session(
    client: httpx.AsyncClient,
    viewer_user: PortalUser,
) -> None:
    """viewer → 403, сессия не трогается."""
    service = AsyncMock()
    app.dependency_overrides[get_vpn_session_service] = lambda: service
    _login_as(viewer_user)

    response = await client.post(f"/api/sessions/{uuid.uuid4()}/kill")

    assert response.status_code == 403
    service.kill_session.assert_not_awaited()


@pytest.mark.asyncio
async def test_operator_kills_session(
    client: httpx.AsyncClient,
    operator_user: PortalUser,
) -> None:
    service = AsyncMock()
    app.dependency_overrides[get_vpn_session_service] = lambda: service
    _login_as(operator_user)
    session_id = uuid.uuid4()

    response = await client.post(f"/api/sessions/{session_id}/kill")

    assert response.status_code == 200
    service.kill_session.assert_awaited_once_with(operator_user, session_id)


@pytest.mark.asyncio
async def test_kill_closed_session_is_409(
    client: httpx.AsyncClient,
    admin_user: PortalUser,
) -> None:
    service = AsyncMock()
    service.kill_session.side_effect = VpnSessionAlreadyClosedError()
    app.dependency_overrides[get_vpn_session_service] = lambda: service
    _login_as(admin_user)

    response = await client.post(f"/api/sessions/{uuid.uuid4()}/kill")

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_viewer_lists_history(
    client: httpx.AsyncClient,
    viewer_user: PortalUser,
) -> None:
    """История сессий доступна на чтение и ограничена настройкой."""
    service = AsyncMock()
    service.get_history.return_value = []
    app.dependency_overrides[get_vpn_session_service] = lambda: service
    _login_as(viewer_user)

    response = await client.get("/api/sessions/history")

    assert response.status_code == 200
    assert response.json() == []
    assert service.get_history.call_args.kwargs["limit"] == 500


@pytest.mark.asyncio
async def test_operator_cannot_manage_servers(
    client: httpx.AsyncClient,
    operator_user: PortalUser,
) -> None:
    service = AsyncMock()
    app.dependency_overrides[get_vpn_server_service] = lambda: service
    _login_as(operator_user)

    response = await client.post("/api/vpn-servers", json={"name": "edge"})

    assert response.status_code == 403
    service.create_server.assert_not_awaited()


@pytest.mark.asyncio
async def test_admin_registers_server(
    client: httpx.AsyncClient,
    admin_user: PortalUser,
) -> None:
    service = AsyncMock()
    service.create_server.return_value = VpnServer(
        id=uuid.uuid4(),
        name="edge",
        description=None,
        server_id="srv-0011223344556677",
        api_key="ovpk_abc",
        is_active=True,
        last_seen_at=None,
        created_at=datetime.now(tz=timezone.utc),
    )
    app.dependency_overrides[get_vpn_server_service] = lambda: service
    _login_as(admin_user)

    response = await client.post("/api/vpn-servers", json={"name": "edge"})

    assert response.status_code == 201
    assert response.json()["api_key"] == "ovpk_abc"
    service.create_server.assert_awaited_once()
