"""Сервис применения телеметрии агентов к идентичностям и сессиям.

Агент присылает события пачками, возможны повторы и нарушение порядка.
Каждое событие применяется независимо, в своей точке сохранения:
ошибка одного события откатывает только его и не прерывает батч.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.vpn_session import SessionStatus, VpnSession
from app.models.vpn_user import (
    AccountStatus,
    ConnectionStatus,
    VpnUser,
    VpnUserType,
)
from app.repositories.processed_event import ProcessedEventRepository
from app.repositories.vpn_session import VpnSessionRepository
from app.repositories.vpn_user import VpnUserRepository
from app.schemas.events import (
    EventType,
    TelemetryEvent,
    UsersUpdateAction,
    UserStatusEntry,
)
from app.services.openvpn import (
    CcdParseError,
    parse_ccd_b64,
    parse_index_timestamp,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, TelemetryEvent, datetime], Awaitable[bool]]


def resolve_event_time(event: TelemetryEvent, received_at: datetime) -> datetime:
    """Выбрать время события.

    Приоритет: время агента, затем время VPN-хоста, затем время приёма.
    """
    return (
        parse_timestamp(event.event_time_agent)
        or parse_timestamp(event.event_time_vpn)
        or received_at
    )


def _parse_account_status(value: str | None) -> AccountStatus | None:
    if not value:
        return None
    try:
        return AccountStatus(value.strip().upper())
    except ValueError:
        logger.warning("Неизвестный статус сертификата: %s", value)
        return None


class TelemetryReconciler:
    """Применяет события агента к таблицам vpn_users и vpn_sessions.

    Обеспечивает:
    - Открытие сессии по SESSION_CONNECTED (только для известной идентичности).
    - Закрытие последней активной сессии по SESSION_DISCONNECTED.
    - Массовую синхронизацию и отзыв/истечение сертификатов (USERS_UPDATE).
    - Обновление статического адреса и маршрутов из CCD (CCD_INFO).
    - Пропуск повторно доставленных событий любого типа по event_id.

    Attributes:
        _session: Сессия SQLAlchemy (для точек сохранения).
        _vpn_user_repo: Репозиторий идентичностей.
        _session_repo: Репозиторий сессий.
        _processed_repo: Журнал применённых event_id.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._vpn_user_repo = VpnUserRepository(session)
        self._session_repo = VpnSessionRepository(session)
        self._processed_repo = ProcessedEventRepository(session)
        self._handlers: dict[str, EventHandler] = {
            EventType.SESSION_CONNECTED.value: self._handle_connected,
            EventType.SESSION_DISCONNECTED.value: self._handle_disconnected,
            EventType.USERS_UPDATE.value: self._handle_users_update,
            EventType.CCD_INFO.value: self._handle_ccd_info,
        }

    # ── Батч ─────────────────────────────────────────────

    async def apply_batch(
        self,
        server_id: str,
        events: Sequence[TelemetryEvent],
        received_at: datetime | None = None,
    ) -> int:
        """Применить события батча строго по порядку.

        Args:
            server_id: Идентификатор VPN-сервера из батча.
            events: События в порядке отправки агентом.
            received_at: Время приёма (запасное время события).

        Returns:
            Количество событий, изменивших состояние.
        """
        received_at = received_at or datetime.now(tz=timezone.utc)
        applied = 0

        for event in events:
            try:
                async with self._session.begin_nested():
                    if await self.apply_event(server_id, event, received_at):
                        applied += 1
            except Exception:
                logger.exception(
                    "Ошибка обработки события %s (%s) от %s",
                    event.event_id,
                    event.type,
                    server_id,
                )

        return applied

    async def apply_event(
        self,
        server_id: str,
        event: TelemetryEvent,
        received_at: datetime,
    ) -> bool:
        """Применить одно событие.

        Returns:
            True, если событие изменило состояние.
        """
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.debug("Неизвестный тип события %s — пропуск", event.type)
            return False

        # Отметка откатывается вместе с событием, если обработчик упадёт
        if event.event_id and not await self._processed_repo.mark(
            event.event_id,
            server_id,
            event.type,
        ):
            logger.info("Событие %s уже обработано — пропуск", event.event_id)
            return False

        return await handler(server_id, event, resolve_event_time(event, received_at))

    async def _find_vpn_user(
        self,
        server_id: str,
        event: TelemetryEvent,
    ) -> VpnUser | None:
        if not event.common_name:
            logger.warning(
                "Событие %s (%s) без common_name — пропуск",
                event.event_id,
                event.type,
            )
            return None

        vpn_user = await self._vpn_user_repo.get_by_server_and_common_name(
            server_id,
            event.common_name,
        )
        if vpn_user is None:
            logger.warning(
                "Неизвестная идентичность %s/%s в событии %s (%s) — пропуск",
                server_id,
                event.common_name,
                event.event_id,
                event.type,
            )
        return vpn_user

    # ── Сессии ───────────────────────────────────────────

    async def _handle_connected(
        self,
        server_id: str,
        event: TelemetryEvent,
        event_time: datetime,
    ) -> bool:
        vpn_user = await self._find_vpn_user(server_id, event)
        if vpn_user is None:
            return False

        vpn_session = await self._session_repo.create(
            VpnSession(
                vpn_user_id=vpn_user.id,
                server_id=server_id,
                event_id=event.event_id,
                start_time=event_time,
                remote_ip=event.real_ip,
                virtual_ip=event.virtual_ip,
                status=SessionStatus.ACTIVE,
                bytes_received=0,
                bytes_sent=0,
            )
        )
        if vpn_session is None:
            logger.info("Событие %s уже обработано — пропуск", event.event_id)
            return False

        vpn_user.connection_status = ConnectionStatus.ONLINE
        vpn_user.last_connected_at = event_time
        await self._vpn_user_repo.update(vpn_user)
        return True

    async def _handle_disconnected(
        self,
        server_id: str,
        event: TelemetryEvent,
        event_time: datetime,
    ) -> bool:
        vpn_user = await self._find_vpn_user(server_id, event)
        if vpn_user is None:
            return False

        # Явной связи connect/disconnect нет: закрываем последнюю активную
        vpn_session = await self._session_repo.get_latest_active(vpn_user.id)
        if vpn_session is None:
            logger.info(
                "У %s/%s нет активных сессий для закрытия",
                server_id,
                vpn_user.common_name,
            )
        else:
            if event.bytes_received is not None:
                vpn_session.bytes_received = event.bytes_received
                vpn_user.total_bytes_received = (
                    vpn_user.total_bytes_received or 0
                ) + event.bytes_received
            if event.bytes_sent is not None:
                vpn_session.bytes_sent = event.bytes_sent
                vpn_user.total_bytes_sent = (
                    vpn_user.total_bytes_sent or 0
                ) + event.bytes_sent
            end_time = max(event_time, vpn_session.start_time)
            await self._session_repo.close(vpn_session, end_time)

        vpn_user.connection_status = ConnectionStatus.OFFLINE
        await self._vpn_user_repo.update(vpn_user)
        return True

    # ── Сертификаты ──────────────────────────────────────

    async def _handle_users_update(
        self,
        server_id: str,
        event: TelemetryEvent,
        event_time: datetime,
    ) -> bool:
        try:
            action = UsersUpdateAction((event.action or "").upper())
        except ValueError:
            logger.warning(
                "USERS_UPDATE %s с неизвестным действием %s — пропуск",
                event.event_id,
                event.action,
            )
            return False

        if action in (UsersUpdateAction.INITIAL, UsersUpdateAction.ADDED):
            return await self._sync_users(server_id, event)
        return await self._mark_user(server_id, event, action, event_time)

    async def _sync_users(self, server_id: str, event: TelemetryEvent) -> bool:
        """Создать отсутствующие идентичности и обновить статусы остальных."""
        entries = list(event.users or [])
        if not entries and event.common_name:
            entries.append(
                UserStatusEntry(
                    common_name=event.common_name,
                    status=event.status,
                    expires_at_index=event.expires_at_index,
                )
            )
        if not entries:
            logger.warning("USERS_UPDATE %s без списка пользователей", event.event_id)
            return False

        created = 0
        for entry in entries:
            account_status = _parse_account_status(entry.status)
            expires_at = parse_index_timestamp(entry.expires_at_index)

            vpn_user = await self._vpn_user_repo.get_by_server_and_common_name(
                server_id,
                entry.common_name,
            )
            if vpn_user is None:
                vpn_user, was_created = await self._vpn_user_repo.create_if_absent(
                    VpnUser(
                        server_id=server_id,
                        common_name=entry.common_name,
                        type=VpnUserType.OTHERS,
                        connection_status=ConnectionStatus.OFFLINE,
                        account_status=account_status or AccountStatus.VALID,
                        expiration_date=expires_at,
                        total_bytes_received=0,
                        total_bytes_sent=0,
                    )
                )
                if was_created:
                    created += 1
                    continue

            if account_status is not None:
                vpn_user.account_status = account_status
            if expires_at is not None:
                vpn_user.expiration_date = expires_at
            await self._vpn_user_repo.update(vpn_user)

        logger.info(
            "USERS_UPDATE %s: %s записей, создано %s",
            server_id,
            len(entries),
            created,
        )
        return True

    async def _mark_user(
        self,
        server_id: str,
        event: TelemetryEvent,
        action: UsersUpdateAction,
        event_time: datetime,
    ) -> bool:
        """Отметить отзыв или истечение сертификата известной идентичности."""
        vpn_user = await self._find_vpn_user(server_id, event)
        if vpn_user is None:
            return False

        account_status = _parse_account_status(event.status) or AccountStatus(
            action.value
        )
        vpn_user.account_status = account_status

        expires_at = parse_index_timestamp(event.expires_at_index)
        if expires_at is not None:
            vpn_user.expiration_date = expires_at

        if account_status == AccountStatus.REVOKED:
            vpn_user.revocation_date = (
                parse_index_timestamp(event.revoked_at_index) or event_time
            )

        await self._vpn_user_repo.update(vpn_user)
        return True

    # ── CCD ──────────────────────────────────────────────

    async def _handle_ccd_info(
        self,
        server_id: str,
        event: TelemetryEvent,
        event_time: datetime,
    ) -> bool:
        vpn_user = await self._find_vpn_user(server_id, event)
        if vpn_user is None:
            return False

        if not event.ccd_content_b64:
            logger.warning("CCD_INFO %s без содержимого — пропуск", event.event_id)
            return False

        try:
            ccd = parse_ccd_b64(event.ccd_content_b64)
        except CcdParseError as exc:
            logger.warning(
                "CCD_INFO %s для %s/%s не разобран: %s",
                event.event_id,
                server_id,
                vpn_user.common_name,
                exc,
            )
            return False

        vpn_user.static_ip = ccd.static_ip
        vpn_user.routes = ccd.routes_value
        await self._vpn_user_repo.update(vpn_user)
        return True
