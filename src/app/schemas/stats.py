"""Pydantic-схема сводной статистики."""

from pydantic import BaseModel


class StatsResponse(BaseModel):
    """Сводка для главной страницы дашборда."""

    active_sessions: int
    total_vpn_users: int
    online_vpn_users: int
    bytes_transferred: int
    registered_servers: int
    active_servers: int
