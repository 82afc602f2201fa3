"""Роутеры портала — сводная статистика."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_current_user, get_stats_service
from app.models.portal_user import PortalUser
from app.schemas.stats import StatsResponse
from app.services.authz import Action, ensure_allowed
from app.services.stats import StatsService

router = APIRouter(prefix="/stats", tags=["статистика"])


@router.get("", response_model=StatsResponse, summary="Сводка")
async def get_stats(
    current_user: PortalUser = Depends(get_current_user),
    service: StatsService = Depends(get_stats_service),
) -> StatsResponse:
    """Получить сводку для главной страницы дашборда."""
    ensure_allowed(current_user, Action.VIEW)
    return await service.get_stats()
