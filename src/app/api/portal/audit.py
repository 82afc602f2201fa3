"""Роутеры портала — журнал действий (аудит)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user
from app.database.session import get_session
from app.models.portal_user import PortalUser
from app.repositories.audit_log import AuditLogRepository
from app.schemas.audit_log import AuditLogListResponse, AuditLogResponse
from app.services.authz import Action, ensure_allowed

router = APIRouter(prefix="/audit-logs", tags=["аудит"])


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="Журнал действий",
)
async def list_audit_logs(
    limit: int | None = Query(default=None, ge=1, le=10000),
    current_user: PortalUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
) -> AuditLogListResponse:
    """Получить записи аудит-лога, новые первыми."""
    ensure_allowed(current_user, Action.VIEW_AUDIT)
    repo = AuditLogRepository(session)
    entries, total = await repo.get_list(limit=limit)
    return AuditLogListResponse(
        items=[AuditLogResponse.model_validate(e) for e in entries],
        total=total,
    )
