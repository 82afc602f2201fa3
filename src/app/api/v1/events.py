"""Роутеры API v1 — приём телеметрии от агентов OpenVPN."""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_bearer_token, get_ingestion_service
from app.schemas.events import TelemetryAcceptedResponse, TelemetryBatch
from app.services.ingestion import IngestionService

router = APIRouter(prefix="/events", tags=["телеметрия"])


@router.post(
    "",
    response_model=TelemetryAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Принять батч событий",
)
async def ingest_events(
    batch: TelemetryBatch,
    token: str | None = Depends(get_bearer_token),
    service: IngestionService = Depends(get_ingestion_service),
) -> TelemetryAcceptedResponse:
    """Принять батч событий агента.

    Ключ агента проверяется по регистрации сервера, затем по общему ключу.
    События применяются по порядку; ошибки отдельных событий только
    логируются. В ответе — число событий в батче, а не число применённых.
    """
    received = await service.ingest(batch, token)
    return TelemetryAcceptedResponse(received=received)
