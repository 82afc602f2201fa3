"""Агрегатный роутер API версии 1.

Собирает все sub-роутеры в один роутер с общим префиксом /api/v1.
"""

from fastapi import APIRouter

from app.api.v1.events import router as events_router

router = APIRouter(prefix="/api/v1")

router.include_router(events_router)
