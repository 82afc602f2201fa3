"""Фабрика FastAPI-приложения и управление жизненным циклом."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app.api.portal.router import router as portal_router
from app.api.v1.router import router as v1_router
from app.config import Settings, get_settings
from app.database.session import async_session_factory, create_tables
from app.services.auth import AuthService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Настроить корневой логгер по LOG_LEVEL."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def bootstrap(settings: Settings) -> None:
    """Однократная инициализация: таблицы и первый администратор."""
    if settings.database_auto_create:
        await create_tables()

    async with async_session_factory() as session:
        await AuthService(session).bootstrap_admin(
            username=settings.bootstrap_admin_username,
            password=settings.bootstrap_admin_password,
        )
        await session.commit()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Управление запуском и остановкой приложения."""
    # ── Запуск ───────────────────────────────────────────
    settings = get_settings()
    app.state.settings = settings
    await bootstrap(settings)
    logger.info("Портал запущен на %s:%s", settings.app_host, settings.app_port)
    yield
    # ── Остановка ────────────────────────────────────────
    logger.info("Портал остановлен")


def create_app() -> FastAPI:
    """Собрать и сконфигурировать экземпляр FastAPI-приложения."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="OpenVPN Telemetry Portal",
        description="Приём телеметрии агентов OpenVPN и API дашборда мониторинга",
        version="0.1.0",
        debug=settings.app_debug,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.session_cookie_secure,
    )

    # ── Глобальная обработка ошибок ──────────────────────

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        """Обработчик HTTP-исключений → единый JSON-формат."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """Обработчик ошибок валидации → 400 с понятным JSON."""
        return ORJSONResponse(
            status_code=400,
            content={
                "detail": "Ошибка валидации входных данных",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Обработчик непредвиденных ошибок → 500 без утечки деталей."""
        logger.exception("Непредвиденная ошибка: %s", exc)
        return ORJSONResponse(
            status_code=500,
            content={"detail": "Внутренняя ошибка сервера"},
        )

    # ── Роутеры ──────────────────────────────────────────
    app.include_router(v1_router)
    app.include_router(portal_router)

    # ── Проверка здоровья сервиса ────────────────────────
    @app.get("/health", tags=["система"])
    async def health_check() -> dict[str, str]:
        """Вернуть статус работоспособности сервиса."""
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Запустить портал через uvicorn (точка входа `ovpn-portal`)."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )
