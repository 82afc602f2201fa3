"""Конфигурация приложения — загрузка из переменных окружения."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Центральная конфигурация портала телеметрии OpenVPN.

    Все значения читаются из переменных окружения или файла `.env`.
    Валидация выполняется автоматически через pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Приложение ───────────────────────────────────────
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = False
    log_level: str = "INFO"

    # ── База данных (PostgreSQL портала) ─────────────────
    database_url: str
    database_auto_create: bool = True

    # ── Приём телеметрии от агентов ──────────────────────
    # Общий ключ для всех агентов (резервный, если ключ сервера не подошёл)
    ingest_shared_secret: str | None = None

    # ── Cookie-сессии портала ────────────────────────────
    session_secret_key: str
    session_cookie_name: str = "ovpn_portal_session"
    session_cookie_secure: bool = False
    session_max_age: int = 60 * 60 * 12

    # ── Выдача данных ────────────────────────────────────
    session_history_limit: int = 500

    # ── Первичная инициализация ──────────────────────────
    bootstrap_admin_username: str = "admin"
    bootstrap_admin_password: str | None = None


def get_settings() -> Settings:
    """Создать и вернуть экземпляр настроек."""
    return Settings()  # type: ignore[call-arg]
