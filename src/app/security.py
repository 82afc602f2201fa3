"""Хэширование паролей и генерация секретов."""

import hmac
import secrets
import string

from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    pbkdf2_sha256__default_rounds=29000,
)


def hash_password(password: str) -> str:
    """Хэшировать пароль (PBKDF2-SHA256)."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверить пароль по хэшу."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_password(length: int = 16) -> str:
    """Сгенерировать случайный пароль для первичной учётной записи."""
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_server_id() -> str:
    """Сгенерировать идентификатор VPN-сервера для телеметрии."""
    return f"srv-{secrets.token_hex(8)}"


def generate_api_key() -> str:
    """Сгенерировать Bearer-ключ агента."""
    return f"ovpk_{secrets.token_urlsafe(32)}"


def keys_match(provided: str, expected: str) -> bool:
    """Сравнить ключи за постоянное время."""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
