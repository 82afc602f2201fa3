"""Пользовательские исключения и глобальные обработчики ошибок."""

from fastapi import HTTPException, status


# ── Аутентификация и права ───────────────────────────────


class IngestionUnauthorizedError(HTTPException):
    """Агент не прошёл проверку Bearer-ключа."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный или отсутствующий ключ агента",
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotAuthenticatedError(HTTPException):
    """Нет действующей сессии пользователя портала."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Требуется вход в систему",
        )


class InvalidCredentialsError(HTTPException):
    """Неверный логин или пароль."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверное имя пользователя или пароль",
        )


class PermissionDeniedError(HTTPException):
    """Роли пользователя недостаточно для действия."""

    def __init__(self, action: str) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Недостаточно прав для действия '{action}'",
        )


# ── Не найдено ───────────────────────────────────────────


class PortalUserNotFoundError(HTTPException):
    """Пользователь портала не найден."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Пользователь с id={user_id} не найден",
        )


class VpnUserNotFoundError(HTTPException):
    """VPN-идентичность не найдена."""

    def __init__(self, vpn_user_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"VPN-пользователь с id={vpn_user_id} не найден",
        )


class VpnSessionNotFoundError(HTTPException):
    """VPN-сессия не найдена."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Сессия с id={session_id} не найдена",
        )


class VpnServerNotFoundError(HTTPException):
    """Регистрация VPN-сервера не найдена."""

    def __init__(self, server_id: str) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"VPN-сервер с id={server_id} не найден",
        )


# ── Конфликты ────────────────────────────────────────────


class PortalUserAlreadyExistsError(HTTPException):
    """Пользователь портала с таким логином уже существует."""

    def __init__(self, username: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Пользователь с username='{username}' уже существует",
        )


class VpnSessionAlreadyClosedError(HTTPException):
    """Попытка завершить уже закрытую сессию."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Сессия уже закрыта",
        )


class PasswordChangeRejectedError(HTTPException):
    """Текущий пароль указан неверно."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Текущий пароль указан неверно",
        )
