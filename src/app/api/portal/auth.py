"""Роутеры портала — вход, выход, текущий пользователь."""

from fastapi import APIRouter, Depends, Request

from app.api.dependencies import (
    SESSION_USER_KEY,
    get_auth_service,
    get_current_user,
)
from app.models.portal_user import PortalUser
from app.schemas.common import MessageResponse
from app.schemas.portal_user import (
    ChangePasswordRequest,
    LoginRequest,
    PortalUserResponse,
)
from app.services.auth import AuthService

router = APIRouter(tags=["вход"])


@router.post(
    "/login",
    response_model=PortalUserResponse,
    summary="Войти",
)
async def login(
    body: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> PortalUserResponse:
    """Проверить логин и пароль и открыть cookie-сессию."""
    user = await service.login(body.username, body.password)
    request.session.clear()
    request.session[SESSION_USER_KEY] = str(user.id)
    return PortalUserResponse.model_validate(user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Выйти",
)
async def logout(request: Request) -> MessageResponse:
    """Закрыть cookie-сессию."""
    request.session.clear()
    return MessageResponse(message="Выход выполнен")


@router.get(
    "/user",
    response_model=PortalUserResponse,
    summary="Текущий пользователь",
)
async def me(
    current_user: PortalUser = Depends(get_current_user),
) -> PortalUserResponse:
    """Вернуть пользователя текущей сессии."""
    return PortalUserResponse.model_validate(current_user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Сменить пароль",
)
async def change_password(
    body: ChangePasswordRequest,
    current_user: PortalUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Сменить пароль текущего пользователя."""
    await service.change_password(
        current_user,
        current_password=body.current_password,
        new_password=body.new_password,
    )
    return MessageResponse(message="Пароль изменён")
