"""Агрегатный роутер API портала (дашборда).

Собирает все sub-роутеры в один роутер с общим префиксом /api.
"""

from fastapi import APIRouter

from app.api.portal.audit import router as audit_router
from app.api.portal.auth import router as auth_router
from app.api.portal.sessions import router as sessions_router
from app.api.portal.stats import router as stats_router
from app.api.portal.users import router as users_router
from app.api.portal.vpn_servers import router as vpn_servers_router
from app.api.portal.vpn_users import router as vpn_users_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(vpn_users_router)
router.include_router(sessions_router)
router.include_router(vpn_servers_router)
router.include_router(audit_router)
router.include_router(stats_router)
