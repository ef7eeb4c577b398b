"""Router registrations."""

from fastapi import APIRouter

from roles_permissions.api.routers import health, permissions, roles, user_roles


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, tags=["health"])
    router.include_router(permissions.router, tags=["permissions"])
    router.include_router(roles.router, prefix="/role", tags=["roles"])
    router.include_router(user_roles.router, prefix="/user", tags=["user-roles"])
    return router
