"""Dependency injection helpers for FastAPI routes."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from roles_permissions.core.database import get_session
from roles_permissions.services.cache import get_cache_store
from roles_permissions.services.errors import ValidationError
from roles_permissions.services.permissions import PermissionService
from roles_permissions.services.roles import RoleService
from roles_permissions.services.user_roles import UserRoleService

USER_UUID_HEADER = "x-app-user-uuid"
ORG_UUID_HEADER = "x-app-org-uuid"


def get_db_session() -> Session:
    yield from get_session()


def get_role_service(session: Session = Depends(get_db_session)) -> RoleService:
    return RoleService(session, cache=get_cache_store())


def get_user_role_service(session: Session = Depends(get_db_session)) -> UserRoleService:
    return UserRoleService(session, cache=get_cache_store())


def get_permission_service(session: Session = Depends(get_db_session)) -> PermissionService:
    return PermissionService(session, cache=get_cache_store())


def _required(value: Optional[str], header: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"Missing required header: {header}")
    return value.strip()


def require_user_uuid(
    x_app_user_uuid: Optional[str] = Header(default=None, alias=USER_UUID_HEADER),
) -> str:
    return _required(x_app_user_uuid, USER_UUID_HEADER)


def require_org_uuid(
    x_app_org_uuid: Optional[str] = Header(default=None, alias=ORG_UUID_HEADER),
) -> str:
    return _required(x_app_org_uuid, ORG_UUID_HEADER)


def optional_org_uuid(
    x_app_org_uuid: Optional[str] = Header(default=None, alias=ORG_UUID_HEADER),
) -> Optional[str]:
    if x_app_org_uuid is None or not x_app_org_uuid.strip():
        return None
    return x_app_org_uuid.strip()
