"""Role management endpoints."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from roles_permissions.api.dependencies import (
    get_role_service,
    optional_org_uuid,
    require_org_uuid,
    require_user_uuid,
)
from roles_permissions.schemas.role import RoleRequest, RoleResponse
from roles_permissions.services.errors import RoleNotFoundError
from roles_permissions.services.roles import RoleService

router = APIRouter()


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_role(
    payload: RoleRequest,
    user_uuid: str = Depends(require_user_uuid),
    organization_uuid: str = Depends(require_org_uuid),
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    # The caller's organization always scopes customer-managed roles.
    scoped = payload.model_copy(update={"organization_uuid": organization_uuid})
    return service.create_role(scoped, created_by=user_uuid)


@router.get(
    "/organization",
    response_model=List[RoleResponse],
)
def list_roles_by_organization(
    organization_uuid: str = Depends(require_org_uuid),
    service: RoleService = Depends(get_role_service),
) -> List[RoleResponse]:
    return service.list_roles_by_organization(organization_uuid)


@router.get(
    "/system-managed",
    response_model=List[RoleResponse],
)
def list_system_managed_roles(
    service: RoleService = Depends(get_role_service),
) -> List[RoleResponse]:
    return service.list_system_managed_roles()


@router.get(
    "/name/{role_name}",
    response_model=RoleResponse,
)
def get_role_by_name(
    role_name: str,
    organization_uuid: Optional[str] = Depends(optional_org_uuid),
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    role = service.get_role_by_name_and_organization(role_name, organization_uuid)
    if role is None:
        raise RoleNotFoundError(f"Role not found: {role_name}")
    return role


@router.get(
    "/{role_uuid}",
    response_model=RoleResponse,
)
def get_role(
    role_uuid: UUID,
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    return service.get_role(role_uuid)


@router.put(
    "/{role_uuid}",
    response_model=RoleResponse,
    dependencies=[Depends(require_user_uuid), Depends(require_org_uuid)],
)
def update_role(
    role_uuid: UUID,
    payload: RoleRequest,
    service: RoleService = Depends(get_role_service),
) -> RoleResponse:
    return service.update_role(role_uuid, payload)


@router.delete(
    "/{role_uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(require_user_uuid), Depends(require_org_uuid)],
)
def delete_role(
    role_uuid: UUID,
    service: RoleService = Depends(get_role_service),
) -> Response:
    service.delete_role(role_uuid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
