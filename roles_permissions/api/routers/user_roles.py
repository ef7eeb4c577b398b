"""User-role assignment endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from roles_permissions.api.dependencies import get_user_role_service, require_org_uuid, require_user_uuid
from roles_permissions.schemas.user_role import (
    UserRoleAssignmentRequest,
    UserRoleAssignmentResponse,
    UserRoleCountResponse,
    UserRoleMembershipResponse,
)
from roles_permissions.services.user_roles import UserRoleService

router = APIRouter()


@router.get(
    "/roles",
    response_model=List[UserRoleAssignmentResponse],
)
def list_organization_user_roles(
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> List[UserRoleAssignmentResponse]:
    return service.list_user_roles_by_organization(organization_uuid)


@router.post(
    "/{user_uuid}/roles",
    response_model=UserRoleAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_role(
    user_uuid: str,
    payload: UserRoleAssignmentRequest,
    assigner_uuid: str = Depends(require_user_uuid),
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> UserRoleAssignmentResponse:
    return service.assign_role(
        user_uuid,
        payload.role_uuid,
        organization_uuid,
        assigner_uuid=assigner_uuid,
    )


@router.get(
    "/{user_uuid}/roles",
    response_model=List[UserRoleAssignmentResponse],
)
def list_user_roles(
    user_uuid: str,
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> List[UserRoleAssignmentResponse]:
    return service.list_user_roles(user_uuid, organization_uuid)


@router.get(
    "/{user_uuid}/roles/count",
    response_model=UserRoleCountResponse,
)
def count_user_roles(
    user_uuid: str,
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> UserRoleCountResponse:
    return UserRoleCountResponse(count=service.count_user_roles(user_uuid, organization_uuid))


@router.get(
    "/{user_uuid}/roles/{role_uuid}",
    response_model=UserRoleMembershipResponse,
)
def user_has_role(
    user_uuid: str,
    role_uuid: str,
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> UserRoleMembershipResponse:
    return UserRoleMembershipResponse(has_role=service.user_has_role(user_uuid, role_uuid, organization_uuid))


@router.delete(
    "/{user_uuid}/roles/{role_uuid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_role(
    user_uuid: str,
    role_uuid: str,
    organization_uuid: str = Depends(require_org_uuid),
    service: UserRoleService = Depends(get_user_role_service),
) -> Response:
    service.remove_role(user_uuid, role_uuid, organization_uuid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
