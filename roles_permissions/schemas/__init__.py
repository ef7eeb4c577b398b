"""Pydantic schemas for API payloads."""

from roles_permissions.schemas.permission import (  # noqa: F401
    EndpointPermissionCheckRequest,
    PermissionCheckRequest,
    PermissionCheckResponse,
)
from roles_permissions.schemas.role import RoleRequest, RoleResponse  # noqa: F401
from roles_permissions.schemas.user_role import (  # noqa: F401
    UserRoleAssignmentRequest,
    UserRoleAssignmentResponse,
    UserRoleCountResponse,
    UserRoleMembershipResponse,
)
