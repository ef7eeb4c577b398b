"""Default system-managed roles created at bootstrap."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from sqlalchemy.orm import Session

from roles_permissions.models.role import RoleManagementType
from roles_permissions.schemas.role import RoleRequest
from roles_permissions.services.cache import CacheStore
from roles_permissions.services.roles import RoleService

SYSTEM_ACTOR = "system"


class SystemRoleDefinition(NamedTuple):
    role_name: str
    description: str
    policy: Dict[str, Any]


# "*" is stored verbatim; evaluation compares it literally like any resource name.
SYSTEM_ROLES: Tuple[SystemRoleDefinition, ...] = (
    SystemRoleDefinition(
        "Owner",
        "Full access to all operations across the system",
        {"data": {"view": ["*"], "edit": ["*"]}, "features": {"execute": ["*"]}},
    ),
    SystemRoleDefinition(
        "Manager",
        "Can view/edit users, view organization, approve requests, and generate reports",
        {
            "data": {
                "view": ["user_basic_info", "user_sensitive_info", "organization", "task", "client"],
                "edit": ["user_basic_info", "task"],
            },
            "features": {"execute": ["approve_requests", "generate_reports", "assign_task"]},
        },
    ),
    SystemRoleDefinition(
        "User",
        "Can view and edit own profile only",
        {"data": {"view": ["user_basic_info"], "edit": ["user_basic_info"]}, "features": {"execute": []}},
    ),
    SystemRoleDefinition(
        "Operator",
        "System operations and monitoring capabilities",
        {
            "data": {"view": ["*"], "edit": ["task", "client"]},
            "features": {"execute": ["system_monitoring", "backup_operations", "generate_reports"]},
        },
    ),
)


def seed_system_roles(session: Session, cache: Optional[CacheStore] = None) -> List[str]:
    """Create the default system roles when none exist yet.

    Returns the names of the roles created.
    """

    logger = logging.getLogger("roles_permissions.services.seeding")
    service = RoleService(session, cache=cache)

    existing = service.count_system_managed_roles()
    if existing:
        logger.info("system_roles_present", extra={"count": existing})
        return []

    created: List[str] = []
    for definition in SYSTEM_ROLES:
        if service.get_role_by_name_and_organization(definition.role_name, None) is not None:
            continue
        service.create_role(
            RoleRequest(
                role_name=definition.role_name,
                role_management_type=RoleManagementType.SYSTEM_MANAGED,
                description=definition.description,
                policy=definition.policy,
            ),
            created_by=SYSTEM_ACTOR,
        )
        created.append(definition.role_name)

    logger.info("system_roles_seeded", extra={"roles": created})
    return created
