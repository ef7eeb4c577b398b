"""User-role assignment service logic."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roles_permissions.core.config import AppSettings, get_settings
from roles_permissions.models.role import Role
from roles_permissions.models.user_role import UserRole
from roles_permissions.schemas.user_role import UserRoleAssignmentResponse
from roles_permissions.services.cache import (
    PERMISSIONS_NAMESPACE,
    USER_ROLES_NAMESPACE,
    CacheStore,
    cache_key,
    get_cache_store,
    invalidate_on_commit,
)
from roles_permissions.services.errors import (
    AssignmentNotFoundError,
    ConflictError,
    RoleNotFoundError,
    ValidationError,
)

ALREADY_ASSIGNED_MESSAGE = "Role is already assigned to user in this organization"


def normalize_role_uuid(role_uuid: str) -> str:
    """Return the canonical string form of a role UUID, or the input if it is not one."""

    try:
        return str(UUID(str(role_uuid)))
    except ValueError:
        return role_uuid


class UserRoleService:
    """Assigns roles to users inside organizations and answers membership queries."""

    def __init__(
        self,
        session: Session,
        cache: Optional[CacheStore] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self._session = session
        self._logger = logging.getLogger("roles_permissions.services.user_roles")
        self._cache = cache or get_cache_store()
        self._ttl = (settings or get_settings()).user_role_cache_ttl

    def assign_role(
        self,
        user_uuid: str,
        role_uuid: str,
        organization_uuid: str,
        *,
        assigner_uuid: str,
    ) -> UserRoleAssignmentResponse:
        role = self._resolve_role(role_uuid)

        # System-managed roles are assignable in any organization.
        if not role.is_system_managed and role.organization_uuid != organization_uuid:
            raise ConflictError("Role does not belong to the specified organization")

        canonical_role_uuid = str(role.role_uuid)
        if self._find_binding(user_uuid, canonical_role_uuid, organization_uuid) is not None:
            raise ConflictError(ALREADY_ASSIGNED_MESSAGE)

        binding = UserRole(
            user_uuid=user_uuid,
            role_uuid=canonical_role_uuid,
            organization_uuid=organization_uuid,
            created_by=assigner_uuid,
        )
        self._session.add(binding)
        try:
            self._session.flush()
        except IntegrityError as exc:
            # A concurrent assign inserted the same triple first.
            self._session.rollback()
            raise ConflictError(ALREADY_ASSIGNED_MESSAGE) from exc

        self._logger.info(
            "role_assigned",
            extra={
                "user_uuid": user_uuid,
                "role_uuid": canonical_role_uuid,
                "organization_uuid": organization_uuid,
                "assigner_uuid": assigner_uuid,
            },
        )
        self._invalidate()
        return UserRoleAssignmentResponse.model_validate(binding)

    def remove_role(self, user_uuid: str, role_uuid: str, organization_uuid: str) -> None:
        binding = self._find_binding(user_uuid, normalize_role_uuid(role_uuid), organization_uuid)
        if binding is None:
            raise AssignmentNotFoundError("Role assignment not found")

        self._session.delete(binding)
        self._session.flush()

        self._logger.info(
            "role_removed",
            extra={
                "user_uuid": user_uuid,
                "role_uuid": binding.role_uuid,
                "organization_uuid": organization_uuid,
            },
        )
        self._invalidate()

    def list_user_roles(self, user_uuid: str, organization_uuid: str) -> List[UserRoleAssignmentResponse]:
        stmt = select(UserRole).where(
            UserRole.user_uuid == user_uuid,
            UserRole.organization_uuid == organization_uuid,
        )
        return self._cached_listing(cache_key("user", user_uuid, organization_uuid), stmt)

    def list_user_roles_by_organization(self, organization_uuid: str) -> List[UserRoleAssignmentResponse]:
        stmt = select(UserRole).where(UserRole.organization_uuid == organization_uuid)
        return self._cached_listing(cache_key("org", organization_uuid), stmt)

    def user_has_role(self, user_uuid: str, role_uuid: str, organization_uuid: str) -> bool:
        return self._find_binding(user_uuid, normalize_role_uuid(role_uuid), organization_uuid) is not None

    def count_user_roles(self, user_uuid: str, organization_uuid: str) -> int:
        stmt = (
            select(func.count())
            .select_from(UserRole)
            .where(UserRole.user_uuid == user_uuid, UserRole.organization_uuid == organization_uuid)
        )
        return int(self._session.scalar(stmt) or 0)

    def _cached_listing(self, key: str, stmt) -> List[UserRoleAssignmentResponse]:
        cached = self._cache.get(USER_ROLES_NAMESPACE, key)
        if cached is not None:
            return [UserRoleAssignmentResponse.model_validate(item) for item in cached]

        stmt = stmt.order_by(UserRole.created_at, UserRole.user_role_uuid)
        responses = [UserRoleAssignmentResponse.model_validate(binding) for binding in self._session.scalars(stmt)]
        self._cache.put(
            USER_ROLES_NAMESPACE,
            key,
            [response.model_dump(mode="json") for response in responses],
            self._ttl,
        )
        return responses

    def _resolve_role(self, role_uuid: str) -> Role:
        try:
            parsed = UUID(str(role_uuid))
        except ValueError as exc:
            raise ValidationError(f"Invalid role UUID: {role_uuid}") from exc

        role = self._session.get(Role, parsed)
        if not role:
            raise RoleNotFoundError(f"Role not found: {role_uuid}")
        return role

    def _find_binding(self, user_uuid: str, role_uuid: str, organization_uuid: str) -> Optional[UserRole]:
        stmt = select(UserRole).where(
            UserRole.user_uuid == user_uuid,
            UserRole.role_uuid == role_uuid,
            UserRole.organization_uuid == organization_uuid,
        )
        return self._session.scalars(stmt).first()

    def _invalidate(self) -> None:
        for namespace in (PERMISSIONS_NAMESPACE, USER_ROLES_NAMESPACE):
            self._cache.invalidate_all(namespace)
        invalidate_on_commit(self._session, self._cache, PERMISSIONS_NAMESPACE, USER_ROLES_NAMESPACE)
