"""Role management service logic."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roles_permissions.core.config import AppSettings, get_settings
from roles_permissions.models.role import Role, RoleManagementType
from roles_permissions.schemas.role import RoleRequest, RoleResponse
from roles_permissions.services.cache import (
    PERMISSIONS_NAMESPACE,
    ROLES_NAMESPACE,
    CacheStore,
    cache_key,
    get_cache_store,
    invalidate_on_commit,
)
from roles_permissions.services.errors import (
    ConflictError,
    ImmutabilityError,
    RoleNotFoundError,
    ValidationError,
)
from roles_permissions.services.policy import parse_policy

DUPLICATE_ROLE_NAME_MESSAGE = "Role name already exists in this organization"


class RoleService:
    """Creates, updates, deletes and looks up roles."""

    def __init__(
        self,
        session: Session,
        cache: Optional[CacheStore] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self._session = session
        self._logger = logging.getLogger("roles_permissions.services.roles")
        self._cache = cache or get_cache_store()
        self._ttl = (settings or get_settings()).role_cache_ttl

    def create_role(self, payload: RoleRequest, *, created_by: str) -> RoleResponse:
        policy = parse_policy(payload.policy)

        if payload.role_management_type == RoleManagementType.SYSTEM_MANAGED:
            organization_uuid = None
        else:
            organization_uuid = payload.organization_uuid
            if not organization_uuid:
                raise ValidationError("Organization UUID is required for customer-managed roles")

        if self._find_by_name(payload.role_name, organization_uuid) is not None:
            raise ConflictError(DUPLICATE_ROLE_NAME_MESSAGE)

        role = Role(
            role_name=payload.role_name,
            organization_uuid=organization_uuid,
            role_management_type=payload.role_management_type,
            description=payload.description,
            policy=policy,
            created_by=created_by,
        )
        self._session.add(role)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError(DUPLICATE_ROLE_NAME_MESSAGE) from exc

        self._logger.info(
            "role_created",
            extra={
                "role_uuid": str(role.role_uuid),
                "organization_uuid": organization_uuid,
                "role_management_type": role.role_management_type.value,
                "created_by": created_by,
            },
        )
        self._invalidate()
        return self._to_response(role)

    def update_role(self, role_uuid: UUID, payload: RoleRequest) -> RoleResponse:
        """Replace name, description and policy.

        Organization scope and management type are fixed at creation and
        ignored here. System-managed roles remain updatable.
        """

        role = self._get_role(role_uuid)
        policy = parse_policy(payload.policy)

        if payload.role_name != role.role_name:
            clash = self._find_by_name(payload.role_name, role.organization_uuid)
            if clash is not None and clash.role_uuid != role.role_uuid:
                raise ConflictError(DUPLICATE_ROLE_NAME_MESSAGE)

        role.role_name = payload.role_name
        role.description = payload.description
        role.policy = policy
        self._session.add(role)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise ConflictError(DUPLICATE_ROLE_NAME_MESSAGE) from exc

        self._logger.info("role_updated", extra={"role_uuid": str(role.role_uuid)})
        self._invalidate()
        return self._to_response(role)

    def delete_role(self, role_uuid: UUID) -> None:
        role = self._get_role(role_uuid)
        if role.is_system_managed:
            self._logger.warning("role_delete_rejected", extra={"role_uuid": str(role_uuid)})
            raise ImmutabilityError("Cannot delete system-managed role")

        self._session.delete(role)
        self._session.flush()

        self._logger.info("role_deleted", extra={"role_uuid": str(role_uuid)})
        self._invalidate()

    def get_role(self, role_uuid: UUID) -> RoleResponse:
        key = cache_key("id", str(role_uuid))
        cached = self._cache.get(ROLES_NAMESPACE, key)
        if cached is not None:
            return RoleResponse.model_validate(cached)

        response = self._to_response(self._get_role(role_uuid))
        self._cache.put(ROLES_NAMESPACE, key, response.model_dump(mode="json"), self._ttl)
        return response

    def list_roles_by_organization(self, organization_uuid: str) -> List[RoleResponse]:
        stmt = select(Role).where(Role.organization_uuid == organization_uuid)
        return self._cached_listing(cache_key("org", organization_uuid), stmt)

    def list_system_managed_roles(self) -> List[RoleResponse]:
        stmt = select(Role).where(Role.role_management_type == RoleManagementType.SYSTEM_MANAGED)
        return self._cached_listing(cache_key("system_managed"), stmt)

    def get_role_by_name_and_organization(
        self,
        role_name: str,
        organization_uuid: Optional[str],
    ) -> Optional[RoleResponse]:
        key = cache_key("name", role_name, organization_uuid)
        cached = self._cache.get(ROLES_NAMESPACE, key)
        if cached is not None:
            return RoleResponse.model_validate(cached)

        role = self._find_by_name(role_name, organization_uuid)
        if role is None:
            return None
        response = self._to_response(role)
        self._cache.put(ROLES_NAMESPACE, key, response.model_dump(mode="json"), self._ttl)
        return response

    def count_system_managed_roles(self) -> int:
        stmt = (
            select(func.count())
            .select_from(Role)
            .where(Role.role_management_type == RoleManagementType.SYSTEM_MANAGED)
        )
        return int(self._session.scalar(stmt) or 0)

    def _cached_listing(self, key: str, stmt) -> List[RoleResponse]:
        cached = self._cache.get(ROLES_NAMESPACE, key)
        if cached is not None:
            return [RoleResponse.model_validate(item) for item in cached]

        stmt = stmt.order_by(Role.created_at, Role.role_name)
        responses = [self._to_response(role) for role in self._session.scalars(stmt)]
        self._cache.put(
            ROLES_NAMESPACE,
            key,
            [response.model_dump(mode="json") for response in responses],
            self._ttl,
        )
        return responses

    def _find_by_name(self, role_name: str, organization_uuid: Optional[str]) -> Optional[Role]:
        stmt = select(Role).where(Role.role_name == role_name)
        if organization_uuid is None:
            stmt = stmt.where(Role.organization_uuid.is_(None))
        else:
            stmt = stmt.where(Role.organization_uuid == organization_uuid)
        return self._session.scalars(stmt).first()

    def _get_role(self, role_uuid: UUID) -> Role:
        role = self._session.get(Role, role_uuid)
        if not role:
            raise RoleNotFoundError(f"Role not found: {role_uuid}")
        return role

    def _invalidate(self) -> None:
        for namespace in (ROLES_NAMESPACE, PERMISSIONS_NAMESPACE):
            self._cache.invalidate_all(namespace)
        invalidate_on_commit(self._session, self._cache, ROLES_NAMESPACE, PERMISSIONS_NAMESPACE)

    @staticmethod
    def _to_response(role: Role) -> RoleResponse:
        return RoleResponse.model_validate(role)
