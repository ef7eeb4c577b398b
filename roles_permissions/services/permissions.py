"""Permission evaluation service."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from roles_permissions.core.config import AppSettings, get_settings
from roles_permissions.models.role import Role
from roles_permissions.models.user_role import UserRole
from roles_permissions.schemas.permission import PermissionCheckResponse
from roles_permissions.services.cache import PERMISSIONS_NAMESPACE, CacheStore, cache_key, get_cache_store
from roles_permissions.services.endpoints import map_endpoint
from roles_permissions.services.errors import PolicyValidationError
from roles_permissions.services.policy import PolicyDocument

# Every grant currently reports the same scope.
GRANTED_SCOPE = "team"

logger = logging.getLogger("roles_permissions.services.permissions")


def evaluate_roles(roles: List[Role], action: str, resource: str) -> Optional[Role]:
    """Return the first role whose policy allows ``action`` on ``resource``.

    Roles with unreadable policies grant nothing.
    """

    for role in roles:
        try:
            policy = PolicyDocument.from_json(role.policy)
        except PolicyValidationError:
            logger.warning("role_policy_unreadable", extra={"role_uuid": str(role.role_uuid)})
            continue
        if policy.allows(action, resource):
            return role
    return None


class PermissionService:
    """Decides whether a user holds a permission inside an organization.

    Checks never raise: any failure while loading bindings, roles or policies
    results in a denial.
    """

    def __init__(
        self,
        session: Session,
        cache: Optional[CacheStore] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        self._session = session
        self._logger = logger
        self._cache = cache or get_cache_store()
        self._ttl = (settings or get_settings()).permission_cache_ttl

    def check_permission(
        self,
        user_uuid: str,
        organization_uuid: str,
        action: str,
        resource: str,
        resource_id: Optional[str] = None,
    ) -> PermissionCheckResponse:
        key = cache_key("check", user_uuid, organization_uuid, action, resource)
        return self._cached_check(
            key,
            lambda: self._evaluate(user_uuid, organization_uuid, action, resource),
            user_uuid=user_uuid,
            organization_uuid=organization_uuid,
        )

    def check_permission_by_endpoint(
        self,
        user_uuid: str,
        organization_uuid: str,
        endpoint: str,
        resource_id: Optional[str] = None,
    ) -> PermissionCheckResponse:
        key = cache_key("endpoint", user_uuid, organization_uuid, endpoint)

        def evaluate() -> PermissionCheckResponse:
            mapping = map_endpoint(endpoint)
            if mapping is None:
                self._logger.warning("permission_unknown_endpoint", extra={"endpoint": endpoint})
                return PermissionCheckResponse.denied()
            return self._evaluate(user_uuid, organization_uuid, mapping.action, mapping.resource)

        return self._cached_check(
            key,
            evaluate,
            user_uuid=user_uuid,
            organization_uuid=organization_uuid,
        )

    def _cached_check(
        self,
        key: str,
        evaluate: Callable[[], PermissionCheckResponse],
        *,
        user_uuid: str,
        organization_uuid: str,
    ) -> PermissionCheckResponse:
        try:
            cached = self._cache.get(PERMISSIONS_NAMESPACE, key)
            if cached is not None:
                return PermissionCheckResponse.model_validate(cached)

            result = evaluate()
            self._cache.put(PERMISSIONS_NAMESPACE, key, result.model_dump(mode="json"), self._ttl)
            return result
        except Exception:  # noqa: BLE001
            self._session.rollback()
            self._logger.exception(
                "permission_check_failed",
                extra={"user_uuid": user_uuid, "organization_uuid": organization_uuid},
            )
            return PermissionCheckResponse.denied()

    def _evaluate(self, user_uuid: str, organization_uuid: str, action: str, resource: str) -> PermissionCheckResponse:
        roles = self._load_roles(user_uuid, organization_uuid)
        if not roles:
            self._logger.info(
                "permission_denied",
                extra={
                    "user_uuid": user_uuid,
                    "organization_uuid": organization_uuid,
                    "action": action,
                    "resource": resource,
                    "reason": "no_roles",
                },
            )
            return PermissionCheckResponse.denied()

        role = evaluate_roles(roles, action, resource)
        if role is None:
            self._logger.info(
                "permission_denied",
                extra={
                    "user_uuid": user_uuid,
                    "organization_uuid": organization_uuid,
                    "action": action,
                    "resource": resource,
                },
            )
            return PermissionCheckResponse.denied()

        self._logger.info(
            "permission_granted",
            extra={
                "user_uuid": user_uuid,
                "organization_uuid": organization_uuid,
                "action": action,
                "resource": resource,
                "role_uuid": str(role.role_uuid),
            },
        )
        return PermissionCheckResponse(
            has_permission=True,
            role_uuid=str(role.role_uuid),
            role_name=role.role_name,
            granted_scope=GRANTED_SCOPE,
        )

    def _load_roles(self, user_uuid: str, organization_uuid: str) -> List[Role]:
        stmt = (
            select(UserRole)
            .where(UserRole.user_uuid == user_uuid, UserRole.organization_uuid == organization_uuid)
            .order_by(UserRole.created_at, UserRole.user_role_uuid)
        )
        roles: List[Role] = []
        for binding in self._session.scalars(stmt):
            try:
                role_uuid = UUID(binding.role_uuid)
            except ValueError:
                self._logger.warning(
                    "user_role_invalid_role_uuid",
                    extra={"user_role_uuid": str(binding.user_role_uuid), "role_uuid": binding.role_uuid},
                )
                continue
            role = self._session.get(Role, role_uuid)
            if role is None:
                self._logger.warning(
                    "user_role_dangling",
                    extra={"user_role_uuid": str(binding.user_role_uuid), "role_uuid": binding.role_uuid},
                )
                continue
            roles.append(role)
        return roles
