"""Permission check endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from roles_permissions.api.dependencies import get_permission_service, require_org_uuid, require_user_uuid
from roles_permissions.schemas.permission import (
    EndpointPermissionCheckRequest,
    PermissionCheckRequest,
    PermissionCheckResponse,
)
from roles_permissions.services.permissions import PermissionService

router = APIRouter()
logger = logging.getLogger("roles_permissions.api.permissions")


@router.post("/permission/check", response_model=PermissionCheckResponse)
async def check_permission(
    payload: PermissionCheckRequest,
    user_uuid: str = Depends(require_user_uuid),
    organization_uuid: str = Depends(require_org_uuid),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionCheckResponse:
    logger.debug(
        "permission_check_requested",
        extra={"user_uuid": user_uuid, "action": payload.action, "resource": payload.resource},
    )
    return await run_in_threadpool(
        service.check_permission,
        user_uuid,
        organization_uuid,
        payload.action,
        payload.resource,
        payload.resource_id,
    )


@router.post("/has-permission", response_model=PermissionCheckResponse)
async def has_permission(
    payload: PermissionCheckRequest,
    user_uuid: str = Depends(require_user_uuid),
    organization_uuid: str = Depends(require_org_uuid),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionCheckResponse:
    return await check_permission(payload, user_uuid, organization_uuid, service)


@router.post("/check-permission", response_model=PermissionCheckResponse)
async def check_permission_by_endpoint(
    payload: EndpointPermissionCheckRequest,
    user_uuid: str = Depends(require_user_uuid),
    organization_uuid: str = Depends(require_org_uuid),
    service: PermissionService = Depends(get_permission_service),
) -> PermissionCheckResponse:
    logger.debug(
        "endpoint_permission_check_requested",
        extra={"user_uuid": user_uuid, "endpoint": payload.endpoint},
    )
    return await run_in_threadpool(
        service.check_permission_by_endpoint,
        user_uuid,
        organization_uuid,
        payload.endpoint,
        payload.resource_id,
    )
