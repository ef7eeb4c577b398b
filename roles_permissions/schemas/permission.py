"""Permission check schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class PermissionCheckRequest(BaseModel):
    action: str = Field(..., min_length=1)
    resource: str = Field(..., min_length=1)
    resource_id: Optional[str] = None


class EndpointPermissionCheckRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)
    resource_id: Optional[str] = None


class PermissionCheckResponse(BaseModel):
    has_permission: bool
    role_uuid: Optional[str] = None
    role_name: Optional[str] = None
    granted_scope: Optional[str] = None

    @classmethod
    def denied(cls) -> "PermissionCheckResponse":
        return cls(has_permission=False)
