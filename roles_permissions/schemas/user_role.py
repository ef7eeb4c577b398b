"""User-role assignment schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserRoleAssignmentRequest(BaseModel):
    role_uuid: str = Field(..., min_length=1, max_length=255)


class UserRoleAssignmentResponse(BaseModel):
    user_role_uuid: UUID
    user_uuid: str
    role_uuid: str
    organization_uuid: str
    created_by: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserRoleCountResponse(BaseModel):
    count: int


class UserRoleMembershipResponse(BaseModel):
    has_role: bool
