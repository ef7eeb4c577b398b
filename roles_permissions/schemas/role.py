"""Role schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from roles_permissions.models.role import RoleManagementType


class RoleRequest(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=100)
    organization_uuid: Optional[str] = Field(default=None, max_length=255)
    role_management_type: RoleManagementType = Field(default=RoleManagementType.CUSTOMER_MANAGED)
    description: Optional[str] = Field(default=None, max_length=255)
    policy: Any = Field(..., description="Policy document as a JSON object or JSON-encoded string.")


class RoleResponse(BaseModel):
    role_uuid: UUID
    role_name: str
    organization_uuid: Optional[str] = None
    role_management_type: RoleManagementType
    description: Optional[str] = None
    policy: Dict[str, Any]
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
