"""Role model carrying a JSON permission policy."""

from __future__ import annotations

import enum
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import Enum, Index, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from roles_permissions.models.base import Base, TimestampMixin
from roles_permissions.models.types import PolicyJSON, RecordUUID


class RoleManagementType(str, enum.Enum):
    SYSTEM_MANAGED = "SYSTEM_MANAGED"
    CUSTOMER_MANAGED = "CUSTOMER_MANAGED"


class Role(TimestampMixin, Base):
    """Named permission policy, global (system-managed) or scoped to one organization."""

    __tablename__ = "roles"
    __table_args__ = (
        Index("ix_roles_organization_uuid", "organization_uuid"),
        Index("ix_roles_role_management_type", "role_management_type"),
        UniqueConstraint("organization_uuid", "role_name", name="uq_roles_organization_role_name"),
        Index(
            "uq_roles_system_role_name",
            "role_name",
            unique=True,
            postgresql_where=text("organization_uuid IS NULL"),
            sqlite_where=text("organization_uuid IS NULL"),
        ),
    )

    role_uuid: Mapped[uuid.UUID] = mapped_column(RecordUUID(), primary_key=True, default=uuid.uuid4)
    role_name: Mapped[str] = mapped_column(String(length=100), nullable=False)
    organization_uuid: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    role_management_type: Mapped[RoleManagementType] = mapped_column(
        Enum(RoleManagementType, name="role_management_type", native_enum=False, length=32),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(String(length=255), nullable=True)
    policy: Mapped[Dict[str, Any]] = mapped_column(PolicyJSON(), nullable=False)
    created_by: Mapped[str] = mapped_column(String(length=255), nullable=False)

    @property
    def is_system_managed(self) -> bool:
        return self.role_management_type == RoleManagementType.SYSTEM_MANAGED
