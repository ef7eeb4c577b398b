"""User-role binding within an organization."""

from __future__ import annotations

import uuid

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from roles_permissions.models.base import Base, CreatedAtMixin
from roles_permissions.models.types import RecordUUID


class UserRole(CreatedAtMixin, Base):
    """Grants a role to a user inside one organization."""

    __tablename__ = "user_roles"
    __table_args__ = (
        Index("ix_user_roles_user_uuid", "user_uuid"),
        Index("ix_user_roles_organization_uuid", "organization_uuid"),
        UniqueConstraint(
            "user_uuid",
            "role_uuid",
            "organization_uuid",
            name="uq_user_roles_user_role_organization",
        ),
    )

    user_role_uuid: Mapped[uuid.UUID] = mapped_column(RecordUUID(), primary_key=True, default=uuid.uuid4)
    user_uuid: Mapped[str] = mapped_column(String(length=255), nullable=False)
    # No foreign key: deleting a role leaves its bindings dangling.
    role_uuid: Mapped[str] = mapped_column(String(length=255), nullable=False)
    organization_uuid: Mapped[str] = mapped_column(String(length=255), nullable=False)
    created_by: Mapped[str] = mapped_column(String(length=255), nullable=False)
