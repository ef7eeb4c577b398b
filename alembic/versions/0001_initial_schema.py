"""Initial schema for roles and user-role bindings."""

from __future__ import annotations
from typing import Union, Sequence

from alembic import op
import sqlalchemy as sa
from roles_permissions.models.types import PolicyJSON, RecordUUID

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create roles and user_roles with their lookup indexes."""
    role_management_type_ref = sa.Enum(
        "SYSTEM_MANAGED",
        "CUSTOMER_MANAGED",
        name="role_management_type",
        native_enum=False,
        length=32,
    )

    op.create_table(
        "roles",
        sa.Column("role_uuid", RecordUUID(), nullable=False),
        sa.Column("role_name", sa.String(length=100), nullable=False),
        sa.Column("organization_uuid", sa.String(length=255), nullable=True),
        sa.Column("role_management_type", role_management_type_ref, nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("policy", PolicyJSON(), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("role_uuid"),
        sa.UniqueConstraint("organization_uuid", "role_name", name=op.f("uq_roles_organization_role_name")),
    )
    op.create_index(op.f("ix_roles_organization_uuid"), "roles", ["organization_uuid"], unique=False)
    op.create_index(op.f("ix_roles_role_management_type"), "roles", ["role_management_type"], unique=False)
    # NULL never collides in a plain unique constraint, so system-scope names need their own index.
    op.create_index(
        op.f("uq_roles_system_role_name"),
        "roles",
        ["role_name"],
        unique=True,
        postgresql_where=sa.text("organization_uuid IS NULL"),
        sqlite_where=sa.text("organization_uuid IS NULL"),
    )

    op.create_table(
        "user_roles",
        sa.Column("user_role_uuid", RecordUUID(), nullable=False),
        sa.Column("user_uuid", sa.String(length=255), nullable=False),
        sa.Column("role_uuid", sa.String(length=255), nullable=False),
        sa.Column("organization_uuid", sa.String(length=255), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("user_role_uuid"),
        sa.UniqueConstraint(
            "user_uuid",
            "role_uuid",
            "organization_uuid",
            name=op.f("uq_user_roles_user_role_organization"),
        ),
    )
    op.create_index(op.f("ix_user_roles_user_uuid"), "user_roles", ["user_uuid"], unique=False)
    op.create_index(op.f("ix_user_roles_organization_uuid"), "user_roles", ["organization_uuid"], unique=False)


def downgrade() -> None:
    """Drops both tables."""
    op.drop_index(op.f("ix_user_roles_organization_uuid"), table_name="user_roles")
    op.drop_index(op.f("ix_user_roles_user_uuid"), table_name="user_roles")
    op.drop_table("user_roles")
    op.drop_index(op.f("uq_roles_system_role_name"), table_name="roles")
    op.drop_index(op.f("ix_roles_role_management_type"), table_name="roles")
    op.drop_index(op.f("ix_roles_organization_uuid"), table_name="roles")
    op.drop_table("roles")
