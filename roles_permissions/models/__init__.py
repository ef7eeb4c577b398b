"""SQLAlchemy ORM models for the roles & permissions service."""

from roles_permissions.models.base import Base  # noqa: F401
from roles_permissions.models.role import Role, RoleManagementType  # noqa: F401
from roles_permissions.models.user_role import UserRole  # noqa: F401
