"""Errors raised by the role, assignment and policy services."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for service errors."""


class ValidationError(ServiceError):
    """Raised when input is missing or malformed."""


class PolicyValidationError(ValidationError):
    """Raised when a policy document is null or cannot be parsed."""


class NotFoundError(ServiceError):
    """Raised when a role or assignment does not exist."""


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""


class AssignmentNotFoundError(NotFoundError):
    """Raised when a user-role assignment cannot be found."""


class ConflictError(ServiceError):
    """Raised when a write would violate a uniqueness or scoping rule."""


class ImmutabilityError(ServiceError):
    """Raised when attempting to delete a system-managed role."""
