"""Column types shared by the role and binding tables."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.types import CHAR, JSON, TypeDecorator


class RecordUUID(TypeDecorator):
    """Primary key identifier: native UUID on PostgreSQL, canonical 36-char text elsewhere.

    Values are always read back as :class:`uuid.UUID`, so role ids compare
    equal regardless of the case or format they were written with.
    """

    impl = CHAR(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect) -> Optional[Any]:
        if value is None:
            return None
        record_id = value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return record_id
        return str(record_id)

    def process_result_value(self, value: Any, dialect) -> Optional[uuid.UUID]:
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)

    @property
    def python_type(self) -> type:
        return uuid.UUID


class PolicyJSON(TypeDecorator):
    """Policy document column; JSONB on PostgreSQL."""

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB(none_as_null=True))
        return dialect.type_descriptor(JSON(none_as_null=True))
