from __future__ import annotations

import importlib.util
from pathlib import Path

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect, text

from roles_permissions.models import Base

MIGRATION_PATH = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "0001_initial_schema.py"


def load_migration():
    spec = importlib.util.spec_from_file_location("initial_schema_migration", MIGRATION_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def describe_schema(engine) -> dict:
    inspector = inspect(engine)
    schema = {}
    for table in ("roles", "user_roles"):
        schema[table] = {
            "columns": {
                column["name"]: (str(column["type"]), column["nullable"], column["default"])
                for column in inspector.get_columns(table)
            },
            "primary_key": inspector.get_pk_constraint(table),
            "indexes": sorted((index["name"], bool(index["unique"])) for index in inspector.get_indexes(table)),
            "unique_constraints": sorted(constraint["name"] for constraint in inspector.get_unique_constraints(table)),
        }
    return schema


def test_migration_builds_the_same_schema_as_the_models() -> None:
    migrated = create_engine("sqlite://")
    with migrated.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            load_migration().upgrade()

    modelled = create_engine("sqlite://")
    Base.metadata.create_all(bind=modelled)

    assert describe_schema(migrated) == describe_schema(modelled)


def test_migrated_tables_fill_in_creation_timestamps() -> None:
    migrated = create_engine("sqlite://")
    with migrated.begin() as connection:
        with Operations.context(MigrationContext.configure(connection)):
            load_migration().upgrade()
        connection.execute(
            text(
                "INSERT INTO user_roles (user_role_uuid, user_uuid, role_uuid, organization_uuid, created_by) "
                "VALUES ('0b5c3f3e-4c1a-4d7e-9a55-0f6c2a9e1d11', 'user-1', 'role-1', 'org-acme', 'admin')"
            )
        )
        created_at = connection.execute(text("SELECT created_at FROM user_roles")).scalar_one()

    assert created_at is not None
