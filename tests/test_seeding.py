from __future__ import annotations

from fastapi.testclient import TestClient

from roles_permissions.core.config import AppSettings
from roles_permissions.main import create_app
from roles_permissions.models import RoleManagementType
from roles_permissions.services.roles import RoleService
from roles_permissions.services.seeding import SYSTEM_ACTOR, SYSTEM_ROLES, seed_system_roles


def test_seeding_creates_default_system_roles(session, cache) -> None:
    created = seed_system_roles(session, cache=cache)

    assert created == [definition.role_name for definition in SYSTEM_ROLES]
    roles = RoleService(session, cache=cache).list_system_managed_roles()
    assert {role.role_name for role in roles} == {"Owner", "Manager", "User", "Operator"}
    for role in roles:
        assert role.organization_uuid is None
        assert role.role_management_type == RoleManagementType.SYSTEM_MANAGED
        assert role.created_by == SYSTEM_ACTOR


def test_seeding_stores_wildcards_verbatim(session, cache) -> None:
    seed_system_roles(session, cache=cache)

    owner = RoleService(session, cache=cache).get_role_by_name_and_organization("Owner", None)

    assert owner is not None
    assert owner.policy == {"data": {"view": ["*"], "edit": ["*"]}, "features": {"execute": ["*"]}}


def test_seeding_is_skipped_when_system_roles_exist(session, cache) -> None:
    seed_system_roles(session, cache=cache)

    assert seed_system_roles(session, cache=cache) == []
    assert RoleService(session, cache=cache).count_system_managed_roles() == len(SYSTEM_ROLES)


def test_app_lifespan_uses_settings_given_to_the_factory() -> None:
    settings = AppSettings(seed_system_roles=False, service_name="rps-under-test")

    with TestClient(create_app(settings)) as client:
        assert client.get("/role/system-managed").json() == []
        assert client.get("/healthz").json()["service"] == "rps-under-test"
