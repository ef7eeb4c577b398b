from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from roles_permissions.models import Role, RoleManagementType
from roles_permissions.services.errors import ConflictError, RoleNotFoundError, ValidationError
from roles_permissions.services.user_roles import UserRoleService

ORG = "org-acme"
OTHER_ORG = "org-other"
ADMIN = "admin-1"


def identity_headers(user_uuid: str, organization_uuid: str) -> dict[str, str]:
    return {"x-app-user-uuid": user_uuid, "x-app-org-uuid": organization_uuid}


def create_role(client: TestClient, name: str, organization_uuid: str = ORG) -> str:
    response = client.post(
        "/role",
        json={"role_name": name, "policy": {"data": {"view": ["task"]}}},
        headers=identity_headers(ADMIN, organization_uuid),
    )
    response.raise_for_status()
    return response.json()["role_uuid"]


def assign(client: TestClient, user_uuid: str, role_uuid: str, organization_uuid: str = ORG):
    return client.post(
        f"/user/{user_uuid}/roles",
        json={"role_uuid": role_uuid},
        headers=identity_headers(ADMIN, organization_uuid),
    )


def test_assign_role_to_user(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer")
    user_uuid = str(uuid4())

    response = assign(client, user_uuid, role_uuid)

    assert response.status_code == 201
    body = response.json()
    assert body["user_uuid"] == user_uuid
    assert body["role_uuid"] == role_uuid
    assert body["organization_uuid"] == ORG
    assert body["created_by"] == ADMIN
    assert body["user_role_uuid"]


def test_duplicate_assignment_conflicts_and_keeps_one_binding(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer")
    user_uuid = str(uuid4())
    assign(client, user_uuid, role_uuid).raise_for_status()

    duplicate = assign(client, user_uuid, role_uuid)

    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "Role is already assigned to user in this organization"
    listing = client.get(f"/user/{user_uuid}/roles", headers={"x-app-org-uuid": ORG}).json()
    assert len(listing) == 1


def test_customer_role_cannot_be_assigned_in_other_organization(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer", organization_uuid=ORG)

    response = assign(client, str(uuid4()), role_uuid, organization_uuid=OTHER_ORG)

    assert response.status_code == 409
    assert response.json()["detail"] == "Role does not belong to the specified organization"


def test_system_role_is_assignable_in_any_organization(client: TestClient) -> None:
    manager_uuid = client.get("/role/name/Manager").json()["role_uuid"]
    user_uuid = str(uuid4())

    assert assign(client, user_uuid, manager_uuid, organization_uuid=ORG).status_code == 201
    assert assign(client, user_uuid, manager_uuid, organization_uuid=OTHER_ORG).status_code == 201


def test_assign_unknown_role_returns_not_found(client: TestClient) -> None:
    response = assign(client, str(uuid4()), str(uuid4()))

    assert response.status_code == 404


def test_assign_malformed_role_uuid_is_rejected(client: TestClient) -> None:
    response = assign(client, str(uuid4()), "not-a-uuid")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid role UUID: not-a-uuid"


def test_assign_requires_assigner_header(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer")

    response = client.post(
        f"/user/{uuid4()}/roles",
        json={"role_uuid": role_uuid},
        headers={"x-app-org-uuid": ORG},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required header: x-app-user-uuid"


def test_remove_role_from_user(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer")
    user_uuid = str(uuid4())
    assign(client, user_uuid, role_uuid).raise_for_status()
    headers = {"x-app-org-uuid": ORG}
    assert len(client.get(f"/user/{user_uuid}/roles", headers=headers).json()) == 1

    response = client.delete(f"/user/{user_uuid}/roles/{role_uuid}", headers=headers)

    assert response.status_code == 204
    assert client.get(f"/user/{user_uuid}/roles", headers=headers).json() == []


def test_remove_missing_assignment_returns_not_found(client: TestClient) -> None:
    role_uuid = create_role(client, "Viewer")

    response = client.delete(f"/user/{uuid4()}/roles/{role_uuid}", headers={"x-app-org-uuid": ORG})

    assert response.status_code == 404
    assert response.json()["detail"] == "Role assignment not found"


def test_membership_count_and_organization_listing(client: TestClient) -> None:
    viewer = create_role(client, "Viewer")
    editor = create_role(client, "Editor")
    alice, bob = str(uuid4()), str(uuid4())
    assign(client, alice, viewer).raise_for_status()
    assign(client, alice, editor).raise_for_status()
    assign(client, bob, viewer).raise_for_status()
    headers = {"x-app-org-uuid": ORG}

    assert client.get(f"/user/{alice}/roles/count", headers=headers).json() == {"count": 2}
    assert client.get(f"/user/{bob}/roles/count", headers=headers).json() == {"count": 1}
    assert client.get(f"/user/{bob}/roles/{viewer}", headers=headers).json() == {"has_role": True}
    assert client.get(f"/user/{bob}/roles/{editor}", headers=headers).json() == {"has_role": False}
    assert client.get(f"/user/{alice}/roles/{viewer.upper()}", headers=headers).json() == {"has_role": True}

    bindings = client.get("/user/roles", headers=headers).json()
    assert sorted((b["user_uuid"], b["role_uuid"]) for b in bindings) == sorted(
        [(alice, viewer), (alice, editor), (bob, viewer)]
    )
    assert client.get("/user/roles", headers={"x-app-org-uuid": OTHER_ORG}).json() == []


def test_listing_requires_organization_header(client: TestClient) -> None:
    response = client.get(f"/user/{uuid4()}/roles")

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required header: x-app-org-uuid"


def test_deleting_role_leaves_binding_in_place(client: TestClient) -> None:
    role_uuid = create_role(client, "Temporary")
    user_uuid = str(uuid4())
    assign(client, user_uuid, role_uuid).raise_for_status()

    client.delete(f"/role/{role_uuid}", headers=identity_headers(ADMIN, ORG)).raise_for_status()

    listing = client.get(f"/user/{user_uuid}/roles", headers={"x-app-org-uuid": ORG}).json()
    assert [binding["role_uuid"] for binding in listing] == [role_uuid]


def _customer_role(session, organization_uuid: str = ORG) -> Role:
    role = Role(
        role_name="Direct",
        organization_uuid=organization_uuid,
        role_management_type=RoleManagementType.CUSTOMER_MANAGED,
        policy={"data": {}},
        created_by="tester",
    )
    session.add(role)
    session.flush()
    return role


def test_service_rejects_unknown_and_malformed_roles(session, cache) -> None:
    service = UserRoleService(session, cache=cache)

    with pytest.raises(RoleNotFoundError):
        service.assign_role("u", str(uuid4()), ORG, assigner_uuid=ADMIN)
    with pytest.raises(ValidationError):
        service.assign_role("u", "nope", ORG, assigner_uuid=ADMIN)


def test_storage_constraint_rejects_racing_duplicate(session, cache, monkeypatch) -> None:
    role = _customer_role(session)
    service = UserRoleService(session, cache=cache)
    service.assign_role("u", str(role.role_uuid), ORG, assigner_uuid=ADMIN)
    session.commit()

    # Simulate a concurrent request that passed the existence check.
    monkeypatch.setattr(UserRoleService, "_find_binding", lambda self, *args: None)

    with pytest.raises(ConflictError, match="already assigned"):
        service.assign_role("u", str(role.role_uuid), ORG, assigner_uuid=ADMIN)
