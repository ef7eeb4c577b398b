from __future__ import annotations

import pytest

from roles_permissions.services.endpoints import EndpointPermission, map_endpoint


@pytest.mark.parametrize(
    ("endpoint", "expected"),
    [
        ("GET /users", ("view", "user_basic_info")),
        ("GET /users/123", ("view", "user_basic_info")),
        ("POST /users", ("execute", "create_user")),
        ("PATCH /users/42", ("edit", "user_basic_info")),
        ("PUT /users/42", ("edit", "user_basic_info")),
        ("DELETE /users/42", ("execute", "delete_user")),
        ("GET /tasks", ("view", "task")),
        ("POST /tasks", ("execute", "create_task")),
        ("PUT /tasks/7", ("edit", "task")),
        ("PATCH /tasks/7", ("edit", "task")),
        ("DELETE /tasks/7", ("execute", "delete_task")),
        ("GET /organization", ("view", "organization")),
        ("PUT /organization", ("edit", "organization")),
        ("PATCH /organization/settings", ("edit", "organization")),
        ("GET /clients", ("view", "client")),
        ("POST /clients", ("execute", "create_client")),
        ("PUT /clients/9", ("edit", "client")),
        ("DELETE /clients/9", ("execute", "delete_client")),
        ("GET /comment", ("view", "comment")),
        ("POST /comment", ("execute", "create_comment")),
        ("PATCH /comment/3", ("edit", "comment")),
        ("DELETE /comment/3", ("execute", "delete_comment")),
    ],
)
def test_known_endpoints_map_to_permissions(endpoint: str, expected: tuple[str, str]) -> None:
    assert map_endpoint(endpoint) == EndpointPermission(*expected)


@pytest.mark.parametrize(
    "endpoint",
    [
        "GET /unknown",
        "get /tasks",
        "DELETE /tasks",
        "PUT /users",
        "",
        None,
    ],
)
def test_unmapped_endpoints_return_none(endpoint) -> None:
    assert map_endpoint(endpoint) is None


def test_prefix_match_is_broad() -> None:
    assert map_endpoint("GET /tasksummary") == EndpointPermission("view", "task")
