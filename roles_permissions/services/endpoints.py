"""Static mapping of gateway endpoints to (action, resource) pairs."""

from __future__ import annotations

from typing import NamedTuple, Optional, Tuple


class EndpointPermission(NamedTuple):
    action: str
    resource: str


# Ordered; the first rule whose prefix matches wins. Prefixes are matched
# against the raw "<VERB> <path>" string, so "GET /users" also covers
# "GET /users/123".
ENDPOINT_RULES: Tuple[Tuple[Tuple[str, ...], EndpointPermission], ...] = (
    (("GET /users",), EndpointPermission("view", "user_basic_info")),
    (("POST /users",), EndpointPermission("execute", "create_user")),
    (("PATCH /users/", "PUT /users/"), EndpointPermission("edit", "user_basic_info")),
    (("DELETE /users/",), EndpointPermission("execute", "delete_user")),
    (("GET /tasks",), EndpointPermission("view", "task")),
    (("POST /tasks",), EndpointPermission("execute", "create_task")),
    (("PUT /tasks/", "PATCH /tasks/"), EndpointPermission("edit", "task")),
    (("DELETE /tasks/",), EndpointPermission("execute", "delete_task")),
    (("GET /organization",), EndpointPermission("view", "organization")),
    (("PUT /organization", "PATCH /organization"), EndpointPermission("edit", "organization")),
    (("GET /clients",), EndpointPermission("view", "client")),
    (("POST /clients",), EndpointPermission("execute", "create_client")),
    (("PUT /clients/", "PATCH /clients/"), EndpointPermission("edit", "client")),
    (("DELETE /clients/",), EndpointPermission("execute", "delete_client")),
    (("GET /comment",), EndpointPermission("view", "comment")),
    (("POST /comment",), EndpointPermission("execute", "create_comment")),
    (("PUT /comment/", "PATCH /comment/"), EndpointPermission("edit", "comment")),
    (("DELETE /comment/",), EndpointPermission("execute", "delete_comment")),
)


def map_endpoint(endpoint: Optional[str]) -> Optional[EndpointPermission]:
    """Return the permission guarding ``endpoint`` or ``None`` when unmapped.

    Verbs are case-sensitive.
    """

    if not endpoint:
        return None
    for prefixes, permission in ENDPOINT_RULES:
        if endpoint.startswith(prefixes):
            return permission
    return None
