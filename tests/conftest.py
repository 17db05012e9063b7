from collections.abc import Callable

import pytest

from role_authz import Authorizer, InMemoryRoleSource, Role, new_authorizer


@pytest.fixture
def catalog() -> dict[str, Role]:
    return {
        "viewer": Role(permissions=("content.read",)),
        "editor": Role(permissions=("content.write",), inherits=("viewer",)),
        "admin": Role(permissions=("admin.*", "users.delete"), inherits=("editor",)),
        "superadmin": Role(permissions=("*",)),
    }


@pytest.fixture
def make_chain() -> Callable[[int], dict[str, Role]]:
    """Build role0 <- role1 <- ... <- role{links}, i.e. ``links`` inheritance links."""

    def build(links: int) -> dict[str, Role]:
        roles = {}
        for i in range(links + 1):
            inherits = (f"role{i - 1}",) if i > 0 else ()
            roles[f"role{i}"] = Role(permissions=(f"perm{i}",), inherits=inherits)
        return roles

    return build


@pytest.fixture
def authorizer(catalog: dict[str, Role]) -> Authorizer:
    return new_authorizer(InMemoryRoleSource(catalog))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
