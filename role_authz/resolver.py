from role_authz.inheritance import inheritance_depths
from role_authz.roles import RoleCatalog
from role_authz.scopes import normalize_scopes


def collect_permissions(role_name: str, roles: RoleCatalog) -> list[str]:
    """Collect a role's own and inherited permissions.

    Own permissions come first, then each ancestor's, depth-first in
    declaration order. A role already visited is skipped, so this ends even
    on a catalog that was never validated. Missing roles contribute nothing.
    """
    collected: list[str] = []
    seen: set[str] = set()
    stack = [role_name]

    while stack:
        name = stack.pop()
        if name in seen:
            continue
        seen.add(name)

        role = roles.get(name)
        if role is None:
            continue

        collected.extend(role.permissions)
        stack.extend(reversed(role.inherits))

    return collected


def resolve_permissions(roles: RoleCatalog) -> dict[str, list[str]]:
    """Resolve the full, normalized permission set of every role."""
    return {name: normalize_scopes(collect_permissions(name, roles)) for name in roles}


def rank_roles(roles: RoleCatalog) -> list[str]:
    """Order role names so every role comes after the roles it inherits from.

    Roles are sorted by inheritance depth, and by name within a depth.
    """
    depths = inheritance_depths(roles)
    return sorted(roles, key=lambda name: (depths[name], name))
