"""Validation of the role inheritance graph.

The graph is walked with explicit stacks rather than recursion, so a long
chain can never hit the interpreter's recursion limit before the depth
bound is checked.
"""

from collections.abc import Iterator

from role_authz.exceptions import CircularInheritanceError, InheritanceDepthError
from role_authz.roles import RoleCatalog

MAX_INHERITANCE_DEPTH = 10


def validate_inheritance(roles: RoleCatalog, max_depth: int = MAX_INHERITANCE_DEPTH) -> None:
    """Reject catalogs with inheritance cycles or over-deep chains.

    Raises:
        CircularInheritanceError: If a role inherits from itself, directly
            or through other roles. The message names the edge that closed
            the loop.
        InheritanceDepthError: If some role's longest inheritance chain is
            longer than ``max_depth``.
    """
    cycle = find_cycle(roles)
    if cycle is not None:
        raise CircularInheritanceError(*cycle)

    depths = inheritance_depths(roles)
    for role_name, depth in depths.items():
        if depth > max_depth:
            raise InheritanceDepthError(role_name, depth, max_depth)


def find_cycle(roles: RoleCatalog) -> tuple[str, str] | None:
    """Return the ``(role, ancestor)`` edge closing a cycle, if there is one."""
    # Roles whose whole ancestry was walked without finding a cycle.
    cleared: set[str] = set()

    for root in roles:
        if root in cleared:
            continue

        path = [root]
        on_path = {root}
        pending: list[Iterator[str]] = [iter(roles[root].inherits)]

        while pending:
            ancestor = next(pending[-1], None)
            if ancestor is None:
                done = path.pop()
                on_path.discard(done)
                cleared.add(done)
                pending.pop()
                continue

            if ancestor in on_path:
                return path[-1], ancestor
            if ancestor in cleared or ancestor not in roles:
                continue

            path.append(ancestor)
            on_path.add(ancestor)
            pending.append(iter(roles[ancestor].inherits))

    return None


def inheritance_depths(roles: RoleCatalog) -> dict[str, int]:
    """Compute the longest inheritance chain starting at each role.

    Roles without ancestors have depth 0. An ancestor missing from the
    catalog still counts as one link. On cyclic input the edge back into
    the current walk counts as a single link, so the walk always ends.
    """
    depths: dict[str, int] = {}

    for root in roles:
        if root in depths:
            continue

        stack = [root]
        visiting = {root}
        while stack:
            name = stack[-1]
            unresolved = next(
                (a for a in roles[name].inherits if a in roles and a not in depths and a not in visiting),
                None,
            )
            if unresolved is not None:
                stack.append(unresolved)
                visiting.add(unresolved)
                continue

            stack.pop()
            visiting.discard(name)
            depths[name] = max((depths.get(a, 0) + 1 for a in roles[name].inherits), default=0)

    return depths


def missing_ancestors(roles: RoleCatalog) -> list[tuple[str, str]]:
    """List ``(role, ancestor)`` pairs whose ancestor is not in the catalog."""
    return [(name, ancestor) for name, role in roles.items() for ancestor in role.inherits if ancestor not in roles]
