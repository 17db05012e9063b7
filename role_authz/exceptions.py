from collections.abc import Sequence

from fastapi import HTTPException


class AuthorizationError(Exception):
    """Base class for query denials returned by the authorizer."""


class InvalidRoleError(AuthorizationError):
    """The role is not part of the resolved catalog."""

    def __init__(self, role: str) -> None:
        super().__init__(f"Invalid role: {role!r}")
        self.role = role


class InsufficientPermissionsError(AuthorizationError):
    """The role exists but lacks the requested permissions."""

    def __init__(self, role: str | None, permissions: Sequence[str]) -> None:
        super().__init__(f"Insufficient permissions for role {role!r}: {', '.join(permissions)}")
        self.role = role
        self.permissions = tuple(permissions)


class RoleMissingError(AuthorizationError):
    """No role was available to authorize against."""


class RoleNotInContextError(RoleMissingError, InsufficientPermissionsError):
    """No role was set in the context.

    Is both a ``RoleMissingError`` and an ``InsufficientPermissionsError``,
    so a caller only checking for insufficient permissions still denies.
    """

    def __init__(self, permissions: Sequence[str]) -> None:
        InsufficientPermissionsError.__init__(self, None, permissions)
        self.args = (f"Role not found in context; insufficient permissions: {', '.join(permissions)}",)


class RoleCatalogError(Exception):
    """Base class for errors raised while building an authorizer."""


class CircularInheritanceError(RoleCatalogError):
    """Role inheritance contains a cycle."""

    def __init__(self, role: str, ancestor: str) -> None:
        super().__init__(f"Circular inheritance detected: {role} -> {ancestor}")
        self.role = role
        self.ancestor: str | None = ancestor


class InheritanceDepthError(CircularInheritanceError):
    """Role inheritance chain is longer than allowed.

    Subclasses ``CircularInheritanceError`` so that handlers written for
    cycles also reject over-deep catalogs.
    """

    def __init__(self, role: str, depth: int, max_depth: int) -> None:
        RoleCatalogError.__init__(
            self,
            f"Inheritance depth exceeds maximum allowed depth of {max_depth}: role {role!r} has depth {depth}",
        )
        self.role = role
        self.ancestor = None
        self.depth = depth
        self.max_depth = max_depth


class Forbidden(HTTPException):
    """403 Forbidden - role lacks required permissions."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=403, detail=detail)
