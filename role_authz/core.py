import logging
from collections.abc import Iterable, Mapping, Sequence
from contextvars import Context
from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple

from role_authz.context import get_role_from_context
from role_authz.exceptions import (
    AuthorizationError,
    InsufficientPermissionsError,
    InvalidRoleError,
    RoleNotInContextError,
)
from role_authz.inheritance import missing_ancestors, validate_inheritance
from role_authz.resolver import rank_roles, resolve_permissions
from role_authz.roles import RoleSource
from role_authz.scopes import DEFAULT_CONFIG, ScopeConfig, scope_matches

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of an authorization query.

    Truthy when access is granted. A denial carries the reason in ``error``;
    call ``raise_for_denial()`` to turn it into an exception.
    """

    error: AuthorizationError | None = None

    @property
    def allowed(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.error is None

    def raise_for_denial(self) -> None:
        if self.error is not None:
            raise self.error


GRANTED = Decision()


class _RoleGrants(NamedTuple):
    permissions: tuple[str, ...]
    exact: frozenset[str]
    patterns: tuple[str, ...]
    unrestricted: bool

    @classmethod
    def build(cls, permissions: Sequence[str], config: ScopeConfig) -> "_RoleGrants":
        return cls(
            permissions=tuple(permissions),
            exact=frozenset(permissions),
            patterns=tuple(p for p in permissions if p.endswith(config.wildcard)),
            unrestricted=config.wildcard in permissions,
        )

    def allows(self, permission: str, config: ScopeConfig) -> bool:
        if self.unrestricted or permission in self.exact:
            return True
        return any(scope_matches(permission, pattern, config=config) for pattern in self.patterns)


class Authorizer:
    """Answers permission queries against a resolved role catalog.

    Holds an immutable snapshot: the resolved permission set of every role
    and the ranked role names. Nothing is mutated after construction, so a
    single instance can be queried from any number of threads or tasks
    without locking. Build one with ``new_authorizer()``.

    Every query returns a ``Decision`` instead of raising.

    Args:
        permissions: Mapping of role name to its resolved permissions.
        ranked_roles: Role names in inheritance order, base roles first.
        config: Scope grammar used for wildcard matching.
    """

    __slots__ = ("_grants", "_roles", "_config")

    def __init__(
        self,
        permissions: Mapping[str, Sequence[str]],
        ranked_roles: Iterable[str],
        config: ScopeConfig = DEFAULT_CONFIG,
    ) -> None:
        self._grants: Mapping[str, _RoleGrants] = MappingProxyType(
            {name: _RoleGrants.build(perms, config) for name, perms in permissions.items()}
        )
        self._roles = tuple(ranked_roles)
        self._config = config

    @property
    def config(self) -> ScopeConfig:
        return self._config

    def can(self, role: str, permission: str) -> Decision:
        """Check if a role holds a permission, directly or inherited."""
        grants = self._grants.get(role)
        if grants is None:
            return Decision(InvalidRoleError(role))
        if not grants.allows(permission, self._config):
            return Decision(InsufficientPermissionsError(role, [permission]))
        return GRANTED

    def can_any(self, role: str, *permissions: str) -> Decision:
        """Check if a role holds at least one of the permissions.

        Granted for any role when no permissions are given.
        """
        if not permissions:
            return GRANTED
        grants = self._grants.get(role)
        if grants is None:
            return Decision(InvalidRoleError(role))
        if not any(grants.allows(p, self._config) for p in permissions):
            return Decision(InsufficientPermissionsError(role, permissions))
        return GRANTED

    def can_all(self, role: str, *permissions: str) -> Decision:
        """Check if a role holds every one of the permissions.

        Granted for any role when no permissions are given.
        """
        if not permissions:
            return GRANTED
        grants = self._grants.get(role)
        if grants is None:
            return Decision(InvalidRoleError(role))
        missing = [p for p in permissions if not grants.allows(p, self._config)]
        if missing:
            return Decision(InsufficientPermissionsError(role, missing))
        return GRANTED

    def can_from_context(self, ctx: Context | None, permission: str) -> Decision:
        """Like ``can()``, for the role stored in ``ctx``.

        ``None`` reads the current context. A context without a role is
        denied with ``RoleNotInContextError``.
        """
        role = get_role_from_context(ctx)
        if role is None:
            return Decision(RoleNotInContextError([permission]))
        return self.can(role, permission)

    def can_any_from_context(self, ctx: Context | None, *permissions: str) -> Decision:
        role = get_role_from_context(ctx)
        if role is None:
            return Decision(RoleNotInContextError(permissions))
        return self.can_any(role, *permissions)

    def can_all_from_context(self, ctx: Context | None, *permissions: str) -> Decision:
        role = get_role_from_context(ctx)
        if role is None:
            return Decision(RoleNotInContextError(permissions))
        return self.can_all(role, *permissions)

    def verify_role(self, role: str) -> Decision:
        """Check that a role exists."""
        if role not in self._grants:
            return Decision(InvalidRoleError(role))
        return GRANTED

    def get_roles(self) -> tuple[str, ...]:
        """Return all role names, base roles first."""
        return self._roles

    def permissions_for(self, role: str) -> tuple[str, ...] | None:
        """Return the resolved permissions of a role, or ``None`` if unknown."""
        grants = self._grants.get(role)
        return grants.permissions if grants is not None else None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(roles={list(self._roles)!r})"


def new_authorizer(source: RoleSource, *, config: ScopeConfig = DEFAULT_CONFIG) -> Authorizer:
    """Load, validate and resolve a role catalog into an ``Authorizer``.

    Args:
        source: Supplier of the role catalog.
        config: Scope grammar used for wildcard matching.

    Returns:
        A ready-to-query authorizer.

    Raises:
        CircularInheritanceError: If role inheritance contains a cycle.
        InheritanceDepthError: If an inheritance chain is too deep.
        Exception: Whatever ``source.load()`` raises is propagated unchanged.
    """
    roles = source.load()
    if roles is None:
        roles = {}

    logger.debug("Loaded %d roles from %s", len(roles), type(source).__name__)

    validate_inheritance(roles)

    for role_name, ancestor in missing_ancestors(roles):
        logger.warning("Role %r inherits from unknown role %r; it contributes no permissions", role_name, ancestor)

    authorizer = Authorizer(resolve_permissions(roles), rank_roles(roles), config=config)
    logger.debug("Resolved permissions for %d roles", len(roles))
    return authorizer
