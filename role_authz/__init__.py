"""Role authorization - role inheritance resolution with wildcard permission matching."""

__version__ = "0.1.0"

from role_authz.context import bound_role, get_role_from_context, set_role_in_context
from role_authz.core import GRANTED, Authorizer, Decision, new_authorizer
from role_authz.dependencies import CheckMode, RBACAuthz, require_permissions
from role_authz.exceptions import (
    AuthorizationError,
    CircularInheritanceError,
    Forbidden,
    InheritanceDepthError,
    InsufficientPermissionsError,
    InvalidRoleError,
    RoleCatalogError,
    RoleMissingError,
    RoleNotInContextError,
)
from role_authz.inheritance import MAX_INHERITANCE_DEPTH
from role_authz.roles import InMemoryRoleSource, Role, RoleCatalog, RoleSource
from role_authz.scopes import DEFAULT_CONFIG, ScopeConfig

__all__ = [
    "Authorizer",
    "Decision",
    "GRANTED",
    "new_authorizer",
    "Role",
    "RoleCatalog",
    "RoleSource",
    "InMemoryRoleSource",
    "MAX_INHERITANCE_DEPTH",
    "ScopeConfig",
    "DEFAULT_CONFIG",
    "set_role_in_context",
    "get_role_from_context",
    "bound_role",
    "RBACAuthz",
    "CheckMode",
    "require_permissions",
    "AuthorizationError",
    "InvalidRoleError",
    "InsufficientPermissionsError",
    "RoleMissingError",
    "RoleNotInContextError",
    "RoleCatalogError",
    "CircularInheritanceError",
    "InheritanceDepthError",
    "Forbidden",
]
