"""FastAPI integration: attach an ``Authorizer`` to an app and guard endpoints."""

from collections.abc import Awaitable, Callable, Coroutine
from contextvars import Context
from enum import StrEnum
from typing import Annotated, Any, Generic, TypeVar

from fastapi import Depends, FastAPI, Request

from role_authz.context import set_role_in_context
from role_authz.core import Authorizer
from role_authz.exceptions import Forbidden

UserT = TypeVar("UserT")


class CheckMode(StrEnum):
    ALL = "all"
    ANY = "any"


async def _rbac_user_dependency_placeholder(request: Request) -> Any:
    """Placeholder dependency for user authentication.

    Replaced through ``app.dependency_overrides`` when ``RBACAuthz`` is given
    a ``user_dependency``. Otherwise reads ``request.state.user``, which must
    be set by the application's own auth mechanism.
    """
    return getattr(request.state, "user", None)


class RBACAuthz(Generic[UserT]):
    """Attaches an ``Authorizer`` to a FastAPI application.

    Args:
        app: The FastAPI application instance.
        authorizer: The resolved authorizer to answer permission checks.
        get_role: Callable that extracts the acting role name from a user
            object. Returning ``None`` denies every check for that user.
        user_dependency: Optional FastAPI dependency that returns the
            authenticated user.
        schema_path: Optional path to mount the catalog schema route
            (e.g., "/_rbac").
    """

    def __init__(
        self,
        app: FastAPI,
        authorizer: Authorizer,
        get_role: Callable[[UserT], str | None],
        user_dependency: Callable[..., UserT] | Callable[..., Awaitable[UserT]] | None = None,
        schema_path: str | None = None,
    ) -> None:
        self.app = app
        self.authorizer = authorizer
        self.get_role = get_role
        self.user_dependency = user_dependency
        self.schema_path = schema_path

        app.state.rbac = self

        if user_dependency is not None:
            app.dependency_overrides[_rbac_user_dependency_placeholder] = user_dependency

        if schema_path:
            self._mount_schema()

    def _mount_schema(self) -> None:
        # Import here to avoid circular import
        from role_authz.introspection import create_schema_router

        self.app.include_router(create_schema_router(), prefix=self.schema_path or "")


def require_permissions(
    *permissions: str,
    mode: CheckMode = CheckMode.ALL,
) -> Callable[..., Coroutine[Any, Any, None]]:
    """Create a dependency that requires the user's role to hold permissions.

    The role is taken from the user via ``RBACAuthz.get_role`` and placed in
    a fresh context before asking the authorizer, so a user without a role
    is denied rather than let through.

    Example:
        @app.delete("/reports/{id}", dependencies=[Depends(require_permissions("report.delete"))])
        async def delete_report(id: int) -> None: ...

    Args:
        *permissions: Permission strings to check.
        mode: Whether all (default) or any of the permissions are required.

    Returns:
        An async dependency function for use with FastAPI's Depends().
    """
    if not permissions:
        raise RuntimeError("require_permissions() needs at least one permission")

    async def authz_dependency(
        request: Request,
        user: Annotated[Any, Depends(_rbac_user_dependency_placeholder)],
    ) -> None:
        rbac: RBACAuthz[Any] | None = getattr(request.app.state, "rbac", None)
        if rbac is None:
            raise RuntimeError("RBACAuthz not configured. Make sure to create an RBACAuthz instance with your app.")

        if user is None:
            raise Forbidden("User not authenticated")

        role = rbac.get_role(user)
        ctx = set_role_in_context(Context(), role) if role is not None else Context()

        if mode is CheckMode.ANY:
            decision = rbac.authorizer.can_any_from_context(ctx, *permissions)
        else:
            decision = rbac.authorizer.can_all_from_context(ctx, *permissions)

        if not decision:
            raise Forbidden()

    return authz_dependency
