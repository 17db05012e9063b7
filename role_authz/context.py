"""Carry the acting role in a ``contextvars.Context``.

The role is stored under a module-private ``ContextVar``. A context is a
mapping keyed by ``ContextVar`` objects, so no other entry can be mistaken
for the role.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import Context, ContextVar, copy_context

_role: ContextVar[str] = ContextVar("role_authz.role")


def set_role_in_context(ctx: Context | None, role: str) -> Context:
    """Return a copy of ``ctx`` with ``role`` set as the acting role.

    ``ctx`` itself is left unchanged. With ``None`` the current context is
    copied.
    """
    derived = ctx.copy() if ctx is not None else copy_context()
    derived.run(_role.set, role)
    return derived


def get_role_from_context(ctx: Context | None = None) -> str | None:
    """Return the acting role in ``ctx``, or in the current context.

    Returns ``None`` when no role was set. An empty role name is returned
    as is.
    """
    if ctx is None:
        return _role.get(None)
    return ctx.get(_role)


@contextmanager
def bound_role(role: str) -> Iterator[None]:
    """Set the acting role in the current context for the ``with`` block.

    Example:
        with bound_role("editor"):
            authorizer.can_from_context(None, "content.write")
    """
    token = _role.set(role)
    try:
        yield
    finally:
        _role.reset(token)
