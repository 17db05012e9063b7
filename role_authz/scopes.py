"""Permission grammar and scope-set operations.

A scope is a plain string such as ``read`` or ``admin.users``. Three
conventions are understood:

- the separator splits a scope list string into scopes (``"read write"``),
- the delimiter separates hierarchy levels (``admin.users``),
- the wildcard, used alone, matches everything, and as a suffix
  (``admin.*``) matches everything beneath a namespace.

All functions take an explicit ``config`` so that callers using different
grammars never share mutable state.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ScopeConfig:
    """Separator, delimiter and wildcard marker used by the scope grammar."""

    separator: str = " "
    delimiter: str = "."
    wildcard: str = "*"

    def __post_init__(self) -> None:
        for field in ("separator", "delimiter", "wildcard"):
            if not getattr(self, field):
                raise ValueError(f"Scope {field} must be a non-empty string")


DEFAULT_CONFIG = ScopeConfig()

# Above these sizes validate_scopes splits exact entries into a set first.
_VALIDATE_FAST_PATH_ALLOWED = 10
_VALIDATE_FAST_PATH_CANDIDATES = 5


def parse_scopes(value: str, *, config: ScopeConfig = DEFAULT_CONFIG) -> list[str]:
    """Split a scope list string into scopes.

    Entries are trimmed and empty entries dropped, so ``" read  write "``
    gives ``["read", "write"]``. Blank input gives an empty list.
    """
    value = value.strip()
    if not value:
        return []
    return [part.strip() for part in value.split(config.separator) if part.strip()]


def join_scopes(scopes: Iterable[str], *, config: ScopeConfig = DEFAULT_CONFIG) -> str:
    """Join scopes back into a scope list string."""
    return config.separator.join(scopes)


def scope_matches(scope: str, pattern: str, *, config: ScopeConfig = DEFAULT_CONFIG) -> bool:
    """Check if a single scope is granted by a pattern.

    - ``read`` matches ``read``
    - ``*`` matches any scope
    - ``admin.*`` matches ``admin.users`` and ``admin.users.delete``,
      but neither ``admin`` nor ``adminx.read``
    """
    if scope == pattern or pattern == config.wildcard:
        return True

    if pattern.endswith(config.wildcard):
        prefix = pattern[: -len(config.wildcard)]
        if prefix.endswith(config.delimiter):
            prefix = prefix[: -len(config.delimiter)]
        return scope.startswith(prefix + config.delimiter)

    return False


def has_scope(scopes: Iterable[str], scope: str, *, config: ScopeConfig = DEFAULT_CONFIG) -> bool:
    """Check if any pattern in ``scopes`` grants ``scope``."""
    return any(scope_matches(scope, pattern, config=config) for pattern in scopes)


def _has_wildcard(scopes: Sequence[str], config: ScopeConfig) -> bool:
    return config.wildcard in scopes


def has_all_scopes(
    scopes: Sequence[str],
    required: Sequence[str],
    *,
    config: ScopeConfig = DEFAULT_CONFIG,
) -> bool:
    """Check if every entry of ``required`` is granted by ``scopes``.

    An empty ``required`` is always satisfied. A global wildcard in
    ``scopes`` satisfies anything.
    """
    if not required:
        return True
    if not scopes:
        return False
    if _has_wildcard(scopes, config):
        return True
    return all(has_scope(scopes, req, config=config) for req in required)


def has_any_scopes(
    scopes: Sequence[str],
    required: Sequence[str],
    *,
    config: ScopeConfig = DEFAULT_CONFIG,
) -> bool:
    """Check if at least one entry of ``required`` is granted by ``scopes``.

    An empty ``required`` is always satisfied. A global wildcard in
    ``scopes`` satisfies anything.
    """
    if not required:
        return True
    if not scopes:
        return False
    if _has_wildcard(scopes, config):
        return True
    return any(has_scope(scopes, req, config=config) for req in required)


def validate_scopes(
    scopes: Sequence[str],
    allowed: Sequence[str],
    *,
    config: ScopeConfig = DEFAULT_CONFIG,
) -> bool:
    """Check that every scope is permitted by the ``allowed`` patterns.

    Empty ``scopes`` are valid; an empty ``allowed`` rejects any non-empty
    ``scopes``.
    """
    if not scopes:
        return True
    if not allowed:
        return False
    if _has_wildcard(allowed, config):
        return True

    if len(allowed) > _VALIDATE_FAST_PATH_ALLOWED and len(scopes) > _VALIDATE_FAST_PATH_CANDIDATES:
        return _validate_scopes_with_set(scopes, allowed, config)

    return all(has_scope(allowed, scope, config=config) for scope in scopes)


def _validate_scopes_with_set(scopes: Sequence[str], allowed: Sequence[str], config: ScopeConfig) -> bool:
    exact = {pattern for pattern in allowed if config.wildcard not in pattern}
    patterns = [pattern for pattern in allowed if config.wildcard in pattern]

    for scope in scopes:
        if scope in exact:
            continue
        if not has_scope(patterns, scope, config=config):
            return False
    return True


def normalize_scopes(scopes: Iterable[str]) -> list[str]:
    """Remove duplicates and sort lexicographically."""
    return sorted(set(scopes))


def equal_scopes(first: Sequence[str], second: Sequence[str]) -> bool:
    """Check if both collections hold the same scopes, in any order."""
    if len(first) != len(second):
        return False
    return Counter(first) == Counter(second)
