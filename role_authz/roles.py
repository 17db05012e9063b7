from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter


class Role(BaseModel):
    """A named bundle of direct permissions and parent roles.

    The name is the key the role is stored under in a catalog. Lists passed
    in are stored as tuples, and the model is frozen, so a loaded role
    cannot be changed behind the authorizer's back.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    permissions: tuple[str, ...] = ()
    inherits: tuple[str, ...] = ()


RoleCatalog = Mapping[str, Role]

_catalog_adapter: TypeAdapter[dict[str, Role]] = TypeAdapter(dict[str, Role])


class RoleSource(ABC):
    """Supplies the role catalog an authorizer is built from.

    Example:
        class SettingsRoleSource(RoleSource):
            def __init__(self, settings: Settings) -> None:
                self.settings = settings

            def load(self) -> RoleCatalog:
                return InMemoryRoleSource(self.settings.roles).load()
    """

    @abstractmethod
    def load(self) -> RoleCatalog | None:
        """Return the mapping of role name to role.

        ``None`` is treated as an empty catalog.
        """
        ...


class InMemoryRoleSource(RoleSource):
    """Role source backed by a catalog held in memory.

    Accepts ``Role`` instances or plain mappings such as
    ``{"permissions": ["content.read"], "inherits": ["viewer"]}``; the
    input is validated and copied, so later changes to it are not seen.

    Raises:
        pydantic.ValidationError: If a role definition is malformed.
    """

    def __init__(self, roles: Mapping[str, Role | Mapping[str, Any]]) -> None:
        self._roles = _catalog_adapter.validate_python(dict(roles))

    def load(self) -> RoleCatalog:
        return dict(self._roles)
