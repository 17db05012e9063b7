"""Schema introspection of a resolved role catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

if TYPE_CHECKING:
    from role_authz.core import Authorizer
    from role_authz.dependencies import RBACAuthz


class RoleSchema(BaseModel):
    """Schema for a role and its resolved permissions."""

    name: str
    rank: int
    permissions: list[str]


class PermissionSchema(BaseModel):
    """Schema for a permission with the roles that hold it."""

    name: str
    granted_by: list[str]


class CatalogSchema(BaseModel):
    """Complete schema of a resolved role catalog."""

    roles: list[RoleSchema]
    permissions: list[PermissionSchema]


def _build_roles_schema(authorizer: Authorizer) -> list[RoleSchema]:
    return [
        RoleSchema(name=name, rank=rank, permissions=list(authorizer.permissions_for(name) or ()))
        for rank, name in enumerate(authorizer.get_roles())
    ]


def _build_permissions_schema(roles: list[RoleSchema]) -> list[PermissionSchema]:
    granted_by: dict[str, list[str]] = {}
    for role in roles:
        for permission in role.permissions:
            granted_by.setdefault(permission, []).append(role.name)

    return [PermissionSchema(name=name, granted_by=granted_by[name]) for name in sorted(granted_by)]


def build_catalog_schema(authorizer: Authorizer) -> CatalogSchema:
    """Build the schema of ranked roles and the permissions they hold."""
    roles = _build_roles_schema(authorizer)
    return CatalogSchema(roles=roles, permissions=_build_permissions_schema(roles))


def create_schema_router() -> APIRouter:
    """Create a router serving the catalog schema as JSON at ``/schema``."""
    router = APIRouter(tags=["rbac"])

    @router.get(
        "/schema",
        response_class=JSONResponse,
        summary="RBAC Schema",
        description="JSON schema of all roles and their resolved permissions.",
        include_in_schema=False,
    )
    async def get_schema(request: Request) -> JSONResponse:
        rbac: RBACAuthz[Any] = request.app.state.rbac
        schema = build_catalog_schema(rbac.authorizer)
        return JSONResponse(content=schema.model_dump())

    return router
