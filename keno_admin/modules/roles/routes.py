from fastapi import APIRouter, Depends, Request
from typing import List

from keno_admin.config.permissions_config import Permissions
from keno_admin.core.dependencies import get_document_store, require_permission
from keno_admin.database.document_store import DocumentStore
from keno_admin.modules.auth.schemas import AuthorizationPayload
from keno_admin.modules.roles.cache import RoleCache
from keno_admin.modules.roles.schemas import (
    PermissionResponse, RoleResponse, RolePermissionAssign, RolePermissionResponse,
    RolePermissionToggleResponse, PermissionGroupResponse
)
from keno_admin.modules.roles.service import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])


def get_role_service(store: DocumentStore = Depends(get_document_store)) -> RoleService:
    return RoleService(store)


def get_role_cache(request: Request) -> RoleCache:
    """Application-owned role cache, created with the app"""
    return request.app.state.role_cache


@router.get("", response_model=List[RoleResponse])
async def list_roles(
    refresh: bool = False,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.CONFIG_READ)),
    service: RoleService = Depends(get_role_service),
    cache: RoleCache = Depends(get_role_cache)
):
    """List roles ordered by name; refresh=true bypasses the cache"""
    return service.list_roles(cache, force_refresh=refresh)


@router.get("/permissions", response_model=List[PermissionResponse])
async def list_permissions(
    payload: AuthorizationPayload = Depends(require_permission(Permissions.CONFIG_READ)),
    service: RoleService = Depends(get_role_service)
):
    """List all permissions ordered by group"""
    return service.list_permissions()


@router.get("/permissions/grouped", response_model=List[PermissionGroupResponse])
async def list_permission_groups(
    payload: AuthorizationPayload = Depends(require_permission(Permissions.CONFIG_READ)),
    service: RoleService = Depends(get_role_service)
):
    """List permissions bucketed by group"""
    return service.list_permission_groups()


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.CONFIG_READ)),
    service: RoleService = Depends(get_role_service)
):
    """Get role by ID"""
    return service.get_role(role_id)


@router.get("/{role_id}/permissions", response_model=List[RolePermissionResponse])
async def get_role_permissions(
    role_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.CONFIG_READ)),
    service: RoleService = Depends(get_role_service)
):
    """Get the permission grants of a role"""
    return service.get_role_permissions(role_id)


@router.post("/{role_id}/permissions", response_model=RolePermissionResponse, status_code=201)
async def add_role_permission(
    role_id: str,
    permission_assign: RolePermissionAssign,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.ROLES_MANAGE)),
    service: RoleService = Depends(get_role_service)
):
    """Grant a permission to a non-system role"""
    return service.add_role_permission(role_id, permission_assign.permission_id)


@router.delete("/{role_id}/permissions/{role_permission_id}", status_code=204)
async def remove_role_permission(
    role_id: str,
    role_permission_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.ROLES_MANAGE)),
    service: RoleService = Depends(get_role_service)
):
    """Revoke a grant from a non-system role"""
    service.remove_role_permission(role_id, role_permission_id)
    return None


@router.post("/{role_id}/permissions/{permission_id}/toggle", response_model=RolePermissionToggleResponse)
async def toggle_role_permission(
    role_id: str,
    permission_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.ROLES_MANAGE)),
    service: RoleService = Depends(get_role_service)
):
    """Add the grant if absent, remove it if present"""
    return service.toggle_role_permission(role_id, permission_id)
