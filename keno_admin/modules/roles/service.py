from fastapi import HTTPException
from typing import Any, Dict, List, Optional
import logging

from keno_admin.config import Settings, settings as default_settings
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.database.document_store import DocumentStore
from keno_admin.modules.roles.cache import RoleCache
from keno_admin.modules.roles.schemas import (
    PermissionResponse, RoleResponse, RolePermissionResponse,
    RolePermissionToggleResponse, PermissionGroupResponse
)

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, store: DocumentStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or default_settings

    def list_roles(self, cache: RoleCache, force_refresh: bool = False) -> List[RoleResponse]:
        """List roles ordered by name, served from the role cache"""
        try:
            return cache.get(self._load_roles, force_refresh=force_refresh)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _load_roles(self) -> List[RoleResponse]:
        page = self.store.list(
            self.settings.roles_collection_id,
            order_by="name",
            limit=self.settings.authorization_batch_limit
        )
        return [RoleResponse(**role) for role in page.documents]

    def get_role(self, role_id: str) -> RoleResponse:
        return RoleResponse(**self._get_role_document(role_id))

    def _get_role_document(self, role_id: str) -> Dict[str, Any]:
        try:
            role = self.store.get(self.settings.roles_collection_id, role_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not role:
            raise HTTPException(status_code=404, detail="Role not found")
        return role

    def _get_mutable_role(self, role_id: str) -> Dict[str, Any]:
        role = self._get_role_document(role_id)
        if role.get("is_system"):
            logger.warning(f"Rejected permission change on system role {role_id}")
            raise AuthorizationError(
                ErrorCode.SYSTEM_ROLE_IMMUTABLE,
                f"Role {role.get('name', role_id)} is a system role and cannot be modified"
            )
        return role

    def list_permissions(self) -> List[PermissionResponse]:
        """List permissions ordered by group"""
        try:
            page = self.store.list(
                self.settings.permissions_collection_id,
                order_by="group",
                limit=self.settings.authorization_batch_limit
            )
            return [PermissionResponse(**permission) for permission in page.documents]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_permission_groups(self) -> List[PermissionGroupResponse]:
        grouped: Dict[str, List[PermissionResponse]] = {}
        for permission in self.list_permissions():
            grouped.setdefault(permission.group, []).append(permission)
        return [PermissionGroupResponse(group=group, permissions=items) for group, items in grouped.items()]

    def get_role_permissions(self, role_id: str) -> List[RolePermissionResponse]:
        """Grants of a role (bounded batch)"""
        self._get_role_document(role_id)
        try:
            page = self.store.list(
                self.settings.role_permissions_collection_id,
                filters={"role_id": role_id},
                limit=self.settings.authorization_batch_limit
            )
            return [RolePermissionResponse(**row) for row in page.documents]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _find_grant(self, role_id: str, permission_id: str) -> Optional[Dict[str, Any]]:
        return self.store.find_one(
            self.settings.role_permissions_collection_id,
            role_id=role_id,
            permission_id=permission_id
        )

    def add_role_permission(self, role_id: str, permission_id: str) -> RolePermissionResponse:
        """Grant a permission to a role; an existing grant is returned as is"""
        self._get_mutable_role(role_id)
        try:
            if not self.store.get(self.settings.permissions_collection_id, permission_id):
                raise HTTPException(status_code=404, detail="Permission not found")

            existing = self._find_grant(role_id, permission_id)
            if existing:
                return RolePermissionResponse(**existing)

            row = self.store.create(self.settings.role_permissions_collection_id, {
                "role_id": role_id,
                "permission_id": permission_id
            })
            logger.info(f"Granted {permission_id} to role {role_id}")
            return RolePermissionResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_role_permission(self, role_id: str, role_permission_id: str) -> bool:
        """Delete a grant by its own id"""
        self._get_mutable_role(role_id)
        try:
            row = self.store.get(self.settings.role_permissions_collection_id, role_permission_id)
            if not row or row.get("role_id") != role_id:
                raise HTTPException(status_code=404, detail="Role permission not found")
            deleted = self.store.delete(self.settings.role_permissions_collection_id, role_permission_id)
            logger.info(f"Revoked {row.get('permission_id')} from role {role_id}")
            return deleted
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def toggle_role_permission(self, role_id: str, permission_id: str) -> RolePermissionToggleResponse:
        """Remove the grant when present, add it otherwise"""
        self._get_mutable_role(role_id)
        try:
            existing = self._find_grant(role_id, permission_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if existing:
            self.remove_role_permission(role_id, existing["id"])
            return RolePermissionToggleResponse(present=False, message="Permission removed")

        row = self.add_role_permission(role_id, permission_id)
        return RolePermissionToggleResponse(present=True, role_permission=row, message="Permission added")
