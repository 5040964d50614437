from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class PermissionResponse(BaseModel):
    id: str
    key: str
    group: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_system: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RolePermissionAssign(BaseModel):
    permission_id: str


class RolePermissionResponse(BaseModel):
    id: str
    role_id: str
    permission_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RolePermissionToggleResponse(BaseModel):
    present: bool
    role_permission: Optional[RolePermissionResponse] = None
    message: str


class PermissionGroupResponse(BaseModel):
    group: str
    permissions: List[PermissionResponse]
