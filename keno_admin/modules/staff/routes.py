from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from typing import Optional

from keno_admin.config.permissions_config import Permissions
from keno_admin.core.dependencies import (
    get_document_store, get_identity_client, get_permission_gate, require_permission
)
from keno_admin.core.errors import AuthorizationError, ErrorCode
from keno_admin.core.permission_gate import PermissionGate
from keno_admin.database.document_store import DocumentStore
from keno_admin.database.identity_client import IdentityClient
from keno_admin.modules.auth.schemas import AuthorizationPayload
from keno_admin.modules.staff.schemas import (
    StaffStatus, StaffCreate, StaffUpdate, StaffResponse, StaffListResponse,
    StaffCreateResponse, StaffUpdateResponse
)
from keno_admin.modules.staff.service import StaffService

router = APIRouter(prefix="/staff", tags=["staff"])


def get_staff_service(
    store: DocumentStore = Depends(get_document_store),
    identity_client: IdentityClient = Depends(get_identity_client)
) -> StaffService:
    return StaffService(store, identity_client)


def _error_response(exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": exc.status_code}
    )


@router.get("", response_model=StaffListResponse)
async def list_staff(
    limit: int = Query(25, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    status: Optional[StaffStatus] = None,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.STAFF_READ)),
    service: StaffService = Depends(get_staff_service)
):
    """List staff members, optionally searched by full name"""
    return service.list_staff(limit=limit, offset=offset, search=search, status=status)


@router.post("/create", response_model=StaffCreateResponse)
async def create_staff(
    staff_data: StaffCreate,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.STAFF_INVITE)),
    service: StaffService = Depends(get_staff_service)
):
    """Create the staff member's identity, staff record and team membership"""
    try:
        return service.create_staff(staff_data)
    except HTTPException as e:
        return _error_response(e)


@router.patch("/update", response_model=StaffUpdateResponse)
async def update_staff(
    staff_data: StaffUpdate,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.STAFF_UPDATE)),
    gate: PermissionGate = Depends(get_permission_gate),
    service: StaffService = Depends(get_staff_service)
):
    """Update a staff member's profile, status or role"""
    if staff_data.role and not gate.has_permission(Permissions.STAFF_ASSIGN_ROLES):
        raise AuthorizationError(
            ErrorCode.PERMISSION_DENIED,
            f"Insufficient permissions. Required: {Permissions.STAFF_ASSIGN_ROLES}"
        )
    try:
        return service.update_staff(staff_data)
    except HTTPException as e:
        return _error_response(e)


@router.get("/{document_id}", response_model=StaffResponse)
async def get_staff(
    document_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.STAFF_READ)),
    service: StaffService = Depends(get_staff_service)
):
    """Get a staff member by document ID"""
    return service.get_staff(document_id)
