from fastapi import APIRouter, Depends, Query
from typing import Optional

from keno_admin.config.permissions_config import Permissions
from keno_admin.core.dependencies import get_document_store, require_permission
from keno_admin.database.document_store import DocumentStore
from keno_admin.modules.auth.schemas import AuthorizationPayload
from keno_admin.modules.venues.schemas import (
    VenueCreate, VenueUpdate, VenueResponse, VenueListResponse
)
from keno_admin.modules.venues.service import VenueService

router = APIRouter(prefix="/venues", tags=["venues"])


def get_venue_service(store: DocumentStore = Depends(get_document_store)) -> VenueService:
    return VenueService(store)


@router.get("", response_model=VenueListResponse)
async def list_venues(
    limit: int = Query(25, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.KENO_VENUES_READ)),
    service: VenueService = Depends(get_venue_service)
):
    """List venues, optionally searched by name"""
    return service.list_venues(limit=limit, offset=offset, search=search, is_active=is_active)


@router.post("", response_model=VenueResponse, status_code=201)
async def create_venue(
    venue_data: VenueCreate,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.KENO_VENUES_CREATE)),
    service: VenueService = Depends(get_venue_service)
):
    """Register a new venue"""
    return service.create_venue(venue_data)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(
    venue_id: str,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.KENO_VENUES_READ)),
    service: VenueService = Depends(get_venue_service)
):
    """Get venue by ID"""
    return service.get_venue(venue_id)


@router.patch("/{venue_id}", response_model=VenueResponse)
async def update_venue(
    venue_id: str,
    venue_data: VenueUpdate,
    payload: AuthorizationPayload = Depends(require_permission(Permissions.KENO_VENUES_UPDATE)),
    service: VenueService = Depends(get_venue_service)
):
    """Update venue details, status or assigned vendors"""
    return service.update_venue(venue_id, venue_data)
