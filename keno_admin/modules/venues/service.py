from datetime import datetime, timezone
from fastapi import HTTPException
from typing import Optional

from keno_admin.config import Settings, settings as default_settings
from keno_admin.database.document_store import DocumentStore
from keno_admin.modules.venues.schemas import (
    VenueCreate, VenueUpdate, VenueResponse, VenueListResponse
)


class VenueService:
    def __init__(self, store: DocumentStore, settings: Optional[Settings] = None):
        self.store = store
        self.collection_id = (settings or default_settings).venues_collection_id

    def _ensure_code_available(self, code: str, venue_id: Optional[str] = None) -> None:
        existing = self.store.find_one(self.collection_id, code=code)
        if existing and existing["id"] != venue_id:
            raise HTTPException(status_code=409, detail=f"Venue code {code} is already in use")

    def list_venues(
        self,
        limit: int = 25,
        offset: int = 0,
        search: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> VenueListResponse:
        """List venues ordered by name"""
        try:
            page = self.store.list(
                self.collection_id,
                filters={"is_active": is_active} if is_active is not None else None,
                search=("name", search) if search else None,
                order_by="name",
                limit=limit,
                offset=offset,
                with_count=True
            )
            return VenueListResponse(
                documents=[VenueResponse(**venue) for venue in page.documents],
                total=page.total
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_venue(self, venue_id: str) -> VenueResponse:
        try:
            venue = self.store.get(self.collection_id, venue_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not venue:
            raise HTTPException(status_code=404, detail="Venue not found")
        return VenueResponse(**venue)

    def create_venue(self, venue_data: VenueCreate) -> VenueResponse:
        try:
            self._ensure_code_available(venue_data.code)
            venue = self.store.create(self.collection_id, venue_data.model_dump())
            return VenueResponse(**venue)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_venue(self, venue_id: str, venue_data: VenueUpdate) -> VenueResponse:
        try:
            update_data = venue_data.model_dump(exclude_unset=True)
            if update_data.get("code"):
                self._ensure_code_available(update_data["code"], venue_id)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            venue = self.store.update(self.collection_id, venue_id, update_data)
            if not venue:
                raise HTTPException(status_code=404, detail="Venue not found")
            return VenueResponse(**venue)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
