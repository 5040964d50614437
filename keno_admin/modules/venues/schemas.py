from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class VenueCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=1, max_length=20)
    is_active: bool = True
    vendor_ids: List[str] = []
    commission_pct: float = Field(default=0, ge=0, le=100)
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    notes: Optional[str] = Field(default=None, max_length=500)


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    is_active: Optional[bool] = None
    vendor_ids: Optional[List[str]] = None
    commission_pct: Optional[float] = Field(default=None, ge=0, le=100)
    address: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    notes: Optional[str] = Field(default=None, max_length=500)


class VenueResponse(BaseModel):
    id: str
    name: str
    code: str
    is_active: bool = True
    vendor_ids: List[str] = []
    commission_pct: float = 0
    address: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VenueListResponse(BaseModel):
    documents: List[VenueResponse]
    total: int
