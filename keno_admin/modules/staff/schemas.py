from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime

from keno_admin.modules.auth.schemas import EmailAddress


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value: Any) -> "StaffStatus":
        """Case-insensitive lookup; "banned" is accepted as an alias of suspended."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "banned":
            return cls.SUSPENDED
        return cls(normalized)

    @property
    def enables_login(self) -> bool:
        return self is StaffStatus.ACTIVE


class StaffCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    email: EmailAddress
    full_name: str = Field(min_length=1, max_length=150)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: str
    collection_id: Optional[str] = None
    database_id: Optional[str] = None


class StaffUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    user_id: str
    document_id: str
    database_id: Optional[str] = None
    collection_id: Optional[str] = None
    status: Optional[StaffStatus] = None
    full_name: Optional[str] = Field(default=None, max_length=150)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        if value is None or value == "":
            return None
        return StaffStatus.parse(value)


class StaffResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    status: str
    role: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StaffListResponse(BaseModel):
    documents: List[StaffResponse]
    total: int


class StaffCreateResponse(BaseModel):
    success: bool = True
    user: Dict[str, Any]
    document: StaffResponse


class StaffUpdateResponse(BaseModel):
    success: bool = True
    document: StaffResponse
