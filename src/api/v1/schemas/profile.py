"""Pydantic schemas for Profile API."""

from datetime import date, datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for completing signup."""

    first_name: str = Field(..., min_length=1, max_length=80)
    last_name: str = Field(..., min_length=1, max_length=80)
    date_of_birth: Optional[date] = None
    district: str = Field("", max_length=100)
    phone: str = Field("", max_length=32)


class PrivateProfileUpdate(BaseModel):
    """Schema for editing private details (all fields optional)."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=80)
    last_name: Optional[str] = Field(None, min_length=1, max_length=80)
    date_of_birth: Optional[date] = None
    district: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=32)


class PublicProfileUpdate(BaseModel):
    """Schema for saving the public profile.

    An omitted or empty ``seller_slug`` keeps the current handle (or
    allocates one when the user has none).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "seller_slug": "asha-rao-1503",
                "avatar_url": "https://cdn.example.com/avatars/asha.jpg",
            }
        },
    )

    seller_slug: Optional[str] = Field(None, max_length=64)
    avatar_url: Optional[str] = Field(None, max_length=500)


class LocationReport(BaseModel):
    """Schema for reporting the user's current location."""

    city: str = Field(..., min_length=1, max_length=100)
    region: str = Field("", max_length=100)
    country: str = Field("", max_length=100)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lon: Optional[float] = Field(None, ge=-180, le=180)


class PrivateProfileResponse(BaseModel):
    """Schema for the owner-only profile."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    display_name: str
    date_of_birth: Optional[date]
    district: str
    phone: str
    phone_e164: str
    name_change_count: int
    recent_locations: List[str]
    last_location_id: Optional[str]
    created_at: datetime
    updated_at: datetime


class PublicProfileResponse(BaseModel):
    """Schema for the public seller profile."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "Jd8kPq2mWfY1",
                "display_name": "Asha Rao",
                "avatar_url": None,
                "seller_slug": "asha-rao",
                "location_city": "Pune",
                "location_region": "Maharashtra",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: str
    display_name: str
    avatar_url: Optional[str]
    seller_slug: Optional[str]
    location_city: Optional[str]
    location_region: Optional[str]
    created_at: datetime
    updated_at: datetime


class ProfileResponse(BaseModel):
    """Both halves of a user's profile."""

    private: PrivateProfileResponse
    public: PublicProfileResponse


class ProfileDetailResponse(BaseModel):
    """Schema for the combined profile response."""

    data: ProfileResponse


class PrivateProfileDetailResponse(BaseModel):
    """Schema for single private profile response."""

    data: PrivateProfileResponse


class PublicProfileDetailResponse(BaseModel):
    """Schema for single public profile response."""

    data: PublicProfileResponse


class NameChangeResponse(BaseModel):
    """Schema for one name change log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    prev_first: str
    prev_last: str
    new_first: str
    new_last: str
    changed_at: datetime


class NameHistoryResponse(BaseModel):
    """Schema for the name change log."""

    data: List[NameChangeResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
