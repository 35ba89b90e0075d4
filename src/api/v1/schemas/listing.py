"""Pydantic schemas for Listing API."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from api.v1.schemas.profile import PublicProfileResponse


class ListingCreate(BaseModel):
    """Schema for creating a Listing.

    Image count rules are enforced by the service so that they surface as
    listing errors rather than request validation errors.
    """

    title: str = Field(..., min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    location: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=80)
    description: Optional[str] = Field(None, max_length=5000)
    images: List[str] = Field(default_factory=list)


class ListingResponse(BaseModel):
    """Schema for Listing response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "owner_id": "Jd8kPq2mWfY1",
                "owner_slug": "asha-rao",
                "owner_name": "Asha Rao",
                "owner_avatar_url": None,
                "title": "Blue Tang",
                "price": 24.5,
                "location": "Pune",
                "category": "Fish",
                "description": "Healthy, eating pellets.",
                "images": ["https://cdn.example.com/listings/1.jpg"],
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    owner_id: str
    owner_slug: str
    owner_name: str
    owner_avatar_url: Optional[str]
    title: str
    price: float
    location: str
    category: str
    description: str
    images: List[str]
    created_at: datetime


class ListingDetailResponse(BaseModel):
    """Schema for single Listing response."""

    data: ListingResponse


class ListingListResponse(BaseModel):
    """Schema for a page of Listings."""

    data: List[ListingResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class SellerPage(BaseModel):
    """A seller's public profile with their latest listings."""

    seller: PublicProfileResponse
    listings: List[ListingResponse]


class SellerPageResponse(BaseModel):
    """Schema for the public seller page."""

    data: SellerPage
    meta: dict[str, Any] = Field(default_factory=dict)
