"""Pydantic schemas for seller handle API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SlugAvailabilityResponse(BaseModel):
    """Result of checking a handle against the user's name and the namespace."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "slug": "asha-rao",
                "valid": True,
                "aligned": True,
                "available": False,
                "reason": "That username is taken.",
            }
        },
    )

    slug: str
    valid: bool
    aligned: bool
    available: bool
    reason: Optional[str] = None


class SlugAvailabilityDetailResponse(BaseModel):
    """Schema for single availability response."""

    data: SlugAvailabilityResponse
