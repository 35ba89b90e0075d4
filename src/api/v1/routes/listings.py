"""Listing API routes."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_listing_service
from api.v1.schemas.listing import (
    ListingCreate,
    ListingDetailResponse,
    ListingListResponse,
    ListingResponse,
)
from core.config import settings
from core.rate_limit import limiter
from domain.entities.listing import Listing
from domain.services.listing_service import ListingService

router = APIRouter(prefix="/listings", tags=["listings"])


def page_meta(listings: list[Listing], limit: int) -> dict[str, Any]:
    """Pagination metadata.

    ``next_before`` and ``next_before_id`` together are the cursor of the next
    page; both are None once the last page has been served.
    """
    meta: dict[str, Any] = {
        "total": len(listings),
        "limit": limit,
        "next_before": None,
        "next_before_id": None,
    }
    if listings and len(listings) == limit:
        meta["next_before"] = listings[-1].created_at.isoformat()
        meta["next_before_id"] = str(listings[-1].id)
    return meta


@router.post(
    "",
    response_model=ListingDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a listing",
    responses={
        201: {"description": "Listing created"},
        400: {"description": "Missing title or invalid image count"},
        403: {"description": "Email address not verified"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_listing(
    request: Request,
    body: ListingCreate,
    user: CurrentUser,
    service: ListingService = Depends(get_listing_service),
) -> ListingDetailResponse:
    """Post a listing. The seller's handle is allocated on first post."""
    listing = await service.create(
        owner_id=user.id,
        email_verified=user.email_verified,
        title=body.title,
        images=body.images,
        price=body.price,
        location=body.location,
        category=body.category,
        description=body.description,
    )
    return ListingDetailResponse(data=ListingResponse.model_validate(listing))


@router.get(
    "/mine",
    response_model=ListingListResponse,
    summary="List own listings",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_listings(
    request: Request,
    user: CurrentUser,
    limit: int = Query(settings.listings_page_size, ge=1, le=100),
    before: Optional[datetime] = Query(None, description="Cursor from meta.next_before"),
    before_id: Optional[UUID] = Query(None, description="Cursor from meta.next_before_id"),
    service: ListingService = Depends(get_listing_service),
) -> ListingListResponse:
    """Get the authenticated user's listings, newest first."""
    listings = await service.list_for_owner(
        user.id, limit=limit, before=before, before_id=before_id
    )
    return ListingListResponse(
        data=[ListingResponse.model_validate(listing) for listing in listings],
        meta=page_meta(listings, limit),
    )


@router.get(
    "/{listing_id}",
    response_model=ListingDetailResponse,
    summary="Get a listing",
    responses={404: {"description": "Listing not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_listing(
    request: Request,
    listing_id: UUID,
    service: ListingService = Depends(get_listing_service),
) -> ListingDetailResponse:
    """Get a single listing. Public."""
    listing = await service.get(listing_id)
    return ListingDetailResponse(data=ListingResponse.model_validate(listing))
