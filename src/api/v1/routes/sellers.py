"""Public seller page routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from api.v1.dependencies import get_listing_service
from api.v1.routes.listings import page_meta
from api.v1.schemas.listing import ListingResponse, SellerPage, SellerPageResponse
from api.v1.schemas.profile import PublicProfileResponse
from core.config import settings
from core.rate_limit import limiter
from domain.services.listing_service import ListingService

router = APIRouter(prefix="/sellers", tags=["sellers"])


@router.get(
    "/{slug}",
    response_model=SellerPageResponse,
    summary="Public seller page",
    responses={404: {"description": "No seller holds this handle"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_seller_page(
    request: Request,
    slug: str,
    limit: int = Query(settings.listings_page_size, ge=1, le=100),
    before: Optional[datetime] = Query(None, description="Cursor from meta.next_before"),
    before_id: Optional[UUID] = Query(None, description="Cursor from meta.next_before_id"),
    service: ListingService = Depends(get_listing_service),
) -> SellerPageResponse:
    """Resolve a handle to its seller and show their latest listings."""
    profile, listings = await service.get_seller_page(
        slug, limit=limit, before=before, before_id=before_id
    )
    return SellerPageResponse(
        data=SellerPage(
            seller=PublicProfileResponse.model_validate(profile),
            listings=[ListingResponse.model_validate(listing) for listing in listings],
        ),
        meta=page_meta(listings, limit),
    )
