"""Seller handle API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_slug_service
from api.v1.schemas.slug import SlugAvailabilityDetailResponse, SlugAvailabilityResponse
from core.rate_limit import limiter
from domain.services.slug_service import SlugService

router = APIRouter(prefix="/slugs", tags=["slugs"])


@router.get(
    "/{slug}/availability",
    response_model=SlugAvailabilityDetailResponse,
    summary="Check a seller handle",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def check_slug_availability(
    request: Request,
    slug: str,
    user: CurrentUser,
    service: SlugService = Depends(get_slug_service),
) -> SlugAvailabilityDetailResponse:
    """Check whether the user may adopt a handle. Reserves nothing."""
    result = await service.check_availability(user.id, slug)
    return SlugAvailabilityDetailResponse(data=SlugAvailabilityResponse.model_validate(result))
