"""Profile API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.profile import (
    LocationReport,
    NameChangeResponse,
    NameHistoryResponse,
    PrivateProfileDetailResponse,
    PrivateProfileResponse,
    PrivateProfileUpdate,
    ProfileCreate,
    ProfileDetailResponse,
    ProfileResponse,
    PublicProfileDetailResponse,
    PublicProfileResponse,
    PublicProfileUpdate,
)
from core.rate_limit import limiter
from domain.entities.profile import PrivateProfile, PublicProfile
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


def _profile_response(private: PrivateProfile, public: PublicProfile) -> ProfileDetailResponse:
    return ProfileDetailResponse(
        data=ProfileResponse(
            private=PrivateProfileResponse.model_validate(private),
            public=PublicProfileResponse.model_validate(public),
        )
    )


@router.post(
    "",
    response_model=ProfileDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Complete signup",
    responses={
        201: {"description": "Profiles created and a seller handle reserved"},
        409: {"description": "Profile already exists or no handle could be allocated"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_profile(
    request: Request,
    body: ProfileCreate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Create the private and public profile of the authenticated user."""
    private, public = await service.register(
        user_id=user.id,
        email=user.email,
        first_name=body.first_name,
        last_name=body.last_name,
        date_of_birth=body.date_of_birth,
        district=body.district,
        phone=body.phone,
    )
    return _profile_response(private, public)


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
    responses={404: {"description": "Signup not completed"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's private and public profile."""
    private, public = await service.get_profile(user.id)
    return _profile_response(private, public)


@router.patch(
    "/me/private",
    response_model=PrivateProfileDetailResponse,
    summary="Update private details",
    responses={
        200: {"description": "Private profile updated"},
        400: {"description": "Name change limit reached"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_private_profile(
    request: Request,
    body: PrivateProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> PrivateProfileDetailResponse:
    """Update private details. Name edits are limited per lifetime."""
    private = await service.update_private(
        user.id,
        first_name=body.first_name,
        last_name=body.last_name,
        date_of_birth=body.date_of_birth,
        district=body.district,
        phone=body.phone,
    )
    return PrivateProfileDetailResponse(data=PrivateProfileResponse.model_validate(private))


@router.put(
    "/me/public",
    response_model=PublicProfileDetailResponse,
    summary="Save public profile",
    responses={
        200: {"description": "Public profile saved; listings follow a new handle"},
        400: {"description": "Handle is malformed or not derived from the user's name"},
        409: {"description": "Handle is taken"},
        503: {"description": "Listing rewrite interrupted; retry to resume"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_public_profile(
    request: Request,
    body: PublicProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> PublicProfileDetailResponse:
    """Save the public profile, moving all listings to a changed handle."""
    public = await service.update_public(
        user.id,
        seller_slug=body.seller_slug,
        avatar_url=body.avatar_url,
    )
    return PublicProfileDetailResponse(data=PublicProfileResponse.model_validate(public))


@router.get(
    "/me/name-history",
    response_model=NameHistoryResponse,
    summary="Get name change history",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_name_history(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> NameHistoryResponse:
    """Get every name change of the authenticated user, oldest first."""
    changes, remaining = await service.get_name_history(user.id)
    return NameHistoryResponse(
        data=[NameChangeResponse.model_validate(change) for change in changes],
        meta={"total": len(changes), "remaining_changes": remaining},
    )


@router.post(
    "/me/locations",
    response_model=PrivateProfileDetailResponse,
    summary="Report current location",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def record_location(
    request: Request,
    body: LocationReport,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> PrivateProfileDetailResponse:
    """Record the city the user is currently in."""
    private = await service.record_location(
        user.id,
        city=body.city,
        region=body.region,
        country=body.country,
        lat=body.lat,
        lon=body.lon,
    )
    return PrivateProfileDetailResponse(data=PrivateProfileResponse.model_validate(private))
