"""Listing service layer."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    EmailNotVerifiedError,
    ListingNotFoundError,
    ListingValidationError,
    SellerNotFoundError,
)
from domain.entities.listing import Listing
from domain.entities.profile import PublicProfile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.slug_service import SlugService

logger = structlog.get_logger()


class ListingService:
    """Service layer for Listing business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        slug_service: SlugService,
        max_images: int = settings.max_listing_images,
        page_size: int = settings.listings_page_size,
    ) -> None:
        self._uow_factory = uow_factory
        self._slugs = slug_service
        self._max_images = max_images
        self._page_size = page_size

    async def create(
        self,
        owner_id: str,
        email_verified: bool,
        title: str,
        images: list[str],
        price: Decimal | None = None,
        location: str | None = None,
        category: str | None = None,
        description: str | None = None,
    ) -> Listing:
        """Create a listing, allocating the seller's handle on first post."""
        if not email_verified:
            raise EmailNotVerifiedError()
        if not images:
            raise ListingValidationError("Please upload at least 1 image before submitting.")
        if len(images) > self._max_images:
            raise ListingValidationError(f"Max {self._max_images} images are allowed.")
        title = title.strip()
        if not title:
            raise ListingValidationError("Title is required.")

        profile = await self._slugs.ensure_slug(owner_id)

        listing = Listing(
            owner_id=owner_id,
            owner_slug=profile.seller_slug or "",
            owner_name=profile.display_name or "Seller",
            owner_avatar_url=profile.avatar_url,
            title=title,
            price=price if price is not None else Decimal("0"),
            location=(location or "").strip() or "Unknown",
            category=category or "Other",
            description=(description or "").strip(),
            images=list(images),
        )

        async with self._uow_factory() as uow:
            created = await uow.listings.create(listing)
            await uow.commit()

        logger.info("listing_created", listing_id=str(created.id), owner_slug=created.owner_slug)
        return created

    async def get(self, listing_id: UUID) -> Listing:
        """Get a listing by ID."""
        async with self._uow_factory() as uow:
            listing = await uow.listings.get(listing_id)
            if not listing:
                raise ListingNotFoundError(str(listing_id))
            return listing

    async def list_for_owner(
        self,
        owner_id: str,
        limit: int | None = None,
        before: datetime | None = None,
        before_id: UUID | None = None,
    ) -> list[Listing]:
        """Get an owner's listings, newest first."""
        async with self._uow_factory() as uow:
            return await uow.listings.list_recent_by_owner(  # type: ignore[no-any-return]
                owner_id, limit or self._page_size, before, before_id
            )

    async def get_seller_page(
        self,
        slug: str,
        limit: int | None = None,
        before: datetime | None = None,
        before_id: UUID | None = None,
    ) -> tuple[PublicProfile, list[Listing]]:
        """Resolve a handle to its seller and load their latest listings."""
        owner_id = await self._slugs.resolve(slug)
        if not owner_id:
            raise SellerNotFoundError(slug)

        async with self._uow_factory() as uow:
            profile = await uow.profiles.get_public(owner_id)
            listings = await uow.listings.list_recent_by_owner(
                owner_id, limit or self._page_size, before, before_id
            )

        if not profile:
            profile = PublicProfile(id=owner_id, display_name="Seller", seller_slug=slug)
        return profile, listings
