"""Unit tests for ListingService."""

from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.exceptions import (
    EmailNotVerifiedError,
    ListingNotFoundError,
    ListingValidationError,
    SellerNotFoundError,
)
from domain.entities.listing import Listing
from domain.entities.profile import PublicProfile
from domain.services.listing_service import ListingService
from tests.unit.conftest import FakeUnitOfWork

IMAGES = ["https://cdn.example.com/l/1.jpg"]


@pytest.fixture
def slug_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(uow: FakeUnitOfWork, slug_service: AsyncMock) -> ListingService:
    uow.listings.create.side_effect = lambda listing: listing
    return ListingService(
        lambda: uow,  # type: ignore[arg-type, return-value]
        slug_service=slug_service,
        max_images=5,
        page_size=12,
    )


class TestCreate:
    async def test_copies_owner_profile_onto_listing(
        self,
        service: ListingService,
        uow: FakeUnitOfWork,
        slug_service: AsyncMock,
        user_id: str,
    ) -> None:
        slug_service.ensure_slug.return_value = PublicProfile(
            id=user_id,
            display_name="Asha Rao",
            seller_slug="asha-rao",
            avatar_url="https://cdn.example.com/a.jpg",
        )

        listing = await service.create(
            user_id,
            email_verified=True,
            title="  Blue Tang ",
            images=IMAGES,
            price=Decimal("24.50"),
        )

        slug_service.ensure_slug.assert_awaited_once_with(user_id)
        assert listing.owner_slug == "asha-rao"
        assert listing.owner_name == "Asha Rao"
        assert listing.owner_avatar_url == "https://cdn.example.com/a.jpg"
        assert listing.title == "Blue Tang"
        assert listing.price == Decimal("24.50")
        assert uow.committed

    async def test_defaults(
        self, service: ListingService, slug_service: AsyncMock, user_id: str
    ) -> None:
        slug_service.ensure_slug.return_value = PublicProfile(id=user_id, seller_slug="asha-rao")

        listing = await service.create(user_id, True, "Guppy pair", IMAGES, location="  ")

        assert listing.price == Decimal("0")
        assert listing.location == "Unknown"
        assert listing.category == "Other"
        assert listing.owner_name == "Seller"

    async def test_requires_verified_email(
        self, service: ListingService, slug_service: AsyncMock, user_id: str
    ) -> None:
        with pytest.raises(EmailNotVerifiedError):
            await service.create(user_id, False, "Blue Tang", IMAGES)

        slug_service.ensure_slug.assert_not_called()

    async def test_requires_an_image(self, service: ListingService, user_id: str) -> None:
        with pytest.raises(ListingValidationError, match="at least 1 image"):
            await service.create(user_id, True, "Blue Tang", [])

    async def test_caps_images(self, service: ListingService, user_id: str) -> None:
        with pytest.raises(ListingValidationError, match="Max 5 images"):
            await service.create(user_id, True, "Blue Tang", IMAGES * 6)

    async def test_requires_title(self, service: ListingService, user_id: str) -> None:
        with pytest.raises(ListingValidationError, match="Title"):
            await service.create(user_id, True, "   ", IMAGES)


class TestQueries:
    async def test_get_not_found(self, service: ListingService, uow: FakeUnitOfWork) -> None:
        uow.listings.get.return_value = None

        with pytest.raises(ListingNotFoundError):
            await service.get(uuid4())

    async def test_list_for_owner_uses_page_size(
        self, service: ListingService, uow: FakeUnitOfWork, user_id: str
    ) -> None:
        uow.listings.list_recent_by_owner.return_value = []

        await service.list_for_owner(user_id)

        uow.listings.list_recent_by_owner.assert_awaited_once_with(user_id, 12, None, None)

    async def test_seller_page(
        self,
        service: ListingService,
        uow: FakeUnitOfWork,
        slug_service: AsyncMock,
        user_id: str,
    ) -> None:
        slug_service.resolve.return_value = user_id
        profile = PublicProfile(id=user_id, display_name="Asha Rao", seller_slug="asha-rao")
        listings = [Listing(owner_id=user_id, title="Guppy", owner_slug="asha-rao")]
        uow.profiles.get_public.return_value = profile
        uow.listings.list_recent_by_owner.return_value = listings

        seller, page = await service.get_seller_page("asha-rao", limit=6)

        assert seller is profile
        assert page == listings
        uow.listings.list_recent_by_owner.assert_awaited_once_with(user_id, 6, None, None)

    async def test_unknown_seller(self, service: ListingService, slug_service: AsyncMock) -> None:
        slug_service.resolve.return_value = None

        with pytest.raises(SellerNotFoundError) as exc_info:
            await service.get_seller_page("nobody-here")

        assert exc_info.value.message == "The username /nobody-here does not exist"
