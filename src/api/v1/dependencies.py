"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.listing_service import ListingService
from domain.services.profile_service import ProfileService
from domain.services.slug_service import SlugService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_slug_service() -> SlugService:
    """Get Slug service instance."""
    return SlugService(get_uow_factory())


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory(), slug_service=get_slug_service())


@lru_cache
def get_listing_service() -> ListingService:
    """Get Listing service instance."""
    return ListingService(get_uow_factory(), slug_service=get_slug_service())
