"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.listing_repository import IListingRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.slug_repository import ISlugRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    slugs: ISlugRepository
    listings: IListingRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
