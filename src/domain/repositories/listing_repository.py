"""Listing repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.listing import Listing


class IListingRepository(Protocol):
    """Repository interface for Listing entities."""

    async def get(self, id: UUID) -> Listing | None:
        """Get a listing by ID."""
        ...

    async def create(self, listing: Listing) -> Listing:
        """Create a new listing."""
        ...

    async def get_page_by_owner(
        self, owner_id: str, limit: int, after_id: UUID | None = None
    ) -> list[Listing]:
        """Get a page of an owner's listings ordered by ID."""
        ...

    async def set_owner_slug(self, ids: list[UUID], owner_slug: str) -> int:
        """Rewrite the denormalized owner handle on the given listings."""
        ...

    async def list_recent_by_owner(
        self,
        owner_id: str,
        limit: int,
        before: datetime | None = None,
        before_id: UUID | None = None,
    ) -> list[Listing]:
        """Get an owner's listings, newest first."""
        ...
