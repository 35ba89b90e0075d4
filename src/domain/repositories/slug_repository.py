"""Slug reservation repository protocol."""

from typing import Protocol

from domain.entities.slug import SlugReservation


class ISlugRepository(Protocol):
    """Repository interface for the global handle namespace."""

    async def get(self, slug: str) -> SlugReservation | None:
        """Get the reservation for a handle."""
        ...

    async def add(self, reservation: SlugReservation) -> SlugReservation:
        """Insert a reservation; fails if the handle already exists."""
        ...

    async def delete(self, slug: str, owner_id: str) -> bool:
        """Delete a reservation if it is still held by owner_id."""
        ...
