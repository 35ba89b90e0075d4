"""Profile repository protocol."""

from typing import Protocol

from domain.entities.profile import (
    LocationVisit,
    NameChange,
    PrivateProfile,
    PublicProfile,
)


class IProfileRepository(Protocol):
    """Repository interface for private and public profiles."""

    async def get_private(self, user_id: str) -> PrivateProfile | None:
        """Get a user's private profile."""
        ...

    async def save_private(self, profile: PrivateProfile) -> PrivateProfile:
        """Insert or update a private profile."""
        ...

    async def get_public(self, user_id: str) -> PublicProfile | None:
        """Get a user's public profile."""
        ...

    async def save_public(self, profile: PublicProfile) -> PublicProfile:
        """Insert or update a public profile."""
        ...

    async def add_name_change(self, change: NameChange) -> NameChange:
        """Append an entry to the name change log."""
        ...

    async def get_name_changes(self, user_id: str) -> list[NameChange]:
        """Get a user's name change log, oldest first."""
        ...

    async def get_location_visit(self, user_id: str, location_id: str) -> LocationVisit | None:
        """Get the visit aggregate for one location bucket."""
        ...

    async def save_location_visit(self, visit: LocationVisit) -> LocationVisit:
        """Insert or update a visit aggregate."""
        ...
