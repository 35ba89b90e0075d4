"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from domain.entities.slug import SlugReservation


class InMemorySlugRepository:
    """Slug namespace backed by a dict; duplicate inserts fail like a unique key."""

    def __init__(self) -> None:
        self.reservations: dict[str, SlugReservation] = {}
        self.lookups: list[str] = []

    async def get(self, slug: str) -> SlugReservation | None:
        self.lookups.append(slug)
        return self.reservations.get(slug)

    async def add(self, reservation: SlugReservation) -> SlugReservation:
        if reservation.slug in self.reservations:
            raise IntegrityError("INSERT INTO slug_reservations", {}, Exception("UNIQUE"))
        self.reservations[reservation.slug] = reservation
        return reservation

    async def delete(self, slug: str, owner_id: str) -> bool:
        existing = self.reservations.get(slug)
        if existing and existing.owner_id == owner_id:
            del self.reservations[slug]
            return True
        return False

    def hold(self, slug: str, owner_id: str) -> None:
        """Pre-reserve a handle for another user."""
        self.reservations[slug] = SlugReservation(slug=slug, owner_id=owner_id)


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.listings = AsyncMock()
        self.slugs = InMemorySlugRepository()
        self.commits = 0
        self.rollbacks = 0

    @property
    def committed(self) -> bool:
        return self.commits > 0

    @property
    def rolled_back(self) -> bool:
        return self.rollbacks > 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> str:
    """An opaque identity provider user ID."""
    return "uid-asha-0001"


@pytest.fixture
def other_id() -> str:
    """A second user ID (distinct from user_id)."""
    return "uid-ravi-0002"
