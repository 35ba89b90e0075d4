"""SQLAlchemy implementation of the slug reservation repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.slug import SlugReservation
from infrastructure.database.models import SlugReservationModel


class SQLAlchemySlugRepository:
    """SQLAlchemy implementation of ISlugRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, slug: str) -> SlugReservation | None:
        """Get the reservation for a handle."""
        stmt = select(SlugReservationModel).where(SlugReservationModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, reservation: SlugReservation) -> SlugReservation:
        """Insert a reservation.

        Raises:
            IntegrityError: If the handle is already reserved.
        """
        model = SlugReservationModel(
            slug=reservation.slug,
            owner_id=reservation.owner_id,
            created_at=reservation.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, slug: str, owner_id: str) -> bool:
        """Delete a reservation if it is still held by owner_id."""
        stmt = delete(SlugReservationModel).where(
            SlugReservationModel.slug == slug,
            SlugReservationModel.owner_id == owner_id,
        )
        result = await self._session.execute(stmt)
        return bool(result.rowcount)

    def _to_entity(self, model: SlugReservationModel) -> SlugReservation:
        """Convert ORM model to domain entity."""
        return SlugReservation(
            slug=model.slug,
            owner_id=model.owner_id,
            created_at=model.created_at,
        )
