"""SQLAlchemy implementation of Listing repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.listing import Listing
from infrastructure.database.models import ListingModel


class SQLAlchemyListingRepository:
    """SQLAlchemy implementation of IListingRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Listing | None:
        """Get a listing by ID."""
        stmt = select(ListingModel).where(ListingModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, listing: Listing) -> Listing:
        """Create a new listing."""
        model = self._to_model(listing)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def get_page_by_owner(
        self, owner_id: str, limit: int, after_id: UUID | None = None
    ) -> list[Listing]:
        """Get a page of an owner's listings ordered by ID, starting after a cursor."""
        stmt = select(ListingModel).where(ListingModel.owner_id == owner_id)
        if after_id is not None:
            stmt = stmt.where(ListingModel.id > after_id)
        stmt = stmt.order_by(ListingModel.id).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def set_owner_slug(self, ids: list[UUID], owner_slug: str) -> int:
        """Rewrite the denormalized owner handle on the given listings."""
        if not ids:
            return 0
        stmt = (
            update(ListingModel)
            .where(ListingModel.id.in_(ids))
            .values(owner_slug=owner_slug)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)

    async def list_recent_by_owner(
        self,
        owner_id: str,
        limit: int,
        before: datetime | None = None,
        before_id: UUID | None = None,
    ) -> list[Listing]:
        """Get an owner's listings, newest first, after a ``(created_at, id)`` cursor.

        Listings sharing the cursor's timestamp are continued by id, so ties
        across a page boundary are neither skipped nor repeated.
        """
        stmt = select(ListingModel).where(ListingModel.owner_id == owner_id)
        if before is not None and before_id is not None:
            stmt = stmt.where(
                or_(
                    ListingModel.created_at < before,
                    and_(ListingModel.created_at == before, ListingModel.id < before_id),
                )
            )
        elif before is not None:
            stmt = stmt.where(ListingModel.created_at < before)
        stmt = stmt.order_by(ListingModel.created_at.desc(), ListingModel.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ListingModel) -> Listing:
        """Convert ORM model to domain entity."""
        return Listing(
            id=model.id,
            owner_id=model.owner_id,
            owner_slug=model.owner_slug,
            owner_name=model.owner_name,
            owner_avatar_url=model.owner_avatar_url,
            title=model.title,
            price=model.price,
            location=model.location,
            category=model.category,
            description=model.description,
            images=list(model.images or []),
            created_at=model.created_at,
        )

    def _to_model(self, entity: Listing) -> ListingModel:
        """Convert domain entity to ORM model."""
        return ListingModel(
            id=entity.id,
            owner_id=entity.owner_id,
            owner_slug=entity.owner_slug,
            owner_name=entity.owner_name,
            owner_avatar_url=entity.owner_avatar_url,
            title=entity.title,
            price=entity.price,
            location=entity.location,
            category=entity.category,
            description=entity.description,
            images=list(entity.images),
            created_at=entity.created_at,
        )
