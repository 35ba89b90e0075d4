"""SQLAlchemy implementation of Profile repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import (
    LocationVisit,
    NameChange,
    PrivateProfile,
    PublicProfile,
)
from infrastructure.database.models import (
    NameChangeModel,
    PublicProfileModel,
    UserLocationModel,
    UserProfileModel,
)


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- Private profile ---

    async def get_private(self, user_id: str) -> PrivateProfile | None:
        """Get a user's private profile."""
        model = await self._session.get(UserProfileModel, user_id)
        return self._private_to_entity(model) if model else None

    async def save_private(self, profile: PrivateProfile) -> PrivateProfile:
        """Insert or update a private profile."""
        model = await self._session.get(UserProfileModel, profile.id)
        if model is None:
            model = UserProfileModel(id=profile.id, created_at=profile.created_at)
            self._session.add(model)

        model.email = profile.email
        model.first_name = profile.first_name
        model.last_name = profile.last_name
        model.date_of_birth = profile.date_of_birth
        model.district = profile.district
        model.phone = profile.phone
        model.phone_e164 = profile.phone_e164
        model.name_change_count = profile.name_change_count
        model.recent_locations = list(profile.recent_locations)
        model.last_location_id = profile.last_location_id
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._private_to_entity(model)

    # --- Public profile ---

    async def get_public(self, user_id: str) -> PublicProfile | None:
        """Get a user's public profile."""
        model = await self._session.get(PublicProfileModel, user_id)
        return self._public_to_entity(model) if model else None

    async def save_public(self, profile: PublicProfile) -> PublicProfile:
        """Insert or update a public profile."""
        model = await self._session.get(PublicProfileModel, profile.id)
        if model is None:
            model = PublicProfileModel(id=profile.id, created_at=profile.created_at)
            self._session.add(model)

        model.display_name = profile.display_name
        model.avatar_url = profile.avatar_url
        model.seller_slug = profile.seller_slug
        model.previous_slug = profile.previous_slug
        model.location_city = profile.location_city
        model.location_region = profile.location_region
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._public_to_entity(model)

    # --- Name change log ---

    async def add_name_change(self, change: NameChange) -> NameChange:
        """Append an entry to the name change log."""
        model = NameChangeModel(
            id=change.id,
            user_id=change.user_id,
            prev_first=change.prev_first,
            prev_last=change.prev_last,
            new_first=change.new_first,
            new_last=change.new_last,
            changed_at=change.changed_at,
        )
        self._session.add(model)
        await self._session.flush()
        return change

    async def get_name_changes(self, user_id: str) -> list[NameChange]:
        """Get a user's name change log, oldest first."""
        stmt = (
            select(NameChangeModel)
            .where(NameChangeModel.user_id == user_id)
            .order_by(NameChangeModel.changed_at, NameChangeModel.id)
        )
        result = await self._session.execute(stmt)
        return [
            NameChange(
                id=model.id,
                user_id=model.user_id,
                prev_first=model.prev_first,
                prev_last=model.prev_last,
                new_first=model.new_first,
                new_last=model.new_last,
                changed_at=model.changed_at,
            )
            for model in result.scalars()
        ]

    # --- Location history ---

    async def get_location_visit(self, user_id: str, location_id: str) -> LocationVisit | None:
        """Get the visit aggregate for one location bucket."""
        model = await self._session.get(UserLocationModel, (user_id, location_id))
        return self._visit_to_entity(model) if model else None

    async def save_location_visit(self, visit: LocationVisit) -> LocationVisit:
        """Insert or update a visit aggregate."""
        model = await self._session.get(UserLocationModel, (visit.user_id, visit.location_id))
        if model is None:
            model = UserLocationModel(
                user_id=visit.user_id,
                location_id=visit.location_id,
                first_seen_at=visit.first_seen_at,
            )
            self._session.add(model)

        model.city = visit.city
        model.region = visit.region
        model.country = visit.country
        model.lat = visit.lat
        model.lon = visit.lon
        model.visit_count = visit.visit_count
        model.last_seen_at = visit.last_seen_at

        await self._session.flush()
        return self._visit_to_entity(model)

    # --- Mapping ---

    def _private_to_entity(self, model: UserProfileModel) -> PrivateProfile:
        """Convert ORM model to domain entity."""
        return PrivateProfile(
            id=model.id,
            email=model.email,
            first_name=model.first_name,
            last_name=model.last_name,
            date_of_birth=model.date_of_birth,
            district=model.district,
            phone=model.phone,
            phone_e164=model.phone_e164,
            name_change_count=model.name_change_count,
            recent_locations=list(model.recent_locations or []),
            last_location_id=model.last_location_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _public_to_entity(self, model: PublicProfileModel) -> PublicProfile:
        """Convert ORM model to domain entity."""
        return PublicProfile(
            id=model.id,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            seller_slug=model.seller_slug,
            previous_slug=model.previous_slug,
            location_city=model.location_city,
            location_region=model.location_region,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _visit_to_entity(self, model: UserLocationModel) -> LocationVisit:
        """Convert ORM model to domain entity."""
        return LocationVisit(
            user_id=model.user_id,
            location_id=model.location_id,
            city=model.city,
            region=model.region,
            country=model.country,
            lat=model.lat,
            lon=model.lon,
            visit_count=model.visit_count,
            first_seen_at=model.first_seen_at,
            last_seen_at=model.last_seen_at,
        )
