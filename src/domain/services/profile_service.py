"""Profile service: signup, profile editing and location history."""

from collections.abc import Callable
from datetime import date, datetime

import structlog

from core.config import settings
from core.exceptions import (
    NameChangeLimitError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
)
from domain.entities.profile import (
    LocationVisit,
    NameChange,
    PrivateProfile,
    PublicProfile,
    location_id,
)
from domain.entities.slug import normalize_phone
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.slug_service import SlugService

logger = structlog.get_logger()


class ProfileService:
    """Service layer for private/public profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        slug_service: SlugService,
        max_name_changes: int = settings.max_name_changes,
        recent_locations_limit: int = settings.recent_locations_limit,
        default_country_code: str = settings.default_phone_country_code,
    ) -> None:
        self._uow_factory = uow_factory
        self._slugs = slug_service
        self._max_name_changes = max_name_changes
        self._recent_locations_limit = recent_locations_limit
        self._default_country_code = default_country_code

    async def register(
        self,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        date_of_birth: date | None = None,
        district: str = "",
        phone: str = "",
    ) -> tuple[PrivateProfile, PublicProfile]:
        """Create both profiles for a new user with a freshly allocated handle.

        Allocation runs first, so an exhausted namespace aborts signup before
        anything is written to the profiles.
        """
        async with self._uow_factory() as uow:
            if await uow.profiles.get_private(user_id):
                raise ProfileAlreadyExistsError(user_id)

        first_name = first_name.strip()
        last_name = last_name.strip()
        slug = await self._slugs.allocate(
            user_id, first_name, last_name, date_of_birth, phone, email
        )

        private = PrivateProfile(
            id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            district=district.strip(),
            phone=phone.strip(),
            phone_e164=normalize_phone(phone, self._default_country_code),
        )
        public = PublicProfile(
            id=user_id,
            display_name=private.display_name,
            seller_slug=slug,
        )

        async with self._uow_factory() as uow:
            private = await uow.profiles.save_private(private)
            public = await uow.profiles.save_public(public)
            await uow.commit()

        logger.info("profile_registered", user_id=user_id, slug=slug)
        return private, public

    async def get_profile(self, user_id: str) -> tuple[PrivateProfile, PublicProfile]:
        """Get a user's private and public profile."""
        async with self._uow_factory() as uow:
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)
            public = await uow.profiles.get_public(user_id)
            if not public:
                public = PublicProfile(id=user_id, display_name=private.display_name)
            return private, public

    async def update_private(
        self,
        user_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        date_of_birth: date | None = None,
        district: str | None = None,
        phone: str | None = None,
    ) -> PrivateProfile:
        """Update private details; name edits count against a lifetime cap.

        When the cap is reached the whole edit is rejected and nothing is
        written. The public display name follows the new name.
        """
        async with self._uow_factory() as uow:
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)

            new_first = first_name.strip() if first_name is not None else private.first_name
            new_last = last_name.strip() if last_name is not None else private.last_name
            name_changed = (new_first, new_last) != (private.first_name, private.last_name)

            if name_changed:
                if private.name_change_count >= self._max_name_changes:
                    raise NameChangeLimitError(self._max_name_changes)
                await uow.profiles.add_name_change(
                    NameChange(
                        user_id=user_id,
                        prev_first=private.first_name,
                        prev_last=private.last_name,
                        new_first=new_first,
                        new_last=new_last,
                    )
                )
                private.name_change_count += 1
                private.first_name = new_first
                private.last_name = new_last

            if date_of_birth is not None:
                private.date_of_birth = date_of_birth
            if district is not None:
                private.district = district.strip()
            if phone is not None:
                private.phone = phone.strip()
                private.phone_e164 = normalize_phone(phone, self._default_country_code)

            private.updated_at = datetime.utcnow()
            private = await uow.profiles.save_private(private)

            if name_changed:
                public = await uow.profiles.get_public(user_id) or PublicProfile(id=user_id)
                public.display_name = private.display_name
                public.updated_at = datetime.utcnow()
                await uow.profiles.save_public(public)

            await uow.commit()

        if name_changed:
            logger.info(
                "profile_name_changed",
                user_id=user_id,
                name_change_count=private.name_change_count,
            )
        return private

    async def update_public(
        self,
        user_id: str,
        seller_slug: str | None = None,
        avatar_url: str | None = None,
    ) -> PublicProfile:
        """Save the public profile, reassigning the handle if it changed."""
        public = await self._slugs.reassign(user_id, seller_slug)
        if avatar_url is None:
            return public

        async with self._uow_factory() as uow:
            public = await uow.profiles.get_public(user_id) or public
            public.avatar_url = avatar_url or None
            public.updated_at = datetime.utcnow()
            public = await uow.profiles.save_public(public)
            await uow.commit()
            return public

    async def get_name_history(self, user_id: str) -> tuple[list[NameChange], int]:
        """Get the user's name change log, oldest first.

        Returns:
            The log and the number of name changes still allowed, counted
            from ``name_change_count`` as the cap is.
        """
        async with self._uow_factory() as uow:
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)
            changes = await uow.profiles.get_name_changes(user_id)

        remaining = max(self._max_name_changes - private.name_change_count, 0)
        return changes, remaining

    async def record_location(
        self,
        user_id: str,
        city: str,
        region: str = "",
        country: str = "",
        lat: float | None = None,
        lon: float | None = None,
    ) -> PrivateProfile:
        """Record the user's current location bucket.

        A new bucket moves to the front of ``recent_locations`` (deduplicated
        and capped), bumps its visit aggregate and is copied to the public
        profile. Re-reporting the current bucket only refreshes its
        ``last_seen_at``.
        """
        region_or_country = region or country
        bucket = location_id(city, region_or_country)
        now = datetime.utcnow()

        async with self._uow_factory() as uow:
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)

            visit = await uow.profiles.get_location_visit(user_id, bucket)

            if private.last_location_id == bucket and visit:
                visit.last_seen_at = now
                await uow.profiles.save_location_visit(visit)
                await uow.commit()
                return private

            recent = [bucket] + [b for b in private.recent_locations if b != bucket]
            private.recent_locations = recent[: self._recent_locations_limit]
            private.last_location_id = bucket
            private.updated_at = now
            private = await uow.profiles.save_private(private)

            if visit:
                visit.visit_count += 1
                visit.last_seen_at = now
                visit.lat, visit.lon = lat, lon
            else:
                visit = LocationVisit(
                    user_id=user_id,
                    location_id=bucket,
                    city=city,
                    region=region,
                    country=country,
                    lat=lat,
                    lon=lon,
                    first_seen_at=now,
                    last_seen_at=now,
                )
            await uow.profiles.save_location_visit(visit)

            public = await uow.profiles.get_public(user_id) or PublicProfile(
                id=user_id, display_name=private.display_name
            )
            public.location_city = city
            public.location_region = region_or_country
            public.updated_at = now
            await uow.profiles.save_public(public)

            await uow.commit()
            return private
