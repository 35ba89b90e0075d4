"""Seller handle allocation, reservation and propagation."""

import random
from collections.abc import Callable
from datetime import date, datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.config import settings
from core.exceptions import (
    ProfileNotFoundError,
    SlugAllocationExhaustedError,
    SlugTakenError,
    SlugValidationError,
    StoreUnavailableError,
)
from domain.entities.profile import PublicProfile
from domain.entities.slug import (
    SlugAvailability,
    SlugReservation,
    ddmm_from_dob,
    email_tokens,
    is_name_aligned,
    is_valid_slug,
    last4_digits,
    name_tokens,
    slug_error,
    slugify,
    validate_slug,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

RANDOM_SUFFIX_MIN = 100
RANDOM_SUFFIX_MAX = 999

MISALIGNED_SLUG_MESSAGE = "Username must start with your first and last name."


class SlugService:
    """Single home for seller handle logic.

    Allocation reserves a handle in the global namespace, reassignment adopts
    it on the public profile and propagation copies it onto every listing.
    Reserving and adopting are separate steps: ``allocate`` never touches the
    public profile.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        random_attempts: int = settings.slug_random_attempts,
        batch_size: int = settings.slug_propagation_batch_size,
        rng: random.Random | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._random_attempts = random_attempts
        self._batch_size = batch_size
        self._rng = rng or random.Random()

    # --- Candidate generation ---

    @staticmethod
    def candidate_bases(
        first_name: str | None,
        last_name: str | None,
        email: str | None = None,
    ) -> list[str]:
        """``first-last`` then ``last-first``; the email local part if nameless."""
        first = "-".join(name_tokens(first_name))
        last = "-".join(name_tokens(last_name))
        if not first and not last:
            fallback = "-".join(email_tokens(email))
            return [fallback] if fallback else []

        bases = [
            "-".join(part for part in (first, last) if part),
            "-".join(part for part in (last, first) if part),
        ]
        return list(dict.fromkeys(bases))

    @classmethod
    def ordered_candidates(
        cls,
        first_name: str | None,
        last_name: str | None,
        date_of_birth: date | datetime | str | None = None,
        phone: str | None = None,
        email: str | None = None,
    ) -> list[str]:
        """Deterministic candidates in the order they are tried.

        Each disambiguator is applied to ``first-last`` before ``last-first``:
        bare names, ``-DDMM``, ``-DDMM`` plus the phone's last four digits,
        or ``-last4`` when there is a phone but no birth date.
        """
        bases = cls.candidate_bases(first_name, last_name, email)
        ddmm = ddmm_from_dob(date_of_birth)
        last4 = last4_digits(phone)

        candidates = list(bases)
        if ddmm:
            candidates += [f"{base}-{ddmm}" for base in bases]
            if last4:
                candidates += [f"{base}-{ddmm}{last4}" for base in bases]
        elif last4:
            candidates += [f"{base}-{last4}" for base in bases]
        return list(dict.fromkeys(candidates))

    # --- Allocation ---

    async def allocate(
        self,
        user_id: str,
        first_name: str | None,
        last_name: str | None,
        date_of_birth: date | datetime | str | None = None,
        phone: str | None = None,
        email: str | None = None,
    ) -> str:
        """Reserve the first free candidate handle for a user.

        Candidates that fail the syntax or name-alignment rules are skipped
        without touching the store. Claims run strictly one after another.

        Raises:
            SlugAllocationExhaustedError: If no candidate could be claimed.
        """
        attempts = 0

        for candidate in self.ordered_candidates(
            first_name, last_name, date_of_birth, phone, email
        ):
            if not self._acceptable(candidate, first_name, last_name, email):
                continue
            attempts += 1
            if await self.claim(user_id, candidate):
                logger.info("slug_allocated", user_id=user_id, slug=candidate, attempts=attempts)
                return candidate

        bases = self.candidate_bases(first_name, last_name, email)
        for _ in range(self._random_attempts):
            suffix = self._rng.randint(RANDOM_SUFFIX_MIN, RANDOM_SUFFIX_MAX)
            for base in bases:
                candidate = f"{base}-{suffix}"
                if not self._acceptable(candidate, first_name, last_name, email):
                    continue
                attempts += 1
                if await self.claim(user_id, candidate):
                    logger.info(
                        "slug_allocated", user_id=user_id, slug=candidate, attempts=attempts
                    )
                    return candidate

        logger.warning("slug_allocation_exhausted", user_id=user_id, attempts=attempts)
        raise SlugAllocationExhaustedError(attempts)

    async def claim(self, user_id: str, slug: str) -> bool:
        """Reserve ``slug`` for ``user_id`` unless someone else holds it.

        Re-claiming a handle the user already owns succeeds without writing.
        The insert is guarded by the namespace's unique key, so when two users
        race for the same free handle exactly one insert lands; the loser sees
        the winner on its follow-up read.
        """
        async with self._uow_factory() as uow:
            existing = await uow.slugs.get(slug)
            if existing:
                if existing.owner_id != user_id:
                    logger.debug("slug_candidate_rejected", slug=slug, user_id=user_id)
                    return False
                return True

            try:
                await uow.slugs.add(SlugReservation(slug=slug, owner_id=user_id))
                await uow.commit()
            except IntegrityError:
                await uow.rollback()
            else:
                logger.info("slug_claimed", slug=slug, user_id=user_id)
                return True

        async with self._uow_factory() as uow:
            winner = await uow.slugs.get(slug)

        won = winner is not None and winner.owner_id == user_id
        if not won:
            logger.warning("slug_claim_collision", slug=slug, user_id=user_id)
        return won

    async def check_availability(
        self,
        user_id: str,
        slug: str,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
    ) -> SlugAvailability:
        """Read-only check of a requested handle for this user.

        Names default to the stored private profile when not given.
        """
        value = slugify(slug)
        reason = slug_error(value)
        if reason:
            return SlugAvailability(
                slug=value, valid=False, aligned=False, available=False, reason=reason
            )

        async with self._uow_factory() as uow:
            if first_name is None and last_name is None:
                private = await uow.profiles.get_private(user_id)
                if private:
                    first_name, last_name = private.first_name, private.last_name
                    email = email or private.email
            existing = await uow.slugs.get(value)

        aligned = is_name_aligned(value, first_name, last_name, email)
        available = existing is None or existing.owner_id == user_id
        if not aligned:
            reason = MISALIGNED_SLUG_MESSAGE
        elif not available:
            reason = "That username is taken."
        return SlugAvailability(
            slug=value,
            valid=True,
            aligned=aligned,
            available=available,
            reason=reason,
        )

    # --- Adoption ---

    async def reassign(self, user_id: str, requested_slug: str | None = None) -> PublicProfile:
        """Adopt a new handle and move the user's listings over to it.

        A requested handle must pass the syntax and alignment rules and be
        free; without one the allocator picks a handle (keeping the current
        one when the user already has it). The old reservation is released
        only after every listing carries the new handle.

        The handle being moved away from is kept on the public profile as
        ``previous_slug`` until the sweep completes. Asking for the current
        handle again, or any call while a move is pending, re-runs the sweep
        and the release, so a retry finishes an interrupted move.

        Raises:
            SlugValidationError: If the requested handle is malformed or not
                derived from the user's name.
            SlugTakenError: If the requested handle belongs to someone else.
            SlugAllocationExhaustedError: If no handle could be allocated.
        """
        requested = (requested_slug or "").strip()
        if requested:
            requested = validate_slug(requested)

        async with self._uow_factory() as uow:
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)
            public = await uow.profiles.get_public(user_id)

        old_slug = public.seller_slug if public else None
        pending = public.previous_slug if public else None
        display_name = private.display_name

        if requested:
            if not is_name_aligned(
                requested, private.first_name, private.last_name, private.email
            ):
                raise SlugValidationError(requested, MISALIGNED_SLUG_MESSAGE)
            if requested != old_slug and not await self.claim(user_id, requested):
                raise SlugTakenError(requested)
            new_slug = requested
        elif old_slug:
            new_slug = old_slug
        else:
            new_slug = await self.allocate(
                user_id,
                private.first_name,
                private.last_name,
                private.date_of_birth,
                private.phone,
                private.email,
            )

        moving = new_slug != old_slug
        if moving:
            previous = pending if pending and pending != new_slug else old_slug
        else:
            previous = pending

        async with self._uow_factory() as uow:
            public = await uow.profiles.get_public(user_id) or PublicProfile(id=user_id)
            public.display_name = display_name
            public.seller_slug = new_slug
            public.previous_slug = previous
            public.updated_at = datetime.utcnow()
            public = await uow.profiles.save_public(public)
            await uow.commit()

        if not moving and not requested and not pending:
            return public

        if moving:
            logger.info("slug_reassigned", user_id=user_id, old_slug=old_slug, new_slug=new_slug)
        else:
            logger.info("slug_propagation_resumed", user_id=user_id, slug=new_slug)
        await self.propagate(user_id, new_slug)

        for stale in dict.fromkeys((pending, old_slug)):
            if stale and stale != new_slug:
                await self.release(user_id, stale)

        if public.previous_slug is None:
            return public
        async with self._uow_factory() as uow:
            public = await uow.profiles.get_public(user_id) or public
            public.previous_slug = None
            public = await uow.profiles.save_public(public)
            await uow.commit()
            return public

    async def ensure_slug(self, user_id: str) -> PublicProfile:
        """Return the public profile, allocating and adopting a handle if it has none."""
        async with self._uow_factory() as uow:
            public = await uow.profiles.get_public(user_id)
            if public and public.seller_slug:
                return public
            private = await uow.profiles.get_private(user_id)
            if not private:
                raise ProfileNotFoundError(user_id)

        slug = await self.allocate(
            user_id,
            private.first_name,
            private.last_name,
            private.date_of_birth,
            private.phone,
            private.email,
        )

        async with self._uow_factory() as uow:
            public = await uow.profiles.get_public(user_id) or PublicProfile(
                id=user_id, display_name=private.display_name
            )
            public.seller_slug = slug
            public.updated_at = datetime.utcnow()
            public = await uow.profiles.save_public(public)
            await uow.commit()
            return public

    # --- Propagation and release ---

    async def propagate(self, user_id: str, slug: str) -> int:
        """Rewrite ``owner_slug`` on all of a user's listings.

        Each page of up to ``batch_size`` listings is committed atomically;
        the sweep as a whole is not. An interrupted sweep leaves earlier pages
        updated and is recovered by running the reassignment again.

        Returns:
            Number of listings rewritten.
        """
        cursor: UUID | None = None
        pages = 0
        updated = 0

        while True:
            try:
                async with self._uow_factory() as uow:
                    page = await uow.listings.get_page_by_owner(
                        user_id, self._batch_size, after_id=cursor
                    )
                    if not page:
                        break
                    await uow.listings.set_owner_slug([listing.id for listing in page], slug)
                    await uow.commit()
            except SQLAlchemyError as exc:
                logger.error(
                    "slug_propagation_interrupted",
                    user_id=user_id,
                    slug=slug,
                    pages_committed=pages,
                    listings_updated=updated,
                )
                raise StoreUnavailableError(
                    "slug propagation",
                    {"pages_committed": pages, "listings_updated": updated},
                ) from exc

            pages += 1
            updated += len(page)
            logger.debug("slug_propagation_page", user_id=user_id, page=pages, size=len(page))
            cursor = page[-1].id
            if len(page) < self._batch_size:
                break

        logger.info("slug_propagated", user_id=user_id, slug=slug, pages=pages, listings=updated)
        return updated

    async def release(self, user_id: str, slug: str) -> None:
        """Best-effort delete of a handle the user has moved away from.

        A failure leaves a stale reservation behind, which is logged and
        otherwise ignored: the new handle is already authoritative.
        """
        try:
            async with self._uow_factory() as uow:
                await uow.slugs.delete(slug, user_id)
                await uow.commit()
        except SQLAlchemyError:
            logger.warning("stale_slug_reservation", user_id=user_id, slug=slug, exc_info=True)

    async def resolve(self, slug: str) -> str | None:
        """Owner of a handle, or None if nobody holds it."""
        async with self._uow_factory() as uow:
            reservation = await uow.slugs.get(slugify(slug))
        return reservation.owner_id if reservation else None

    # --- Internal helpers ---

    @staticmethod
    def _acceptable(
        candidate: str,
        first_name: str | None,
        last_name: str | None,
        email: str | None,
    ) -> bool:
        """Syntax and alignment check, done before any store access."""
        return is_valid_slug(candidate) and is_name_aligned(
            candidate, first_name, last_name, email
        )
