"""Integration tests for keyset pagination of an owner's listings."""

from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import ListingModel
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

ASHA = "uid-asha-0001"
POSTED_AT = datetime(2026, 3, 14, 9, 30, 0, 125000)


async def _add_listing(
    session_factory: async_sessionmaker[AsyncSession], title: str, created_at: datetime
) -> None:
    async with session_factory() as session:
        session.add(
            ListingModel(
                owner_id=ASHA,
                owner_slug="asha-rao",
                owner_name="Asha Rao",
                title=title,
                images=["https://cdn.example.com/g.jpg"],
                created_at=created_at,
            )
        )
        await session.commit()


class TestListRecentByOwner:
    async def test_tied_timestamps_continue_by_id(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    ) -> None:
        for title in ("Guppy", "Molly", "Tetra"):
            await _add_listing(session_factory, title, POSTED_AT)

        async with uow_factory() as uow:
            first = await uow.listings.list_recent_by_owner(ASHA, 2)
            last = first[-1]
            second = await uow.listings.list_recent_by_owner(
                ASHA, 2, before=last.created_at, before_id=last.id
            )

        assert len(first) == 2
        assert len(second) == 1
        ids = [listing.id for listing in first + second]
        assert len(set(ids)) == 3
        assert ids == sorted(ids, reverse=True)

    async def test_cursor_skips_newer_and_keeps_older(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    ) -> None:
        await _add_listing(session_factory, "Guppy", POSTED_AT - timedelta(minutes=5))
        await _add_listing(session_factory, "Molly", POSTED_AT)
        await _add_listing(session_factory, "Tetra", POSTED_AT)
        await _add_listing(session_factory, "Oscar", POSTED_AT + timedelta(minutes=5))

        async with uow_factory() as uow:
            newest = await uow.listings.list_recent_by_owner(ASHA, 2)
            rest = await uow.listings.list_recent_by_owner(
                ASHA, 10, before=newest[-1].created_at, before_id=newest[-1].id
            )

        assert newest[0].title == "Oscar"
        assert {listing.title for listing in newest + rest} == {
            "Guppy",
            "Molly",
            "Tetra",
            "Oscar",
        }
        assert rest[-1].title == "Guppy"
        assert len(newest + rest) == 4

    async def test_timestamp_only_cursor(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    ) -> None:
        await _add_listing(session_factory, "Guppy", POSTED_AT - timedelta(minutes=5))
        await _add_listing(session_factory, "Molly", POSTED_AT)

        async with uow_factory() as uow:
            older = await uow.listings.list_recent_by_owner(ASHA, 10, before=POSTED_AT)

        assert [listing.title for listing in older] == ["Guppy"]
