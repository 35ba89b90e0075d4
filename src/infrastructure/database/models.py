"""SQLAlchemy ORM models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Identity provider user ids are opaque strings.
USER_ID_LENGTH = 128


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserProfileModel(Base):
    """Private profile, readable and writable only by its owner."""

    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    date_of_birth: Mapped[date | None] = mapped_column(Date)
    district: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(40), nullable=False, default="")
    phone_e164: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    name_change_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    recent_locations: Mapped[list[str]] = mapped_column(JSONB, default=list)
    last_location_id: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    __table_args__ = (
        CheckConstraint("name_change_count >= 0", name="ck_user_profiles_name_change_count"),
    )

    # Relationships
    public_profile: Mapped[Optional["PublicProfileModel"]] = relationship(
        "PublicProfileModel",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )
    name_changes: Mapped[list["NameChangeModel"]] = relationship(
        "NameChangeModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    listings: Mapped[list["ListingModel"]] = relationship(
        "ListingModel",
        back_populates="owner",
        cascade="all, delete-orphan",
    )


class PublicProfileModel(Base):
    """Public seller profile."""

    __tablename__ = "public_profiles"

    id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    display_name: Mapped[str] = mapped_column(String(201), nullable=False, default="")
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    seller_slug: Mapped[str | None] = mapped_column(String(30), index=True)
    previous_slug: Mapped[str | None] = mapped_column(String(30))
    location_city: Mapped[str | None] = mapped_column(String(100))
    location_region: Mapped[str | None] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user: Mapped["UserProfileModel"] = relationship(
        "UserProfileModel", back_populates="public_profile"
    )


class NameChangeModel(Base):
    """Append-only log of first/last name edits."""

    __tablename__ = "name_changes"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    prev_first: Mapped[str] = mapped_column(String(100), nullable=False)
    prev_last: Mapped[str] = mapped_column(String(100), nullable=False)
    new_first: Mapped[str] = mapped_column(String(100), nullable=False)
    new_last: Mapped[str] = mapped_column(String(100), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["UserProfileModel"] = relationship(
        "UserProfileModel", back_populates="name_changes"
    )


class UserLocationModel(Base):
    """Visit aggregate per user and location bucket."""

    __tablename__ = "user_locations"

    user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    location_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    region: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    lat: Mapped[float | None] = mapped_column(Float)
    lon: Mapped[float | None] = mapped_column(Float)
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    first_seen_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    last_seen_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class SlugReservationModel(Base):
    """Global seller handle namespace. The primary key enforces one owner per handle."""

    __tablename__ = "slug_reservations"

    slug: Mapped[str] = mapped_column(String(30), primary_key=True)
    # No foreign key: a handle is reserved before the signup writes the profile.
    owner_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ListingModel(Base):
    """Marketplace listing."""

    __tablename__ = "listings"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    owner_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH),
        ForeignKey("user_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    owner_slug: Mapped[str] = mapped_column(String(30), nullable=False, default="")
    owner_name: Mapped[str] = mapped_column(String(201), nullable=False, default="")
    owner_avatar_url: Mapped[str | None] = mapped_column(String(500))
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="Unknown")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="Other")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    images: Mapped[list[Any]] = mapped_column(JSONB, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_listings_price"),
        Index("ix_listings_owner_id_id", "owner_id", "id"),
        Index("ix_listings_owner_id_created_at", "owner_id", "created_at"),
    )

    owner: Mapped["UserProfileModel"] = relationship(
        "UserProfileModel", back_populates="listings"
    )
