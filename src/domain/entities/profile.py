"""Profile domain entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from domain.entities.slug import slugify, title_case_name


@dataclass
class PrivateProfile:
    """Owner-only profile details, keyed by the identity provider's user id."""

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    date_of_birth: date | None = None
    district: str = ""
    phone: str = ""
    phone_e164: str = ""
    name_change_count: int = 0
    recent_locations: list[str] = field(default_factory=list)
    last_location_id: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    @property
    def display_name(self) -> str:
        """Public display name derived from first and last name."""
        return compute_display_name(self.first_name, self.last_name, self.email)


@dataclass
class PublicProfile:
    """Publicly visible seller profile."""

    id: str
    display_name: str = ""
    avatar_url: str | None = None
    seller_slug: str | None = None
    previous_slug: str | None = None
    location_city: str | None = None
    location_region: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class NameChange:
    """One entry of a user's append-only name change log."""

    user_id: str
    prev_first: str
    prev_last: str
    new_first: str
    new_last: str
    id: UUID = field(default_factory=uuid4)
    changed_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class LocationVisit:
    """Aggregated visits of a user to one location bucket."""

    user_id: str
    location_id: str
    city: str = ""
    region: str = ""
    country: str = ""
    lat: float | None = None
    lon: float | None = None
    visit_count: int = 1
    first_seen_at: datetime = field(default_factory=datetime.utcnow)
    last_seen_at: datetime = field(default_factory=datetime.utcnow)


def compute_display_name(first_name: str, last_name: str, email: str = "") -> str:
    """Title-cased "First Last", falling back to the email local part."""
    name = title_case_name(f"{first_name} {last_name}".strip())
    if name:
        return name
    return title_case_name((email or "Seller").split("@")[0]) or "Seller"


def location_id(city: str, region_or_country: str) -> str:
    """Bucket identifier for a city within its region or country."""
    return f"{slugify(city)}_{slugify(region_or_country)}"
