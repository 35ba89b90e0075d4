"""Listing domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass
class Listing:
    """Domain entity for a marketplace item.

    ``owner_slug``, ``owner_name`` and ``owner_avatar_url`` are copies of the
    owner's public profile taken at creation time; ``owner_slug`` is later
    rewritten only by handle propagation.
    """

    owner_id: str
    title: str
    owner_slug: str = ""
    owner_name: str = ""
    owner_avatar_url: str | None = None
    id: UUID = field(default_factory=uuid4)
    price: Decimal = Decimal("0")
    location: str = "Unknown"
    category: str = "Other"
    description: str = ""
    images: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
