"""Seller handle (slug) entity and the rules every handle must satisfy."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from core.exceptions import SlugValidationError

SLUG_MIN_LENGTH = 3
SLUG_MAX_LENGTH = 30

_SLUG_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])$")
_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


@dataclass
class SlugReservation:
    """Domain entity for an entry in the global handle namespace."""

    slug: str
    owner_id: str
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class SlugAvailability:
    """Result of checking whether a user may adopt a handle."""

    slug: str
    valid: bool
    aligned: bool
    available: bool
    reason: str | None = None


def slugify(raw: str | None) -> str:
    """Lowercase and hyphenate anything that is not ``[a-z0-9]``."""
    value = str(raw or "").lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = value.strip("-")
    return re.sub(r"-{2,}", "-", value)


def slug_error(value: str) -> str | None:
    """Return why ``value`` is not a valid handle, or None if it is."""
    if not SLUG_MIN_LENGTH <= len(value) <= SLUG_MAX_LENGTH:
        return f"Slug must be {SLUG_MIN_LENGTH}-{SLUG_MAX_LENGTH} chars."
    if not _SLUG_PATTERN.match(value):
        return "Only a-z, 0-9, hyphens; no leading/trailing hyphen."
    if "--" in value:
        return "No consecutive hyphens."
    return None


def is_valid_slug(value: str) -> bool:
    """Check a handle against the syntax rules without normalizing it."""
    return slug_error(value) is None


def validate_slug(raw: str) -> str:
    """Normalize a user-supplied handle and enforce the syntax rules.

    Raises:
        SlugValidationError: If the normalized value is not a valid handle.
    """
    value = slugify(raw)
    reason = slug_error(value)
    if reason:
        raise SlugValidationError(value or raw, reason)
    return value


def name_tokens(value: str | None) -> list[str]:
    """Split a name part into its slug tokens."""
    slug = slugify(value)
    return slug.split("-") if slug else []


def email_tokens(email: str | None) -> list[str]:
    """Slug tokens of an email's local part."""
    local = str(email or "").split("@")[0]
    return name_tokens(local)


def _is_ordered_draw(tokens: list[str], sequence: list[str]) -> bool:
    """True if ``tokens`` appear in ``sequence`` in the same relative order."""
    position = 0
    for token in tokens:
        try:
            position = sequence.index(token, position) + 1
        except ValueError:
            return False
    return True


def is_name_aligned(
    slug: str,
    first_name: str | None,
    last_name: str | None,
    email: str | None = None,
) -> bool:
    """Check that a handle leads with tokens of the user's own name.

    The first two tokens must be drawn, in order, from first-then-last or
    last-then-first name tokens. A user with a single name token must lead
    with it; a user without any name falls back to the email local part.
    """
    first = name_tokens(first_name)
    last = name_tokens(last_name)
    sequences = [first + last, last + first]
    if not first and not last:
        sequences = [email_tokens(email)]

    slug_tokens = slug.split("-")
    for sequence in sequences:
        if not sequence:
            continue
        required = min(2, len(sequence))
        lead = slug_tokens[:required]
        if len(lead) == required and _is_ordered_draw(lead, sequence):
            return True
    return False


def ddmm_from_dob(value: date | datetime | str | None) -> str:
    """Day+month code (``DDMM``) of a birth date, in UTC.

    Accepts a date, an aware or naive datetime, or an ISO ``YYYY-MM-DD``
    string. Returns an empty string when the value cannot be interpreted.
    """
    if not value:
        return ""
    if isinstance(value, datetime):
        day = value.astimezone(timezone.utc) if value.tzinfo else value
    elif isinstance(value, date):
        day = value
    else:
        match = _ISO_DATE_PATTERN.match(str(value).strip())
        if match:
            try:
                day = date(int(match[1]), int(match[2]), int(match[3]))
            except ValueError:
                return ""
        else:
            try:
                day = datetime.fromisoformat(str(value).strip())
            except ValueError:
                return ""
            if day.tzinfo:
                day = day.astimezone(timezone.utc)
    return f"{day.day:02d}{day.month:02d}"


def phone_digits(value: str | None) -> str:
    """All digits of a phone number, in order."""
    return re.sub(r"\D+", "", str(value or ""))


def last4_digits(value: str | None) -> str:
    """Last four digits of a phone number, or empty if it has fewer."""
    digits = phone_digits(value)
    return digits[-4:] if len(digits) >= 4 else ""


def normalize_phone(value: str | None, default_country_code: str = "+1") -> str:
    """Normalize a raw phone number to E.164.

    A bare ten-digit number gets ``default_country_code``; anything else is
    taken to already carry its country code.
    """
    raw = str(value or "").strip()
    digits = phone_digits(raw)
    if not digits:
        return ""
    if len(digits) == 10 and not raw.startswith("+"):
        return f"{default_country_code}{digits}"
    return f"+{digits}"


def title_case_name(value: str | None) -> str:
    """Title-case each whitespace-separated word."""
    words = str(value or "").split()
    return " ".join(word[:1].upper() + word[1:].lower() for word in words)
