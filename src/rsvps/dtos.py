"""Data shapes for guest responses.

Stored documents use camelCase keys (``guestCount``, ``bringingItems`` ...) so
collections written by earlier versions of the invitation site stay readable.
Two shapes of ``bringingItems`` exist in stored data:

* structured: ``{"drinks": [...], "snacks": [...], "other": [...]}``
* legacy: a list of category tags (``["Drinks", "Other"]``) plus one free-text
  ``drinksDetails`` / ``snacksDetails`` / ``otherDetails`` string per category

Both are accepted on read and normalized to the structured shape.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class Category(str, Enum):
    DRINKS = "drinks"
    SNACKS = "snacks"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class StorageMode(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"


class StorageUnavailableError(Exception):
    """Raised when records cannot be read or written and no fallback applies."""


class StorageNotConfiguredError(StorageUnavailableError):
    """Raised when the remote store credentials are missing."""

    def __init__(self) -> None:
        super().__init__("Remote store credentials are not configured")


def normalize_guest_count(value: Any) -> int:
    """Coerce a stored guest count to an int >= 1.

    Numeric strings are parsed; anything missing, non-numeric or below one
    becomes 1.
    """
    if isinstance(value, bool):
        return 1
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 1
    return count if count >= 1 else 1


def _legacy_bringing_items(data: dict) -> dict[str, list[str]]:
    """Translate the tag-list shape into per-category item lists."""
    tags = {str(tag).strip().lower() for tag in data.get("bringingItems") or []}
    items: dict[str, list[str]] = {category.value: [] for category in Category}
    for category in Category:
        details = data.get(f"{category.value}Details")
        if category.value in tags and isinstance(details, str) and details.strip():
            items[category.value].append(details.strip())
    return items


def _stored_category_items(stored: dict) -> dict[str, Any]:
    """Keep per-category values that can be read as items; drop the rest."""
    items: dict[str, Any] = {}
    for category in Category:
        value = stored.get(category.value)
        if isinstance(value, (list, tuple, str)):
            items[category.value] = value
    return items


class BringingItems(BaseModel):
    model_config = ConfigDict(frozen=True)

    drinks: list[str] = []
    snacks: list[str] = []
    other: list[str] = []

    @field_validator("drinks", "snacks", "other", mode="before")
    @classmethod
    def coerce_items(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v.strip() else []
        if not isinstance(v, (list, tuple)):
            raise ValueError("Items must be a list of strings")
        return [str(item) for item in v if item is not None]

    def items_for(self, category: Category) -> list[str]:
        return getattr(self, category.value)

    def is_empty(self) -> bool:
        return not any(self.items_for(category) for category in Category)


class RSVPRecord(BaseModel):
    """One stored guest response. Immutable once created."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str
    timestamp: int
    name: str = ""
    email: str = ""
    attending: bool = False
    guest_count: int = 1
    dietary_restrictions: str = ""
    bringing_items: BringingItems = Field(default_factory=BringingItems)

    @model_validator(mode="before")
    @classmethod
    def normalize_stored_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        stored_items = data.get("bringingItems")
        if isinstance(stored_items, list):
            data["bringingItems"] = _legacy_bringing_items(data)
        elif isinstance(stored_items, dict):
            data["bringingItems"] = _stored_category_items(stored_items)
        else:
            # missing or unusable; the rest of the response is still kept
            data.pop("bringingItems", None)
        data["id"] = str(data.get("id", ""))
        return data

    @field_validator("guest_count", mode="before")
    @classmethod
    def coerce_guest_count(cls, v: Any) -> int:
        return normalize_guest_count(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> int:
        try:
            return int(float(v))
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("dietary_restrictions", "name", "email", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_document(self) -> dict:
        """Serialize to the camelCase structure written to the stores."""
        return self.model_dump(mode="json", by_alias=True)


def _unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in items:
        item = item.strip()
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


class RSVPSubmission(BaseModel):
    """A guest response before it has been assigned an id and timestamp."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1)
    email: EmailStr
    attending: bool = True
    guest_count: int = 1
    dietary_restrictions: str = ""
    bringing_items: BringingItems = Field(default_factory=BringingItems)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("guest_count", mode="before")
    @classmethod
    def coerce_guest_count(cls, v: Any) -> int:
        return normalize_guest_count(v)

    def to_record(self, record_id: str, timestamp: int) -> RSVPRecord:
        """Build the stored record; duplicate and blank items are dropped here."""
        bringing_items = BringingItems(
            **{
                category.value: _unique(self.bringing_items.items_for(category))
                for category in Category
            }
        )
        return RSVPRecord(
            id=record_id,
            timestamp=timestamp,
            name=self.name,
            email=str(self.email),
            attending=self.attending,
            guest_count=self.guest_count,
            dietary_restrictions=self.dietary_restrictions.strip(),
            bringing_items=bringing_items,
        )


class CategorySummary(BaseModel):
    """Who is bringing what, as ``"<guest name>: <item>"`` strings."""

    drinks: list[str] = []
    snacks: list[str] = []
    other: list[str] = []


@dataclass(frozen=True)
class ReadResult:
    records: list[RSVPRecord]
    storage: StorageMode


@dataclass(frozen=True)
class SaveResult:
    record: RSVPRecord
    storage: StorageMode

    @property
    def degraded(self) -> bool:
        """True when the record only reached the local fallback store."""
        return self.storage == StorageMode.LOCAL


@dataclass(frozen=True)
class DeleteResult:
    record_id: str
    outcome: DeleteOutcome
    storage: StorageMode

    @property
    def deleted(self) -> bool:
        return self.outcome == DeleteOutcome.DELETED

    @property
    def degraded(self) -> bool:
        return self.storage == StorageMode.LOCAL


@dataclass(frozen=True)
class RSVPTotals:
    total_rsvps: int
    attending_count: int
    not_attending_count: int
    total_guests: int


def parse_records(raw_records: list[Any]) -> list[RSVPRecord]:
    """Parse stored entries, skipping anything that is not a usable record."""
    records = []
    for raw in raw_records:
        if not isinstance(raw, dict):
            logger.warning("Skipping stored RSVP entry that is not an object: %r", raw)
            continue
        try:
            records.append(RSVPRecord.model_validate(raw))
        except (ValueError, TypeError) as e:
            logger.warning("Skipping malformed stored RSVP %r: %s", raw.get("id"), e)
    return records
