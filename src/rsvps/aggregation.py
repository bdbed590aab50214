"""Cross-guest views over the RSVP collection.

Everything here is derived on demand from the full record list; nothing is
cached between calls.
"""

from datetime import UTC, datetime

from src.rsvps.dtos import Category, CategorySummary, RSVPRecord, RSVPTotals

EXPORT_FILENAME_PREFIX = "halloween-party-rsvps"


def build_category_summary(records: list[RSVPRecord]) -> CategorySummary:
    """Collect ``"<name>: <item>"`` entries per category from attending guests.

    Order follows record order, then item order within a record.
    """
    summary: dict[str, list[str]] = {category.value: [] for category in Category}
    for record in records:
        if not record.attending:
            continue
        for category in Category:
            for item in record.bringing_items.items_for(category):
                summary[category.value].append(f"{record.name}: {item}")
    return CategorySummary(**summary)


def compute_totals(records: list[RSVPRecord]) -> RSVPTotals:
    attending = [record for record in records if record.attending]
    return RSVPTotals(
        total_rsvps=len(records),
        attending_count=len(attending),
        not_attending_count=len(records) - len(attending),
        total_guests=sum(record.guest_count for record in attending),
    )


def build_export(records: list[RSVPRecord], exported_at: datetime | None = None) -> dict:
    """Build the JSON document offered as the admin download."""
    exported_at = exported_at or datetime.now(UTC)
    totals = compute_totals(records)
    return {
        "rsvps": [record.to_document() for record in records],
        "summary": build_category_summary(records).model_dump(),
        "exportDate": exported_at.isoformat(),
        "totalRSVPs": totals.total_rsvps,
        "attendingCount": totals.attending_count,
        "totalGuests": totals.total_guests,
    }


def export_filename(exported_at: datetime | None = None) -> str:
    exported_at = exported_at or datetime.now(UTC)
    return f"{EXPORT_FILENAME_PREFIX}-{exported_at.date().isoformat()}.json"
