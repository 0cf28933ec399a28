"""Free-text filtering and expiry classification for the inspection table."""

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

from kit_inventory.schemas.inspection import ExpiryStatus, InspectionRecord

# Days before expiry at which an item is flagged
EXPIRY_WARNING_DAYS = 90


def _text(value) -> str:
    return "" if value is None else str(value)


def _iso(value) -> str:
    return value.isoformat() if value else ""


# Every field the search box looks at, with how it is rendered for matching.
SEARCHABLE_FIELDS: Dict[str, Callable[[object], str]] = {
    "inspection_id": _text,
    "picture_url": _text,
    "item_inspected": _text,
    "item_quantity": _text,
    "unit": _text,
    "expiry_date": _iso,
    "request_amount": _text,
    "location": _text,
    "inspection_date": _iso,
    "inspected_by": _text,
    "kit_condition": _text,
    "next_inspection_date": _iso,
    "status": _text,
    "description": _text,
}


def matches(record: InspectionRecord, query: str) -> bool:
    needle = query.lower()
    if not needle:
        return True
    for field, render in SEARCHABLE_FIELDS.items():
        if needle in render(getattr(record, field)).lower():
            return True
    return False


def filter_records(records: Iterable[InspectionRecord], query: Optional[str]) -> List[InspectionRecord]:
    """Records with any field containing ``query`` (case-insensitive), in input order."""
    return [r for r in records if matches(r, query or "")]


def classify_expiry(expiry_date: date, today: Optional[date] = None) -> ExpiryStatus:
    today = today or date.today()
    days_left = (expiry_date - today).days
    if days_left < 0:
        return ExpiryStatus.EXPIRED
    if days_left <= EXPIRY_WARNING_DAYS:
        return ExpiryStatus.WARNING
    return ExpiryStatus.OK
