from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional
import logging

from kit_inventory.schemas.inspection import InspectionRecord, InspectionRow
from kit_inventory.services.search import classify_expiry, filter_records

logger = logging.getLogger(__name__)


class InspectionInventory:
    """In-memory copy of the inspections table, owned by one dashboard.

    Rows are replaced, never mutated in place. Apart from local request
    amount edits, a row only changes after the matching store write succeeded.
    """

    def __init__(self, records: Optional[List[InspectionRecord]] = None):
        self._records: List[InspectionRecord] = []
        self.loaded = False
        if records is not None:
            self.replace_all(records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))

    def replace_all(self, records: List[InspectionRecord]):
        ids = [r.inspection_id for r in records]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate inspection_id in record set")
        self._records = list(records)
        self.loaded = True

    def get(self, inspection_id: int) -> InspectionRecord:
        for record in self._records:
            if record.inspection_id == inspection_id:
                return record
        raise KeyError(inspection_id)

    def put(self, record: InspectionRecord):
        """Replace the row with the same id, or append a new one."""
        for i, existing in enumerate(self._records):
            if existing.inspection_id == record.inspection_id:
                self._records[i] = record
                return
        self._records.append(record)

    def remove(self, inspection_id: int):
        self._records = [r for r in self._records if r.inspection_id != inspection_id]

    def set_request_amount(self, inspection_id: int, amount: int) -> InspectionRecord:
        if amount < 0:
            raise ValueError("request_amount must be >= 0")
        record = self.get(inspection_id).model_copy(update={"request_amount": amount})
        self.put(record)
        return record

    def requested(self) -> List[InspectionRecord]:
        """Rows flagged for restock (request_amount > 0)."""
        return [r for r in self._records if r.request_amount > 0]

    def search(self, query: Optional[str]) -> List[InspectionRecord]:
        return filter_records(self._records, query)

    def rows(self, query: Optional[str] = None, today: Optional[date] = None) -> List[InspectionRow]:
        return [
            InspectionRow(**r.model_dump(), expiry_status=classify_expiry(r.expiry_date, today))
            for r in self.search(query)
        ]


@dataclass
class Notification:
    message: str
    level: str  # success | error | warning


@dataclass
class Notifier:
    """Holds the single notification the dashboard shows."""
    current: Optional[Notification] = None

    def _post(self, message: str, level: str):
        self.current = Notification(message, level)
        log = logger.info if level == "success" else logger.warning
        log(f"[{level}] {message}")

    def success(self, message: str):
        self._post(message, "success")

    def error(self, message: str):
        self._post(message, "error")

    def warning(self, message: str):
        self._post(message, "warning")

    def clear(self):
        self.current = None

    def as_dict(self) -> Dict[str, str]:
        if self.current is None:
            return {}
        return {"message": self.current.message, "level": self.current.level}
