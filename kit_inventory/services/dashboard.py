"""
Dashboard: the single owner of the in-memory inspection set.

Wires the store client, editor and request compiler together around one
record set, one notification slot and a busy flag that refuses overlapping
store work.
"""

from contextlib import contextmanager
from datetime import date
from typing import List, Optional
import logging
import threading

from kit_inventory.exceptions import DashboardBusy, RemoteError
from kit_inventory.schemas.inspection import (
    InspectionCreate,
    InspectionRecord,
    InspectionRow,
    RequestBatchItem,
)
from kit_inventory.services.inventory import InspectionInventory, Notifier
from kit_inventory.services.record_editor import RecordEditor
from kit_inventory.services.request_compiler import RequestCompiler

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to fetch inspections. Please try again."


class Dashboard:
    def __init__(self, store):
        self.store = store
        self.inventory = InspectionInventory()
        self.notifier = Notifier()
        self.editor = RecordEditor(store, self.inventory, self.notifier)
        self.compiler = RequestCompiler(store, self.inventory, self.notifier)
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def working(self):
        """Mark the dashboard busy for one operation.

        A second caller is refused with DashboardBusy rather than queued.
        """
        if not self._busy.acquire(blocking=False):
            raise DashboardBusy("Another operation is in progress")
        try:
            yield
        finally:
            self._busy.release()

    # -------------------------
    # records
    # -------------------------
    def load(self) -> bool:
        with self.working():
            try:
                records = self.store.list_records()
            except RemoteError as e:
                logger.error(f"Failed to fetch inspections: {e}")
                self.notifier.error(LOAD_ERROR)
                return False
            self.inventory.replace_all(records)
            logger.info(f"Loaded {len(records)} inspection(s)")
            return True

    def ensure_loaded(self):
        """Load the record set on first use.

        Raises RemoteError when the store cannot be read, so callers never
        look records up in a set that was never fetched.
        """
        if not self.inventory.loaded and not self.load():
            raise RemoteError("list_records", LOAD_ERROR)

    def rows(self, query: Optional[str] = None, today: Optional[date] = None) -> List[InspectionRow]:
        self.ensure_loaded()
        return self.inventory.rows(query, today)

    def set_request_amount(self, inspection_id: int, amount: int) -> InspectionRecord:
        self.ensure_loaded()
        return self.inventory.set_request_amount(inspection_id, amount)

    def create_record(self, payload: InspectionCreate) -> InspectionRecord:
        with self.working():
            record = self.store.create_record(payload)
            if self.inventory.loaded:
                self.inventory.put(record)
            return record

    def delete_record(self, inspection_id: int):
        with self.working():
            self.store.delete_record(inspection_id)
            self.inventory.remove(inspection_id)

    # -------------------------
    # editor
    # -------------------------
    def select(self, inspection_id: int) -> InspectionRecord:
        self.ensure_loaded()
        return self.editor.select(inspection_id)

    def save_edit(self) -> bool:
        with self.working():
            return self.editor.save()

    # -------------------------
    # request batch
    # -------------------------
    def preview_request(self) -> List[RequestBatchItem]:
        self.ensure_loaded()
        with self.working():
            return self.compiler.preview()

    def submit_request(self) -> Optional[str]:
        with self.working():
            return self.compiler.submit()

    def request_batch(self, order_number: str) -> List[RequestBatchItem]:
        return self.store.list_request_batch(order_number)

    def as_dict(self) -> dict:
        return {
            "busy": self.busy,
            "notification": self.notifier.as_dict(),
            "editor_state": self.editor.state.value,
            "reviewing": self.compiler.reviewing,
        }


_dashboard: Optional[Dashboard] = None


def get_dashboard() -> Dashboard:
    """FastAPI dependency: the process-wide dashboard."""
    global _dashboard
    if _dashboard is None:
        from kit_inventory.database import SessionLocal
        from kit_inventory.services.store_client import InventoryStoreClient
        _dashboard = Dashboard(InventoryStoreClient(SessionLocal))
    return _dashboard
