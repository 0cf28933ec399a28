"""
Request compiler: turns rows flagged with a request amount into a restock batch.

Phase 1 (preview) writes each flagged row's request_amount to the store and
snapshots the rows for review. Phase 2 (submit) inserts the snapshots under
the next order number, then zeroes request_amount on every originating row.
item_quantity is never adjusted. Both phases stop at the first failed write.
"""

from typing import List, Optional
import logging

from kit_inventory.exceptions import RemoteError, ValidationGap
from kit_inventory.schemas.inspection import RequestBatchItem
from kit_inventory.services.inventory import InspectionInventory, Notifier

logger = logging.getLogger(__name__)

ORDER_NUMBER_WIDTH = 4

EMPTY_REQUEST_LIST = "Request list is empty. Please add items before previewing."
PREVIEW_ERROR = "Failed to update request amounts. Please try again."
SUBMIT_SUCCESS = "Request submitted successfully and inventory updated!"
SUBMIT_ERROR = "Failed to submit request or update inventory. Please try again."


def next_order_number(latest: Optional[str]) -> str:
    """"0007" -> "0008"; no previous batch -> "0001"."""
    number = int(latest) + 1 if latest else 1
    return str(number).zfill(ORDER_NUMBER_WIDTH)


class RequestCompiler:
    def __init__(self, store, inventory: InspectionInventory, notifier: Notifier):
        self.store = store
        self.inventory = inventory
        self.notifier = notifier
        self.candidates: List[RequestBatchItem] = []
        self.reviewing = False

    def preview(self) -> List[RequestBatchItem]:
        """Phase 1. Returns the candidates; an empty list means nothing opened."""
        requested = self.inventory.requested()
        if not requested:
            self.notifier.warning(EMPTY_REQUEST_LIST)
            self._close_review()
            raise ValidationGap(EMPTY_REQUEST_LIST)

        try:
            for record in requested:
                self.store.update_record(record.inspection_id, {"request_amount": record.request_amount})
        except RemoteError as e:
            logger.error(f"Persisting request amounts failed: {e}")
            self.notifier.error(PREVIEW_ERROR)
            self._close_review()
            return []

        self.candidates = [RequestBatchItem.snapshot(r) for r in requested]
        self.reviewing = True
        self.notifier.clear()
        logger.info(f"Request preview opened with {len(self.candidates)} item(s)")
        return list(self.candidates)

    def submit(self) -> Optional[str]:
        """Phase 2. Returns the order number, or None when the submission failed."""
        if not self.reviewing or not self.candidates:
            self.notifier.warning(EMPTY_REQUEST_LIST)
            raise ValidationGap(EMPTY_REQUEST_LIST)

        try:
            order_number = next_order_number(self.store.latest_request_order_number())
            batch = [item.tagged(order_number) for item in self.candidates]
            self.store.insert_request_batch(batch)
        except (RemoteError, ValueError) as e:
            # nothing written yet; the review stays open for another try
            logger.error(f"Inserting request batch failed: {e}")
            self.notifier.error(SUBMIT_ERROR)
            return None

        reset = 0
        try:
            for item in batch:
                self.store.update_record(item.inspection_id, {"request_amount": 0})
                self._mark_reset(item.inspection_id)
                reset += 1
        except RemoteError as e:
            # Batch is stored but some rows keep their stale request_amount.
            # Re-running preview picks up only those rows.
            logger.error(
                f"Request {order_number}: reset {reset} of {len(batch)} row(s) before failure: {e}"
            )
            self.notifier.error(SUBMIT_ERROR)
            self._close_review()
            return None

        logger.info(f"Request {order_number} submitted with {len(batch)} item(s)")
        self._close_review()
        self.notifier.success(SUBMIT_SUCCESS)
        return order_number

    def dismiss(self):
        self._close_review()

    def _mark_reset(self, inspection_id: int):
        try:
            self.inventory.set_request_amount(inspection_id, 0)
        except KeyError:
            logger.warning(f"Inspection {inspection_id} no longer in the local record set")

    def _close_review(self):
        self.candidates = []
        self.reviewing = False
