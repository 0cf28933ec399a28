"""
Record editor behind the "Edit Inspection" dialog.

Holds the selected record, a working copy and derives the dirty flag by
comparing the two field by field:

    idle    -- nothing selected
    viewing -- working copy equals the original (close only)
    dirty   -- at least one field differs (save or cancel)
"""

from enum import Enum
from typing import List, Optional
import logging

from kit_inventory.exceptions import EditorStateError, RemoteError
from kit_inventory.schemas.inspection import InspectionEdit, InspectionRecord
from kit_inventory.services.inventory import InspectionInventory, Notifier

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = tuple(InspectionEdit.model_fields)

SAVE_SUCCESS = "Changes saved successfully!"
SAVE_ERROR = "Error saving changes. Please try again."


class EditorState(str, Enum):
    IDLE = "idle"
    VIEWING = "viewing"
    DIRTY = "dirty"


class RecordEditor:
    def __init__(self, store, inventory: InspectionInventory, notifier: Notifier):
        self.store = store
        self.inventory = inventory
        self.notifier = notifier
        self.original: Optional[InspectionRecord] = None
        self.working: Optional[InspectionRecord] = None

    @property
    def state(self) -> EditorState:
        if self.original is None:
            return EditorState.IDLE
        if self.changed_fields():
            return EditorState.DIRTY
        return EditorState.VIEWING

    @property
    def is_dirty(self) -> bool:
        return self.state == EditorState.DIRTY

    def changed_fields(self) -> List[str]:
        if self.original is None or self.working is None:
            return []
        return [f for f in EDITABLE_FIELDS if getattr(self.working, f) != getattr(self.original, f)]

    def select(self, inspection_id: int) -> InspectionRecord:
        if self.state == EditorState.DIRTY:
            raise EditorStateError("Unsaved changes; save or cancel before selecting another record")
        record = self.inventory.get(inspection_id)
        self.original = record
        self.working = record.model_copy()
        return record

    def edit(self, changes: dict) -> EditorState:
        """Apply field changes to the working copy and return the new state.

        Values are validated against the record schema, so dates arrive here
        already normalized to calendar dates.
        """
        if self.state == EditorState.IDLE:
            raise EditorStateError("No record selected")
        not_editable = set(changes) - set(EDITABLE_FIELDS)
        if not_editable:
            raise ValueError(f"Fields not editable here: {', '.join(sorted(not_editable))}")
        merged = {**self.working.model_dump(), **changes}
        self.working = InspectionRecord.model_validate(merged)
        return self.state

    def save(self) -> bool:
        if self.state != EditorState.DIRTY:
            raise EditorStateError("Nothing to save")
        inspection_id = self.working.inspection_id
        fields = {f: getattr(self.working, f) for f in EDITABLE_FIELDS}
        try:
            stored = self.store.update_record(inspection_id, fields)
        except RemoteError as e:
            logger.error(f"Saving inspection {inspection_id} failed: {e}")
            self.notifier.error(SAVE_ERROR)
            return False

        # request_amount is edited outside the dialog; keep the local value
        try:
            local_amount = self.inventory.get(inspection_id).request_amount
        except KeyError:
            local_amount = stored.request_amount
        self.inventory.put(stored.model_copy(update={"request_amount": local_amount}))
        self._reset()
        logger.info(f"Inspection {inspection_id} saved")
        self.notifier.success(SAVE_SUCCESS)
        return True

    def cancel(self) -> InspectionRecord:
        if self.state != EditorState.DIRTY:
            raise EditorStateError("Nothing to cancel")
        self.working = self.original.model_copy()
        return self.working

    def close(self):
        if self.state == EditorState.DIRTY:
            raise EditorStateError("Unsaved changes; save or cancel first")
        self._reset()

    def _reset(self):
        self.original = None
        self.working = None

    def as_dict(self) -> dict:
        return {
            "state": self.state.value,
            "original": self.original.model_dump(mode="json") if self.original else None,
            "working": self.working.model_dump(mode="json") if self.working else None,
            "changed_fields": self.changed_fields(),
        }
