"""
Inventory store client.

Thin wrapper over the two backing tables (``inspections`` and
``inspections_request``). Every public call is one round-trip in its own
session and transaction; nothing is retried or batched here. Store failures
are rolled back and re-raised as :class:`RemoteError`.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kit_inventory.exceptions import RemoteError, RecordNotFound
from kit_inventory.models.inspection_model import Inspection
from kit_inventory.models.inspection_request_model import InspectionRequest
from kit_inventory.schemas.inspection import (
    InspectionCreate,
    InspectionRecord,
    RequestBatchItem,
)

logger = logging.getLogger(__name__)

# Columns a caller may write through update_record
WRITABLE_COLUMNS = set(InspectionCreate.model_fields)


class InventoryStoreClient:
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except RemoteError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"{operation} failed: {e}")
            raise RemoteError(operation, str(e)) from e
        finally:
            db.close()

    # -------------------------
    # inspections
    # -------------------------
    def create_record(self, record: InspectionCreate) -> InspectionRecord:
        with self._session("create_record") as db:
            row = Inspection(**record.model_dump())
            db.add(row)
            db.flush()
            return InspectionRecord.model_validate(row)

    def list_records(self) -> List[InspectionRecord]:
        with self._session("list_records") as db:
            rows = db.execute(select(Inspection).order_by(Inspection.inspection_id)).scalars().all()
            return [InspectionRecord.model_validate(r) for r in rows]

    def update_record(self, inspection_id: int, fields: dict) -> InspectionRecord:
        """Write ``fields`` onto one row and return the row as stored."""
        unknown = set(fields) - WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"not writable: {', '.join(sorted(unknown))}")
        with self._session("update_record") as db:
            row = db.get(Inspection, inspection_id)
            if row is None:
                raise RecordNotFound("update_record", inspection_id)
            for key, value in fields.items():
                setattr(row, key, value)
            db.flush()
            return InspectionRecord.model_validate(row)

    def delete_record(self, inspection_id: int) -> None:
        with self._session("delete_record") as db:
            row = db.get(Inspection, inspection_id)
            if row is None:
                raise RecordNotFound("delete_record", inspection_id)
            db.delete(row)

    # -------------------------
    # inspections_request
    # -------------------------
    def latest_request_order_number(self) -> Optional[str]:
        """Highest order number on file ("sort descending, take one")."""
        with self._session("latest_request_order_number") as db:
            return db.execute(
                select(InspectionRequest.request_order_number)
                .order_by(InspectionRequest.request_order_number.desc())
                .limit(1)
            ).scalar_one_or_none()

    def insert_request_batch(self, items: List[RequestBatchItem]) -> List[RequestBatchItem]:
        """Insert a whole batch in one statement; all rows or none."""
        with self._session("insert_request_batch") as db:
            db.add_all([InspectionRequest(**item.model_dump()) for item in items])
            db.flush()
            return list(items)

    def list_request_batch(self, order_number: str) -> List[RequestBatchItem]:
        with self._session("list_request_batch") as db:
            rows = db.execute(
                select(InspectionRequest)
                .where(InspectionRequest.request_order_number == order_number)
                .order_by(InspectionRequest.id)
            ).scalars().all()
            return [RequestBatchItem.model_validate(r) for r in rows]

