"""
Pytest fixtures for the first-aid inventory test suite.

Provides:
- an in-memory SQLite database (DATABASE_URL=sqlite://), recreated per test
- a real InventoryStoreClient over it
- a scripted in-memory store that fails on demand
- a FastAPI TestClient with the dashboard dependency overridden
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date, timedelta
from typing import Dict, List, Optional

import pytest

from kit_inventory.database import Base, SessionLocal, engine, import_models
from kit_inventory.exceptions import RemoteError, RecordNotFound
from kit_inventory.schemas.inspection import InspectionCreate, InspectionRecord, RequestBatchItem
from kit_inventory.services.dashboard import Dashboard, get_dashboard
from kit_inventory.services.store_client import InventoryStoreClient


TODAY = date(2026, 10, 19)

WRITE_OPS = {"create_record", "update_record", "delete_record", "insert_request_batch"}


def _fields(**overrides) -> dict:
    fields = {
        "picture_url": "https://example.com/kit.jpg",
        "item_inspected": "Adhesive bandages",
        "item_quantity": 10,
        "unit": "box",
        "expiry_date": TODAY + timedelta(days=365),
        "request_amount": 0,
        "location": "Workshop",
        "inspection_date": TODAY - timedelta(days=30),
        "inspected_by": "Jane Smith",
        "kit_condition": "Good",
        "next_inspection_date": TODAY + timedelta(days=60),
        "status": "Passed",
        "description": "Assorted sizes",
    }
    fields.update(overrides)
    return fields


class FakeStore:
    """In-memory stand-in for InventoryStoreClient that records every call.

    ``fail(op, on_call=n)`` makes the n-th call of ``op`` raise RemoteError;
    ``on_call=None`` fails every call.
    """

    def __init__(self, records=()):
        self.records: Dict[int, InspectionRecord] = {r.inspection_id: r for r in records}
        self.batches: List[RequestBatchItem] = []
        self.calls: List[tuple] = []
        self.failures: Dict[str, Optional[int]] = {}

    def fail(self, op: str, on_call: Optional[int] = 1):
        self.failures[op] = on_call

    def _call(self, op: str, *args):
        self.calls.append((op,) + args)
        count = sum(1 for c in self.calls if c[0] == op)
        if op in self.failures and self.failures[op] in (None, count):
            raise RemoteError(op, "simulated outage")

    @property
    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in WRITE_OPS]

    def create_record(self, payload: InspectionCreate) -> InspectionRecord:
        self._call("create_record")
        new_id = max(self.records, default=0) + 1
        record = InspectionRecord(inspection_id=new_id, **payload.model_dump())
        self.records[new_id] = record
        return record

    def list_records(self) -> List[InspectionRecord]:
        self._call("list_records")
        return [self.records[k] for k in sorted(self.records)]

    def update_record(self, inspection_id: int, fields: dict) -> InspectionRecord:
        self._call("update_record", inspection_id, dict(fields))
        if inspection_id not in self.records:
            raise RecordNotFound("update_record", inspection_id)
        record = InspectionRecord.model_validate({**self.records[inspection_id].model_dump(), **fields})
        self.records[inspection_id] = record
        return record

    def delete_record(self, inspection_id: int) -> None:
        self._call("delete_record", inspection_id)
        if self.records.pop(inspection_id, None) is None:
            raise RecordNotFound("delete_record", inspection_id)

    def latest_request_order_number(self) -> Optional[str]:
        self._call("latest_request_order_number")
        numbers = [b.request_order_number for b in self.batches]
        return max(numbers) if numbers else None

    def insert_request_batch(self, items: List[RequestBatchItem]) -> List[RequestBatchItem]:
        self._call("insert_request_batch", len(items))
        self.batches.extend(items)
        return list(items)

    def list_request_batch(self, order_number: str) -> List[RequestBatchItem]:
        self._call("list_request_batch", order_number)
        return [b for b in self.batches if b.request_order_number == order_number]


# =============================================================================
# Record fixtures
# =============================================================================


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_record():
    """Build an InspectionRecord: ``make_record(1, request_amount=3)``."""
    def _make(inspection_id: int, **overrides) -> InspectionRecord:
        return InspectionRecord(inspection_id=inspection_id, **_fields(**overrides))
    return _make


@pytest.fixture
def make_create():
    def _make(**overrides) -> InspectionCreate:
        return InspectionCreate(**_fields(**overrides))
    return _make


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_dashboard(fake_store):
    return Dashboard(fake_store)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_tables():
    import_models()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store():
    return InventoryStoreClient(SessionLocal)


@pytest.fixture
def dashboard(store):
    return Dashboard(store)


def _client_for(dashboard):
    from fastapi.testclient import TestClient
    from kit_inventory.main import app

    app.dependency_overrides[get_dashboard] = lambda: dashboard
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(dashboard):
    yield from _client_for(dashboard)


@pytest.fixture
def fake_client(fake_dashboard):
    """TestClient whose dashboard runs on the scripted FakeStore."""
    yield from _client_for(fake_dashboard)
