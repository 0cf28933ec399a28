"""
Tests for Dashboard -- first load, load failures and the busy lock.
"""

import threading

import pytest

from kit_inventory.exceptions import DashboardBusy, RemoteError
from kit_inventory.services.dashboard import LOAD_ERROR


@pytest.fixture
def stocked(fake_store, make_record):
    fake_store.records = {
        1: make_record(1),
        2: make_record(2, request_amount=2, item_inspected="Gauze roll", unit="roll"),
    }
    return fake_store


class TestEnsureLoaded:
    def test_loads_only_once(self, fake_dashboard, stocked):
        fake_dashboard.ensure_loaded()
        fake_dashboard.ensure_loaded()
        assert [c[0] for c in stocked.calls] == ["list_records"]
        assert len(fake_dashboard.inventory) == 2

    def test_failed_load_raises(self, fake_dashboard, stocked):
        stocked.fail("list_records")

        with pytest.raises(RemoteError) as exc_info:
            fake_dashboard.ensure_loaded()

        assert exc_info.value.operation == "list_records"
        assert not fake_dashboard.inventory.loaded
        assert fake_dashboard.notifier.current.message == LOAD_ERROR

    def test_lookups_report_the_outage_not_a_missing_record(self, fake_dashboard, stocked):
        stocked.fail("list_records", on_call=None)

        with pytest.raises(RemoteError):
            fake_dashboard.set_request_amount(1, 3)
        with pytest.raises(RemoteError):
            fake_dashboard.select(1)
        with pytest.raises(RemoteError):
            fake_dashboard.rows()
        assert stocked.writes == []

    def test_next_call_retries_the_load(self, fake_dashboard, stocked):
        stocked.fail("list_records", on_call=1)
        with pytest.raises(RemoteError):
            fake_dashboard.set_request_amount(1, 3)

        assert fake_dashboard.set_request_amount(1, 3).request_amount == 3
        assert [c[0] for c in stocked.calls] == ["list_records", "list_records"]


class TestBusyLock:
    def test_nested_operation_is_refused(self, fake_dashboard):
        with fake_dashboard.working():
            assert fake_dashboard.busy
            with pytest.raises(DashboardBusy):
                with fake_dashboard.working():
                    pass
        assert not fake_dashboard.busy

    def test_released_when_the_operation_raises(self, fake_dashboard):
        with pytest.raises(RuntimeError):
            with fake_dashboard.working():
                raise RuntimeError("boom")
        assert not fake_dashboard.busy

    def test_concurrent_submit_is_refused(self, fake_dashboard, stocked):
        fake_dashboard.preview_request()
        entered, release = threading.Event(), threading.Event()
        latest = stocked.latest_request_order_number

        def slow_latest():
            entered.set()
            release.wait(timeout=5)
            return latest()

        stocked.latest_request_order_number = slow_latest
        results = []
        worker = threading.Thread(target=lambda: results.append(fake_dashboard.submit_request()))
        worker.start()
        try:
            assert entered.wait(timeout=5)
            with pytest.raises(DashboardBusy):
                fake_dashboard.submit_request()
        finally:
            release.set()
            worker.join(timeout=5)

        assert results == ["0001"]
        assert [(b.inspection_id, b.request_order_number) for b in stocked.batches] == [(2, "0001")]
