"""
Tests for the search box filter and the expiry colour classification.
"""

from datetime import date, timedelta

import pytest

from kit_inventory.schemas.inspection import ExpiryStatus, InspectionRecord
from kit_inventory.services.search import (
    EXPIRY_WARNING_DAYS,
    SEARCHABLE_FIELDS,
    classify_expiry,
    filter_records,
)


@pytest.fixture
def records(make_record):
    return [
        make_record(1, item_inspected="Adhesive bandages", location="Workshop"),
        make_record(2, item_inspected="Gauze roll", unit="roll", location="Gym", inspected_by="Mike Johnson"),
        make_record(3, item_inspected="Nitrile gloves", unit="pair", status="Needs Attention",
                    description="Latex free, size M"),
        make_record(4, item_inspected="Burn gel", unit="piece", expiry_date=date(2025, 12, 31)),
    ]


class TestFilterRecords:
    def test_empty_query_returns_everything(self, records):
        assert filter_records(records, "") == records
        assert filter_records(records, None) == records

    def test_result_is_subset_in_input_order(self, records):
        result = filter_records(records, "o")
        assert all(r in records for r in result)
        assert [r.inspection_id for r in result] == sorted(r.inspection_id for r in result)

    def test_case_insensitive(self, records):
        assert [r.inspection_id for r in filter_records(records, "GAUZE")] == [2]
        assert [r.inspection_id for r in filter_records(records, "latex FREE")] == [3]

    def test_matches_enumerated_and_numeric_fields(self, records):
        assert [r.inspection_id for r in filter_records(records, "needs attention")] == [3]
        assert [r.inspection_id for r in filter_records(records, "mike")] == [2]
        assert [r.inspection_id for r in filter_records(records, "4")] == [4]

    def test_matches_dates_in_iso_form(self, records):
        assert [r.inspection_id for r in filter_records(records, "2025-12-31")] == [4]

    def test_no_match_returns_empty(self, records):
        assert filter_records(records, "defibrillator") == []

    def test_every_record_field_is_searchable(self):
        assert set(SEARCHABLE_FIELDS) == set(InspectionRecord.model_fields)


class TestClassifyExpiry:
    TODAY = date(2026, 10, 19)

    @pytest.mark.parametrize("days,expected", [
        (-30, ExpiryStatus.EXPIRED),
        (-1, ExpiryStatus.EXPIRED),
        (0, ExpiryStatus.WARNING),
        (45, ExpiryStatus.WARNING),
        (EXPIRY_WARNING_DAYS, ExpiryStatus.WARNING),
        (EXPIRY_WARNING_DAYS + 1, ExpiryStatus.OK),
        (400, ExpiryStatus.OK),
    ])
    def test_day_count_thresholds(self, days, expected):
        assert classify_expiry(self.TODAY + timedelta(days=days), self.TODAY) == expected

    def test_defaults_to_current_date(self):
        assert classify_expiry(date.today() - timedelta(days=1)) == ExpiryStatus.EXPIRED
