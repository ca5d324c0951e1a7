"""
Unit Tests for Exposure Records

Tests for name normalization, canonical categories, records and the
date-ordered snapshot timeline.
"""
from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from exposure_api.core.records import (
    CategoryId,
    MeasurementRecord,
    SnapshotTimeline,
    date_sort_key,
    format_period_label,
    format_test_date,
    normalize_key,
    parse_snapshot_date,
)
from exposure_api.utils import UnknownCategoryError


class TestNormalizeKey:
    """Tests for name normalization."""

    def test_case_and_whitespace(self):
        """Names differing only in case or spacing normalize equally."""
        assert normalize_key("  Bisphenol   A\r") == normalize_key("bisphenol a")

    def test_empty(self):
        assert normalize_key(None) == ""
        assert normalize_key("   ") == ""


class TestCategoryId:
    """Tests for the canonical category enumeration."""

    def test_lookup_normalizes(self):
        assert CategoryId.lookup("household  products ") == CategoryId.HOUSEHOLD_PRODUCTS

    def test_lookup_unknown(self):
        assert CategoryId.lookup("Cosmic Rays") is None

    def test_from_label_raises(self):
        with pytest.raises(UnknownCategoryError) as exc:
            CategoryId.from_label("Cosmic Rays")
        assert exc.value.code == "UNKNOWN_CATEGORY"
        assert exc.value.details["category"] == "Cosmic Rays"

    def test_canonical_labels(self):
        labels = CategoryId.canonical_labels()
        assert len(labels) == 6
        assert "Containers & Coatings" in labels


class TestMeasurementRecord:
    """Tests for MeasurementRecord."""

    def test_detected(self, record_factory):
        assert record_factory(value=0.1).detected
        assert not record_factory(value=0.0).detected

    def test_with_date_keeps_own_date(self, record_factory):
        record = record_factory(date="02/01/24")
        assert record.with_date("03/01/24").date == "02/01/24"

    def test_with_date_fills_blank(self, record_factory):
        record = record_factory()
        assert record.with_date("03/01/24").date == "03/01/24"

    def test_to_dict(self, record_factory):
        result = record_factory(value=2.0, percentile=0.5).to_dict()
        assert result["compound"] == "Bisphenol A"
        assert result["value"] == 2.0
        assert result["percentile"] == 0.5

    def test_frozen(self, record_factory):
        record = record_factory()
        with pytest.raises(FrozenInstanceError):
            record.value = 3.0


class TestSnapshotDates:
    """Tests for date parsing and formatting."""

    def test_parse_short_year(self):
        assert parse_snapshot_date("01/05/25") == date(2025, 1, 5)

    def test_two_digit_years_are_this_century(self):
        assert parse_snapshot_date("12/31/99") == date(2099, 12, 31)

    def test_parse_long_year_and_carriage_return(self):
        assert parse_snapshot_date("01/05/2025\r") == date(2025, 1, 5)

    def test_parse_invalid(self):
        assert parse_snapshot_date("") is None
        assert parse_snapshot_date("soon") is None

    def test_undated_sorts_last(self):
        assert date_sort_key("12/31/99", 9) < date_sort_key("", 1)

    def test_format_test_date(self):
        assert format_test_date("01/05/25") == "January 5, 2025"
        assert format_test_date("n/a") == "n/a"

    def test_format_period_label(self):
        assert format_period_label("03/15/24") == "Mar 2024"


class TestSnapshotTimeline:
    """Tests for date-ordered snapshots."""

    def test_orders_by_date_not_id(self, snapshot_factory):
        timeline = SnapshotTimeline([
            snapshot_factory(1, "06/01/24", []),
            snapshot_factory(2, "01/01/24", []),
            snapshot_factory(3, "", []),
        ])
        assert timeline.test_ids == [2, 1, 3]
        assert timeline.latest().test_id == 3

    def test_previous_is_positional(self, snapshot_factory):
        timeline = SnapshotTimeline([
            snapshot_factory(1, "06/01/24", []),
            snapshot_factory(2, "01/01/24", []),
        ])
        assert timeline.previous(1).test_id == 2
        assert timeline.previous(2) is None
        assert timeline.previous(99) is None

    def test_get_and_contains(self, snapshot_factory):
        timeline = SnapshotTimeline([snapshot_factory(4, "01/01/24", [])])
        assert 4 in timeline
        assert 1 not in timeline
        assert timeline.get(4).date == "01/01/24"
        assert timeline.get(1) is None
        assert len(timeline) == 1

    def test_empty(self):
        timeline = SnapshotTimeline([])
        assert timeline.latest() is None
        assert list(timeline) == []


class TestSnapshot:
    """Tests for Snapshot lookups."""

    def test_find_compound_normalized(self, snapshot_factory, record_factory):
        snapshot = snapshot_factory(1, "01/01/24", [record_factory("Bisphenol A")])
        assert snapshot.find_compound(" bisphenol a") is not None
        assert snapshot.find_compound("Bisphenol S") is None

    def test_category_records(self, snapshot_factory, sample_records):
        snapshot = snapshot_factory(1, "01/01/24", sample_records)
        assert len(snapshot.category_records("containers & coatings")) == 3
        assert isinstance(snapshot.records[0], MeasurementRecord)
