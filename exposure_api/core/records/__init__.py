"""
Exposure Records

Measurement records, snapshot metadata and snapshot ordering.
"""
from .base import (
    CategoryId,
    MeasurementRecord,
    Snapshot,
    SnapshotMetadata,
    normalize_key,
)
from .timeline import (
    SnapshotTimeline,
    date_sort_key,
    format_period_label,
    format_test_date,
    parse_snapshot_date,
)

__all__ = [
    "CategoryId",
    "MeasurementRecord",
    "Snapshot",
    "SnapshotMetadata",
    "normalize_key",
    "SnapshotTimeline",
    "date_sort_key",
    "format_period_label",
    "format_test_date",
    "parse_snapshot_date",
]
