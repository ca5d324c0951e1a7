"""
Pytest Configuration and Fixtures

Shared fixtures for exposure tracker tests.
"""
import csv
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from exposure_api.core.records import MeasurementRecord, Snapshot, SnapshotMetadata

CSV_COLUMNS = [
    "Compound",
    "Exposure Category",
    "Primary Source",
    "Secondary Source(s)",
    "Value",
    "range_low",
    "range_high",
    "percentile",
    "date",
    "population",
]


def make_record(
    compound: str = "Bisphenol A",
    category: str = "Containers & Coatings",
    value: float = 1.0,
    percentile: Optional[float] = None,
    source: str = "Food Packaging",
    **kwargs,
) -> MeasurementRecord:
    return MeasurementRecord(
        compound=compound,
        category=category,
        primary_source=source,
        value=value,
        percentile=percentile,
        **kwargs,
    )


def make_snapshot(test_id: int, date: str, records: List[MeasurementRecord]) -> Snapshot:
    return Snapshot(
        metadata=SnapshotMetadata(id=test_id, date=date),
        records=tuple(records),
    )


@pytest.fixture
def record_factory() -> Callable[..., MeasurementRecord]:
    return make_record


@pytest.fixture
def snapshot_factory() -> Callable[..., Snapshot]:
    return make_snapshot


@pytest.fixture
def sample_records() -> List[MeasurementRecord]:
    """One snapshot spread over three categories."""
    return [
        make_record("Bisphenol A", "Containers & Coatings", 2.1, 0.72, "Food Packaging"),
        make_record("Bisphenol S", "Containers & Coatings", 0.8, 0.45, "Food Packaging"),
        make_record("Bisphenol F", "Containers & Coatings", 0.0, None, "Thermal Paper"),
        make_record("Methylparaben", "Personal Care Products", 12.0, 0.20, "Cosmetics"),
        make_record("Propylparaben", "Personal Care Products", 3.0, 0.10, "Cosmetics"),
        make_record("Triclosan", "Household Products", 0.0, None, "Soap"),
    ]


@pytest.fixture
def three_snapshots() -> List[Snapshot]:
    """Compound X present in test 1, absent in test 2, zero in test 3."""
    return [
        make_snapshot(1, "01/15/24", [
            make_record("Compound X", "Household Products", 5.0, 0.4),
            make_record("Compound Y", "Household Products", 1.0, 0.7),
        ]),
        make_snapshot(2, "04/15/24", [
            make_record("Compound Y", "Household Products", 2.0, 0.8),
        ]),
        make_snapshot(3, "07/15/24", [
            make_record("Compound X", "Household Products", 0.0),
            make_record("Compound Y", "Household Products", 0.0),
        ]),
    ]


def write_snapshot_csv(path: Path, rows: List[Dict[str, str]]) -> Path:
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow({col: row.get(col, "") for col in CSV_COLUMNS})
    return path


def csv_row(
    compound: str,
    category: str,
    value: str = "",
    percentile: str = "",
    date: str = "",
    source: str = "Food Packaging",
    **extra: str,
) -> Dict[str, str]:
    row = {
        "Compound": compound,
        "Exposure Category": category,
        "Primary Source": source,
        "Value": value,
        "percentile": percentile,
        "date": date,
    }
    row.update(extra)
    return row


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Three test CSVs; test 4 is deliberately missing."""
    write_snapshot_csv(tmp_path / "all-chemicals_test1.csv", [
        csv_row("Bisphenol A", "Containers & Coatings", "2.5", "0.65", "01/10/24",
                range_low="1.0", range_high="3.0"),
        csv_row("Triclosan", "Household Products", "0", "", "01/10/24", source="Soap"),
        csv_row("Methylparaben", "Personal Care Products", "10", "0.2", "01/10/24",
                source="Cosmetics", **{"Secondary Source(s)": "Lotion, Shampoo"}),
    ])
    write_snapshot_csv(tmp_path / "all-chemicals_test2.csv", [
        csv_row("Bisphenol A", "Containers & Coatings", "3.5", "0.75", "05/10/24"),
        csv_row("Triclosan", "Household Products", "1.2", "0.5", "05/10/24", source="Soap"),
    ])
    write_snapshot_csv(tmp_path / "all-chemicals_test3.csv", [
        csv_row("Bisphenol A", "Containers & Coatings", "", "", "09/10/24"),
        csv_row("Triclosan", "Household Products", "2.0", "0.9", "09/10/24", source="Soap"),
        csv_row("Methylparaben", "Personal Care Products", "4", "0.35", "",
                source="Cosmetics"),
    ])
    return tmp_path


@pytest.fixture
def csv_writer() -> Callable[[Path, List[Dict[str, str]]], Path]:
    return write_snapshot_csv


@pytest.fixture
def row_factory() -> Callable[..., Dict[str, str]]:
    return csv_row
