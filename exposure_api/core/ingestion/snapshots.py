"""
Snapshot Ingestion

Loads per-test CSV exports (``all-chemicals_test<N>.csv``) into measurement
records. Each test id loads independently: one unreadable file is skipped
and the remaining snapshots are still returned.
"""
from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from exposure_api.utils import get_logger, RecordValidationError, SnapshotLoadError
from ..records import MeasurementRecord, Snapshot, SnapshotMetadata

logger = get_logger(__name__)

DEFAULT_PATTERN = "all-chemicals_test*.csv"
_TEST_ID = re.compile(r"test(\d+)")

# Source column → record field
COLUMN_MAP = {
    "Compound": "compound",
    "Exposure Category": "category",
    "Primary Source": "primary_source",
    "Secondary Source(s)": "secondary_sources",
    "Value": "value",
    "range_low": "range_low",
    "range_high": "range_high",
    "percentile": "percentile",
    "date": "date",
    "population": "population",
}
REQUIRED_COLUMNS = ("Compound", "Exposure Category")


def _clean(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).replace("\r", "").strip()


def _parse_float(raw: Any) -> Optional[float]:
    text = _clean(raw)
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number):
        return None
    return number


def _optional_number(raw: Any) -> Optional[float]:
    """Blank, unparseable and zero optional numerics are all treated as absent."""
    number = _parse_float(raw)
    return number if number else None


def parse_row(row: Dict[str, Any]) -> MeasurementRecord:
    """Convert one CSV row (source column names) into a MeasurementRecord."""
    compound = _clean(row.get("Compound"))
    if not compound:
        raise RecordValidationError("Row has no compound name", field="Compound")
    category = _clean(row.get("Exposure Category"))
    if not category:
        raise RecordValidationError(
            f"Compound {compound!r} has no exposure category",
            field="Exposure Category",
        )

    secondary = _clean(row.get("Secondary Source(s)"))
    return MeasurementRecord(
        compound=compound,
        category=category,
        primary_source=_clean(row.get("Primary Source")),
        secondary_sources=secondary or None,
        value=_parse_float(row.get("Value")) or 0.0,
        range_low=_optional_number(row.get("range_low")),
        range_high=_optional_number(row.get("range_high")),
        percentile=_optional_number(row.get("percentile")),
        date=_clean(row.get("date")),
        population=_optional_number(row.get("population")),
    )


class SnapshotLoader:
    """
    Reads test snapshots from a data directory.

    Supports:
    - Listing available tests with their dates
    - Loading one test's records
    - Loading every test id in a range, skipping failures
    """

    def __init__(self, data_dir: Path, pattern: str = DEFAULT_PATTERN):
        self.data_dir = Path(data_dir)
        self.pattern = pattern

    def snapshot_path(self, test_id: int) -> Path:
        return self.data_dir / self.pattern.replace("*", str(test_id))

    def _read_frame(self, path: Path, test_id: Optional[int]) -> pd.DataFrame:
        if not path.exists():
            raise SnapshotLoadError(f"Snapshot file not found: {path}", test_id=test_id)
        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
        except Exception as e:
            raise SnapshotLoadError(
                f"Failed to parse snapshot: {e}",
                test_id=test_id,
                details={"filepath": str(path)},
            )
        df.columns = df.columns.str.strip()
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise SnapshotLoadError(
                f"Snapshot missing required columns: {missing}",
                test_id=test_id,
                details={"filepath": str(path), "columns": list(df.columns)},
            )
        return df

    def list_snapshots(self) -> List[SnapshotMetadata]:
        """Available tests sorted by id, dated from the first data row."""
        if not self.data_dir.is_dir():
            logger.warning(f"Snapshot directory not found: {self.data_dir}")
            return []

        found = []
        for path in self.data_dir.glob(self.pattern):
            match = _TEST_ID.search(path.name)
            test_id = int(match.group(1)) if match else 1
            found.append((test_id, path))
        found.sort(key=lambda item: item[0])

        metadata = []
        for test_id, path in found:
            date = ""
            try:
                df = self._read_frame(path, test_id)
                if len(df) > 0 and "date" in df.columns:
                    date = _clean(df["date"].iloc[0])
            except SnapshotLoadError as e:
                logger.error(f"Error reading date from {path.name}: {e.message}", extra={"test_id": test_id})
            metadata.append(SnapshotMetadata(id=test_id, date=date, filename=path.name))
        return metadata

    def load_records(self, test_id: int) -> List[MeasurementRecord]:
        path = self.snapshot_path(test_id)
        df = self._read_frame(path, test_id)

        records = []
        for row in df.to_dict(orient="records"):
            if not any(_clean(v) for v in row.values()):
                continue
            records.append(parse_row(row))

        logger.info(f"Loaded {path.name}: {len(records)} records", extra={"test_id": test_id})
        return records

    def load_snapshot(
        self,
        test_id: int,
        metadata: Optional[SnapshotMetadata] = None,
    ) -> Snapshot:
        """Records with no date of their own inherit the snapshot date."""
        try:
            records = self.load_records(test_id)
        except RecordValidationError as e:
            raise SnapshotLoadError(
                f"Invalid record in snapshot {test_id}: {e.message}",
                test_id=test_id,
                details=e.details,
            )

        if metadata is None:
            first_date = next((r.date for r in records if r.date), "")
            metadata = SnapshotMetadata(
                id=test_id,
                date=first_date,
                filename=self.snapshot_path(test_id).name,
            )
        return Snapshot(
            metadata=metadata,
            records=tuple(r.with_date(metadata.date) for r in records),
        )

    def load_or_skip(
        self,
        test_id: int,
        metadata: Optional[SnapshotMetadata] = None,
    ) -> Optional[Snapshot]:
        """Like :meth:`load_snapshot`, but a snapshot that fails to load is logged and None."""
        try:
            return self.load_snapshot(test_id, metadata)
        except SnapshotLoadError as e:
            logger.warning(f"Skipping snapshot: {e.message}", extra={"test_id": test_id})
            return None

    def load_all(self, max_id: int) -> List[Snapshot]:
        """Load test ids ``1..max_id`` one after another, omitting failures."""
        metadata = {m.id: m for m in self.list_snapshots()}
        snapshots = (self.load_or_skip(i, metadata.get(i)) for i in range(1, max_id + 1))
        return [s for s in snapshots if s is not None]
