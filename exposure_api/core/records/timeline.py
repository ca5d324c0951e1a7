"""
Snapshot Timeline

Snapshot ids are chronological by convention only, so ordering is done on
the parsed test date. The sort key is computed once here and shared by the
longitudinal joiner and the trend calculator.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .base import Snapshot

_DATE_FORMATS = ("%m/%d/%y", "%m/%d/%Y")


def parse_snapshot_date(raw: Optional[str]) -> Optional[date]:
    """Parse a ``MM/DD/YY`` (or ``MM/DD/YYYY``) test date. Blank or invalid → None."""
    if not raw:
        return None
    text = raw.replace("\r", "").strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        # Two-digit years are always 20YY
        if fmt == "%m/%d/%y" and parsed.year < 2000:
            parsed = parsed.replace(year=parsed.year + 100)
        return parsed
    return None


def date_sort_key(raw: Optional[str], test_id: int = 0) -> Tuple[bool, date, int]:
    """Undated entries sort after dated ones; ties fall back to the test id."""
    parsed = parse_snapshot_date(raw)
    return (parsed is None, parsed or date.min, test_id)


def format_test_date(raw: Optional[str]) -> str:
    """Long display form, e.g. ``January 5, 2025``. Returns the input unchanged if unparseable."""
    parsed = parse_snapshot_date(raw)
    if parsed is None:
        return (raw or "").strip()
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_period_label(raw: Optional[str]) -> str:
    """Short month label used for trend periods, e.g. ``Jan 2025``."""
    parsed = parse_snapshot_date(raw)
    if parsed is None:
        return (raw or "").strip()
    return parsed.strftime("%b %Y")


class SnapshotTimeline:
    """
    Snapshots ordered by parsed test date.

    ``previous()`` is the positional predecessor in date order, not ``id - 1``.
    """

    def __init__(self, snapshots: Iterable[Snapshot]):
        self._ordered: List[Snapshot] = sorted(
            snapshots, key=lambda s: date_sort_key(s.date, s.test_id)
        )
        self._position: Dict[int, int] = {
            s.test_id: i for i, s in enumerate(self._ordered)
        }

    @property
    def ordered(self) -> List[Snapshot]:
        return list(self._ordered)

    @property
    def test_ids(self) -> List[int]:
        return [s.test_id for s in self._ordered]

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self):
        return iter(self._ordered)

    def __contains__(self, test_id: int) -> bool:
        return test_id in self._position

    def get(self, test_id: int) -> Optional[Snapshot]:
        pos = self._position.get(test_id)
        return None if pos is None else self._ordered[pos]

    def latest(self) -> Optional[Snapshot]:
        return self._ordered[-1] if self._ordered else None

    def previous(self, test_id: int) -> Optional[Snapshot]:
        pos = self._position.get(test_id)
        if pos is None or pos == 0:
            return None
        return self._ordered[pos - 1]
