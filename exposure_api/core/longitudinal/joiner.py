"""
Longitudinal Joiner

Aligns one compound, or one category, across every loaded snapshot.

Compound series are gap-filled: a snapshot that does not contain the
compound still contributes a synthetic not-detected point dated with the
snapshot's own date, so absence stays visible in the series. Category
series get one point per snapshot that has any record in the category.
Points are ordered by the parsed snapshot date, never by raw id.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from ..classification import aggregate, to_percent
from ..records import CategoryId, Snapshot, SnapshotTimeline, date_sort_key

logger = logging.getLogger(__name__)

# Reference-range quartile positions for chart guide lines
LOWER_QUARTILE = 0.25
UPPER_QUARTILE = 0.75


class SeriesKind(str, Enum):
    COMPOUND = "compound"
    CATEGORY = "category"


def interpolate_quartiles(
    range_low: Optional[float],
    range_high: Optional[float],
) -> Tuple[Optional[float], Optional[float]]:
    """
    25th/75th percentile guide values, linearly interpolated within the
    reference interval. Both are None unless the interval is complete and
    non-degenerate.
    """
    if range_low is None or range_high is None or range_high <= range_low:
        return None, None
    span = range_high - range_low
    return range_low + LOWER_QUARTILE * span, range_low + UPPER_QUARTILE * span


# ── Compound series ───────────────────────────────────────────────────────────

@dataclass
class CompoundPoint:
    date: str
    test_id: int
    value: float = 0.0
    percentile: Optional[float] = None
    detected: bool = False
    range_low: Optional[float] = None
    range_high: Optional[float] = None
    tested: bool = True

    @property
    def quartiles(self) -> Tuple[Optional[float], Optional[float]]:
        return interpolate_quartiles(self.range_low, self.range_high)

    def to_dict(self) -> dict:
        q25, q75 = self.quartiles
        return {
            "date": self.date,
            "testId": self.test_id,
            "value": self.value,
            "percentile": self.percentile,
            "detected": self.detected,
            "tested": self.tested,
            "rangeLow": self.range_low,
            "rangeHigh": self.range_high,
            "quartile25": q25,
            "quartile75": q75,
        }


@dataclass
class CompoundSeries:
    compound: str
    points: List[CompoundPoint] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return any(p.detected for p in self.points)

    def to_dict(self) -> dict:
        return {
            "chemicalName": self.compound,
            "data": [p.to_dict() for p in self.points],
            "hasData": self.has_data,
        }


def join_compound(snapshots: Iterable[Snapshot], compound: str) -> CompoundSeries:
    """One point per snapshot for ``compound``; absent snapshots become not-detected points."""
    timeline = snapshots if isinstance(snapshots, SnapshotTimeline) else SnapshotTimeline(snapshots)
    points: List[CompoundPoint] = []
    name = compound

    for snapshot in timeline:
        record = snapshot.find_compound(compound)
        if record is None:
            points.append(CompoundPoint(
                date=snapshot.date,
                test_id=snapshot.test_id,
                tested=False,
            ))
            continue

        name = record.compound
        points.append(CompoundPoint(
            date=record.date.strip() if record.date and record.date.strip() else snapshot.date,
            test_id=snapshot.test_id,
            value=record.value,
            percentile=record.percentile,
            detected=record.detected,
            range_low=record.range_low,
            range_high=record.range_high,
        ))

    # A record's own date can disagree with its snapshot's date
    points.sort(key=lambda p: date_sort_key(p.date, p.test_id))
    logger.debug(f"join_compound[{compound}]: {len(points)} points")
    return CompoundSeries(compound=name, points=points)


# ── Category series ───────────────────────────────────────────────────────────

@dataclass
class CategoryPoint:
    date: str
    test_id: int
    total_detected: int = 0
    total_chemicals: int = 0
    average_percentile: Optional[float] = None

    @property
    def detection_rate(self) -> float:
        if self.total_chemicals == 0:
            return 0.0
        return self.total_detected / self.total_chemicals

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "testId": self.test_id,
            "averagePercentile": self.average_percentile,
            "detectionRate": self.detection_rate,
            "detectionRatePercent": to_percent(self.detection_rate),
            "totalDetected": self.total_detected,
            "totalChemicals": self.total_chemicals,
        }


@dataclass
class CategorySeries:
    category: str
    points: List[CategoryPoint] = field(default_factory=list)

    @property
    def has_data(self) -> bool:
        return any(p.total_detected > 0 for p in self.points)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "data": [p.to_dict() for p in self.points],
            "hasData": self.has_data,
        }


def join_category(snapshots: Iterable[Snapshot], category: str) -> CategorySeries:
    """Per-snapshot detection counts and mean detected percentile for ``category``."""
    timeline = snapshots if isinstance(snapshots, SnapshotTimeline) else SnapshotTimeline(snapshots)
    canonical = CategoryId.lookup(category)
    points: List[CategoryPoint] = []

    for snapshot in timeline:
        stats = aggregate(snapshot.records, category)
        if stats.total_count == 0:
            continue
        points.append(CategoryPoint(
            date=snapshot.date,
            test_id=snapshot.test_id,
            total_detected=stats.detected_count,
            total_chemicals=stats.total_count,
            average_percentile=stats.average_percentile,
        ))

    logger.debug(f"join_category[{category}]: {len(points)} points")
    return CategorySeries(
        category=canonical.label if canonical else category,
        points=points,
    )


def join(
    snapshots: Iterable[Snapshot],
    key: str,
    kind: SeriesKind = SeriesKind.COMPOUND,
) -> Union[CompoundSeries, CategorySeries]:
    """Align ``key`` across snapshots as a compound or a category series."""
    if SeriesKind(kind) == SeriesKind.CATEGORY:
        return join_category(snapshots, key)
    return join_compound(snapshots, key)
