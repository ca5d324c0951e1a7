"""
Trend Calculator

Three views of change over time:

  consecutive pair – detected-count change since the previous test; a jump
                     from zero detections counts as +100 % ("new detections")
  banded           – each period's mean detected percentile mapped onto the
                     same Low / Med / High thresholds used for classification
  linear           – OLS slope of values over point index, normalized by the
                     series mean, for chemical-level interpretation
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

import numpy as np
from scipy import stats

from ..classification import (
    CategoryStats,
    ExposureLevel,
    aggregate,
    average_detected_percentile,
    category_stats,
    percentile_band,
)
from ..records import Snapshot, SnapshotTimeline, format_period_label
from .joiner import CategorySeries

logger = logging.getLogger(__name__)

# ── Thresholds ────────────────────────────────────────────────────────────────
PAIR_CHANGE_THRESHOLD = 10.0     # |change %| above which a pair is not stable
NEW_DETECTIONS_CHANGE = 100.0    # previous had none, current has some
LINEAR_SLOPE_THRESHOLD = 0.1     # normalized slope above which a series trends


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE     = "stable"


class BandLevel(str, Enum):
    LOW  = "Low"
    MED  = "Med"
    HIGH = "High"


_BAND_FOR_LEVEL = {
    ExposureLevel.LOW_EXPOSURE:  (BandLevel.LOW, 0),
    ExposureLevel.MONITOR_ONLY:  (BandLevel.MED, 1),
    ExposureLevel.PAY_ATTENTION: (BandLevel.HIGH, 2),
}


class BandMode(str, Enum):
    OVERALL  = "overall"    # mean over every detected record
    CATEGORY = "category"   # mean of per-category means


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    change_percent: float

    def to_dict(self) -> dict:
        return {"direction": self.direction.value, "changePercent": self.change_percent}


@dataclass(frozen=True)
class TrendPoint:
    """Consecutive-pair trend for one key between two snapshots."""
    period_label: str
    direction: TrendDirection
    change_percent: float

    def to_dict(self) -> dict:
        return {
            "periodLabel": self.period_label,
            "direction": self.direction.value,
            "changePercent": self.change_percent,
        }


@dataclass(frozen=True)
class TrendBand:
    period_label: str
    level: BandLevel
    value: int
    test_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "month": self.period_label,
            "level": self.level.value,
            "value": self.value,
            "testId": self.test_id,
        }


# ── Consecutive pair ──────────────────────────────────────────────────────────

def compute_trend(previous_detected: Optional[int], current_detected: int) -> Trend:
    """
    Change in detected count between two tests.

    ``previous_detected`` of None means there is no earlier test to compare
    with, which is reported as stable with no change.
    """
    if previous_detected is None:
        return Trend(TrendDirection.STABLE, 0.0)

    if previous_detected > 0:
        change = (current_detected - previous_detected) / previous_detected * 100
    elif current_detected > 0:
        change = NEW_DETECTIONS_CHANGE
    else:
        change = 0.0

    if abs(change) > PAIR_CHANGE_THRESHOLD:
        direction = TrendDirection.INCREASING if change > 0 else TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE
    return Trend(direction, change)


def series_trend_points(series: CategorySeries) -> List[TrendPoint]:
    """One trend point per consecutive pair of a category series."""
    points = series.points
    trend_points = []
    for previous, current in zip(points, points[1:]):
        trend = compute_trend(previous.total_detected, current.total_detected)
        trend_points.append(TrendPoint(
            period_label=format_period_label(current.date),
            direction=trend.direction,
            change_percent=trend.change_percent,
        ))
    return trend_points


@dataclass
class CategoryTrend:
    """A category in the selected test compared with the test before it."""
    category: str
    current: CategoryStats
    previous: Optional[CategoryStats]
    trend: Trend

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "currentTest": self.current.to_dict(include_records=False),
            "previousTest": self.previous.to_dict(include_records=False) if self.previous else None,
            "trend": self.trend.direction.value,
            "changePercent": self.trend.change_percent,
        }


def category_trends_since_previous(
    timeline: SnapshotTimeline,
    test_id: int,
    limit: Optional[int] = None,
) -> List[CategoryTrend]:
    """
    Detected-count trend for every category of ``test_id`` against the test
    preceding it in date order, largest changes first.
    """
    current_snapshot = timeline.get(test_id)
    if current_snapshot is None:
        return []
    previous_snapshot = timeline.previous(test_id)

    trends: List[CategoryTrend] = []
    for current in category_stats(current_snapshot.records, categories=[]):
        previous = None
        if previous_snapshot is not None:
            candidate = aggregate(previous_snapshot.records, current.category)
            if candidate.total_count > 0:
                previous = candidate
        trend = compute_trend(
            previous.detected_count if previous else None,
            current.detected_count,
        )
        trends.append(CategoryTrend(current.category, current, previous, trend))

    trends.sort(key=lambda t: abs(t.trend.change_percent), reverse=True)
    return trends[:limit] if limit is not None else trends


# ── Banded ────────────────────────────────────────────────────────────────────

def _band(period_label: str, average_percentile: Optional[float], test_id: int) -> TrendBand:
    level, value = _BAND_FOR_LEVEL[percentile_band(average_percentile)]
    return TrendBand(period_label, level, value, test_id)


def _period_average(snapshot: Snapshot, mode: BandMode) -> Optional[float]:
    if mode == BandMode.OVERALL:
        return average_detected_percentile(snapshot.records)
    category_means = [
        c.average_percentile
        for c in category_stats(snapshot.records)
        if c.average_percentile is not None
    ]
    if not category_means:
        return None
    return sum(category_means) / len(category_means)


def compute_trend_band(
    snapshots: Iterable[Snapshot],
    mode: BandMode = BandMode.OVERALL,
    periods: Optional[int] = None,
) -> List[TrendBand]:
    """
    Banded exposure level per test, oldest first. A test with no detections
    is Low. ``periods`` keeps only the most recent N tests.
    """
    timeline = snapshots if isinstance(snapshots, SnapshotTimeline) else SnapshotTimeline(snapshots)
    mode = BandMode(mode)
    bands = [
        _band(format_period_label(s.date), _period_average(s, mode), s.test_id)
        for s in timeline
    ]
    if periods is not None and periods > 0:
        bands = bands[-periods:]
    return bands


# ── Linear ────────────────────────────────────────────────────────────────────

def linear_trend(values: Sequence[float]) -> float:
    """
    Least-squares slope of ``values`` over their index, divided by the mean.
    Zero when there are fewer than two values or the mean is zero.
    """
    y = np.asarray(values, dtype=float)
    if y.size < 2:
        return 0.0
    mean = float(y.mean())
    if mean == 0:
        return 0.0
    x = np.arange(y.size, dtype=float)
    slope = stats.linregress(x, y).slope
    return float(slope / mean)


def classify_linear_trend(values: Sequence[float]) -> TrendDirection:
    slope = linear_trend(values)
    if slope > LINEAR_SLOPE_THRESHOLD:
        return TrendDirection.INCREASING
    if slope < -LINEAR_SLOPE_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE
