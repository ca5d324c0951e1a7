"""
Category Insight Calculator

Derives the short summary facts shown above a category (or the whole
snapshot). Each insight is computed independently and carries its own
``meaningful`` flag; only meaningful insights are returned.

  average_percentile  – detected records only, absent percentile counts as 0
  highest_percentile  – first detected record with the maximal percentile
  detection_rate      – shown whenever records exist, including 0 %
  most_common_source  – over all records, first-seen wins ties
  category_comparison – only with the cross-category collection, and only
                        when the relative difference exceeds 5 points
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Union

from ..classification import (
    average_detected_percentile,
    detected_records,
    group_by_category,
    to_percent,
)
from ..records import MeasurementRecord, normalize_key

logger = logging.getLogger(__name__)

# Relative difference (percentage points) below which a comparison is noise
COMPARISON_MIN_DIFF = 5.0


class InsightType(str, Enum):
    AVERAGE_PERCENTILE  = "averagePercentile"
    HIGHEST_PERCENTILE  = "highestPercentile"
    DETECTION_RATE      = "detectionRate"
    MOST_COMMON_SOURCE  = "mostCommonSource"
    CATEGORY_COMPARISON = "categoryComparison"


@dataclass(frozen=True)
class Insight:
    """One derived summary fact. Never cached: recomputed from current inputs."""
    type: InsightType
    label: str
    value: Union[int, float, str]
    sub_value: Optional[str] = None
    meaningful: bool = True

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "label": self.label,
            "value": self.value,
            "subValue": self.sub_value,
            "meaningful": self.meaningful,
        }


def _plural(count: int, word: str, plural: Optional[str] = None) -> str:
    return f"{count} {word if count == 1 else (plural or word + 's')}"


# ── Individual insights ───────────────────────────────────────────────────────

def average_percentile_insight(records: Sequence[MeasurementRecord]) -> Insight:
    average = average_detected_percentile(records)
    detected_count = len(detected_records(records))
    return Insight(
        type=InsightType.AVERAGE_PERCENTILE,
        label="Average Percentile",
        value=to_percent(average),
        sub_value=f"across {_plural(detected_count, 'detected chemical')}",
        meaningful=detected_count > 0,
    )


def highest_percentile_insight(records: Sequence[MeasurementRecord]) -> Insight:
    detected = detected_records(records)
    if not detected:
        return Insight(
            type=InsightType.HIGHEST_PERCENTILE,
            label="Highest Percentile",
            value="",
            meaningful=False,
        )
    # max() keeps the first of equal maxima
    top = max(detected, key=lambda r: r.percentile or 0.0)
    return Insight(
        type=InsightType.HIGHEST_PERCENTILE,
        label="Highest Percentile",
        value=top.compound,
        sub_value=f"{to_percent(top.percentile)}th percentile",
    )


def detection_rate_insight(records: Sequence[MeasurementRecord]) -> Insight:
    total = len(records)
    detected_count = len(detected_records(records))
    rate = detected_count / total if total else 0.0
    return Insight(
        type=InsightType.DETECTION_RATE,
        label="Detection Rate",
        value=to_percent(rate),
        sub_value=f"{detected_count} of {total} detected",
        meaningful=total > 0,
    )


def most_common_source_insight(records: Sequence[MeasurementRecord]) -> Insight:
    if not records:
        return Insight(
            type=InsightType.MOST_COMMON_SOURCE,
            label="Most Common Source",
            value="",
            meaningful=False,
        )
    # Counter preserves first-seen order and most_common() is a stable sort
    counts = Counter(r.primary_source or "Unknown" for r in records)
    source, count = counts.most_common(1)[0]
    return Insight(
        type=InsightType.MOST_COMMON_SOURCE,
        label="Most Common Source",
        value=source,
        sub_value=_plural(count, "chemical"),
    )


def category_comparison_insight(
    records: Sequence[MeasurementRecord],
    all_records: Sequence[MeasurementRecord],
) -> Insight:
    """
    Compare this category's mean detected percentile with the mean of the
    per-category means of every other category that has a detection.
    """
    not_meaningful = Insight(
        type=InsightType.CATEGORY_COMPARISON,
        label="vs. Other Categories",
        value="",
        meaningful=False,
    )

    this_average = average_detected_percentile(records)
    if this_average is None:
        return not_meaningful

    own_keys = {r.category_key for r in records}
    other_averages = []
    for label, members in group_by_category(all_records).items():
        if normalize_key(label) in own_keys:
            continue
        average = average_detected_percentile(members)
        if average is not None:
            other_averages.append(average)

    if not other_averages:
        return not_meaningful
    others_average = sum(other_averages) / len(other_averages)
    if others_average == 0:
        return not_meaningful

    diff = (this_average - others_average) / others_average * 100
    # Exactly 5 % is noise; round off float error before comparing
    if round(abs(diff), 9) <= COMPARISON_MIN_DIFF:
        logger.debug(f"category_comparison: |{diff:.1f}| within noise threshold")
        return not_meaningful

    direction = "higher" if diff > 0 else "lower"
    return Insight(
        type=InsightType.CATEGORY_COMPARISON,
        label="vs. Other Categories",
        value=f"{to_percent(abs(diff) / 100)}% {direction}",
        sub_value=f"than the average of {_plural(len(other_averages), 'other category', 'other categories')}",
    )


# ── Entry point ───────────────────────────────────────────────────────────────

def compute_insights(
    category_records: Sequence[MeasurementRecord],
    all_records: Optional[Sequence[MeasurementRecord]] = None,
) -> List[Insight]:
    """
    Meaningful insights for a category's records (or for a whole snapshot).

    Pass ``all_records`` (the full cross-category collection) to enable the
    category comparison.
    """
    category_records = list(category_records)
    insights = [
        average_percentile_insight(category_records),
        highest_percentile_insight(category_records),
        detection_rate_insight(category_records),
        most_common_source_insight(category_records),
    ]
    if all_records is not None:
        insights.append(category_comparison_insight(category_records, list(all_records)))

    return [i for i in insights if i.meaningful]
