"""
Category Aggregation and Classification

Groups measurement records by exposure category, reports detection counts
and rolls the individual classifications of a category's detected compounds
up into a single category band.

Decision rules (evaluated in order, detected compounds only):
  1. three or more Pay Attention compounds        → Pay Attention
  2. three or more Monitor Only, or any Pay Attention → Monitor Only
  3. otherwise                                      → Low Exposure

A single high-percentile compound lifts a clean category to Monitor Only,
but the category only reaches Pay Attention with a cluster of them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..records import CategoryId, MeasurementRecord, normalize_key
from .base import ExposureDistribution, ExposureLevel, to_percent
from .individual import classify_record

logger = logging.getLogger(__name__)

PAY_ATTENTION_CLUSTER = 3
MONITOR_ONLY_CLUSTER = 3


# ── Helpers ───────────────────────────────────────────────────────────────────

def detected_records(records: Iterable[MeasurementRecord]) -> List[MeasurementRecord]:
    return [r for r in records if r.detected]


def average_detected_percentile(records: Iterable[MeasurementRecord]) -> Optional[float]:
    """
    Mean percentile over detected records, absent percentiles counting as 0.

    Returns None when nothing was detected.
    """
    detected = detected_records(records)
    if not detected:
        return None
    return sum(r.percentile or 0.0 for r in detected) / len(detected)


def sort_by_percentile(records: Iterable[MeasurementRecord]) -> List[MeasurementRecord]:
    """Highest percentile first; absent percentile sorts as 0; ties keep input order."""
    return sorted(records, key=lambda r: r.percentile or 0.0, reverse=True)


def exposure_distribution(records: Iterable[MeasurementRecord]) -> ExposureDistribution:
    distribution = ExposureDistribution()
    for record in records:
        distribution.add(classify_record(record))
    return distribution


# ── Classification ────────────────────────────────────────────────────────────

def classify_category_counts(pay_attention_count: int, monitor_only_count: int) -> ExposureLevel:
    if pay_attention_count >= PAY_ATTENTION_CLUSTER:
        return ExposureLevel.PAY_ATTENTION
    if monitor_only_count >= MONITOR_ONLY_CLUSTER or pay_attention_count >= 1:
        return ExposureLevel.MONITOR_ONLY
    return ExposureLevel.LOW_EXPOSURE


def classify_category(records: Iterable[MeasurementRecord]) -> ExposureLevel:
    """Category band from the records of one category in one snapshot."""
    distribution = exposure_distribution(records)
    return classify_category_counts(distribution.pay_attention, distribution.monitor_only)


# ── Aggregation ───────────────────────────────────────────────────────────────

@dataclass
class CategoryStats:
    """Detection counts and classification for one category in one snapshot."""
    category: str
    records: List[MeasurementRecord] = field(default_factory=list)
    classification: ExposureLevel = ExposureLevel.LOW_EXPOSURE

    @property
    def detected(self) -> List[MeasurementRecord]:
        return detected_records(self.records)

    @property
    def detected_count(self) -> int:
        return len(self.detected)

    @property
    def total_count(self) -> int:
        return len(self.records)

    @property
    def detection_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.detected_count / self.total_count

    @property
    def average_percentile(self) -> Optional[float]:
        return average_detected_percentile(self.records)

    def to_dict(self, include_records: bool = True) -> dict:
        result = {
            "category": self.category,
            "detected_count": self.detected_count,
            "total_count": self.total_count,
            "detection_rate": to_percent(self.detection_rate),
            "average_percentile": self.average_percentile,
            "classification": self.classification.value,
            "classification_label": self.classification.label,
        }
        if include_records:
            result["chemicals"] = [r.to_dict() for r in self.records]
        return result


def group_by_category(records: Iterable[MeasurementRecord]) -> Dict[str, List[MeasurementRecord]]:
    """
    Group records by category, preserving first-seen order.

    Names differing only in case or whitespace land in the same group,
    labelled with the canonical name when there is one, else the first seen.
    """
    labels: Dict[str, str] = {}
    groups: Dict[str, List[MeasurementRecord]] = {}
    for record in records:
        key = record.category_key
        if key not in labels:
            canonical = CategoryId.lookup(record.category)
            labels[key] = canonical.label if canonical else record.category.strip()
            groups[labels[key]] = []
        groups[labels[key]].append(record)
    return groups


def aggregate(records: Iterable[MeasurementRecord], category: str) -> CategoryStats:
    """Stats for a single category. Unknown or empty categories get zero counts."""
    key = normalize_key(category)
    members = [r for r in records if r.category_key == key]
    canonical = CategoryId.lookup(category)
    return CategoryStats(
        category=canonical.label if canonical else category,
        records=members,
        classification=classify_category(members),
    )


def category_stats(
    records: Sequence[MeasurementRecord],
    categories: Optional[Sequence[str]] = None,
) -> List[CategoryStats]:
    """
    Stats for every category, most detections first.

    Every name in ``categories`` (default: the canonical list) appears even
    when the snapshot has no records for it. Categories present in the data
    but missing from the list are included as well.
    """
    wanted = list(categories) if categories is not None else CategoryId.canonical_labels()
    groups = group_by_category(records)
    grouped_by_key = {normalize_key(label): label for label in groups}

    stats: List[CategoryStats] = []
    seen = set()
    for name in wanted:
        key = normalize_key(name)
        if key in seen:
            continue
        seen.add(key)
        label = grouped_by_key.get(key)
        members = groups[label] if label is not None else []
        stats.append(CategoryStats(
            category=label if label is not None else name,
            records=sort_by_percentile(members),
            classification=classify_category(members),
        ))

    for label, members in groups.items():
        if normalize_key(label) in seen:
            continue
        logger.debug(f"category_stats: non-canonical category {label!r} ({len(members)} records)")
        stats.append(CategoryStats(
            category=label,
            records=sort_by_percentile(members),
            classification=classify_category(members),
        ))

    stats.sort(key=lambda s: s.detected_count, reverse=True)
    return stats
