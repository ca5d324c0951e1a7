"""
Snapshot Summaries

Whole-snapshot views built on the individual classifier: exposure filters,
priority chemicals, source breakdown and the detection summary shown next
to the configured population baseline.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ..records import MeasurementRecord
from .base import ExposureDistribution, ExposureLevel, to_percent
from .category import (
    average_detected_percentile,
    detected_records,
    exposure_distribution,
    sort_by_percentile,
)
from .individual import classify_record


def filter_by_exposure(
    records: Iterable[MeasurementRecord],
    level: ExposureLevel,
) -> List[MeasurementRecord]:
    return [r for r in records if classify_record(r) == level]


def top_priority_chemicals(
    records: Iterable[MeasurementRecord],
    max_count: int = 8,
) -> List[MeasurementRecord]:
    """
    Detected chemicals ranked by percentile.

    When any are Pay Attention only those are returned, otherwise the
    highest-ranked detected chemicals fill the list.
    """
    ranked = sort_by_percentile(detected_records(records))
    priority = [r for r in ranked if classify_record(r) == ExposureLevel.PAY_ATTENTION]
    chosen = priority if priority else ranked
    return chosen[:max_count]


@dataclass
class SourceBreakdown:
    """Records sharing one primary source."""
    source: str
    total_count: int = 0
    detected_count: int = 0
    average_percentile: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "total_count": self.total_count,
            "detected_count": self.detected_count,
            "average_percentile": self.average_percentile,
        }


def source_distribution(records: Sequence[MeasurementRecord]) -> List[SourceBreakdown]:
    """Breakdown by primary source, most records first (ties keep first-seen order)."""
    grouped: Dict[str, List[MeasurementRecord]] = {}
    for record in records:
        grouped.setdefault(record.primary_source or "Unknown", []).append(record)

    breakdown = [
        SourceBreakdown(
            source=source,
            total_count=len(members),
            detected_count=len(detected_records(members)),
            average_percentile=average_detected_percentile(members),
        )
        for source, members in grouped.items()
    ]
    breakdown.sort(key=lambda b: b.total_count, reverse=True)
    return breakdown


def exposure_sources(records: Iterable[MeasurementRecord]) -> Set[str]:
    """Unique primary and secondary sources among detected records."""
    sources: Set[str] = set()
    for record in detected_records(records):
        if record.primary_source:
            sources.add(record.primary_source.strip())
        if record.secondary_sources:
            sources.update(s.strip() for s in record.secondary_sources.split(",") if s.strip())
    return sources


@dataclass
class DetectionSummary:
    """Headline detection figures for one snapshot."""
    detected_count: int
    total_count: int
    average_percentile: Optional[float]
    categories_detected: int
    exposure_source_count: int
    baseline_detection_rate: float
    distribution: ExposureDistribution = field(default_factory=ExposureDistribution)

    @property
    def detection_rate(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.detected_count / self.total_count

    @property
    def baseline_difference(self) -> float:
        """Signed difference from the configured baseline, as a fraction."""
        return self.detection_rate - self.baseline_detection_rate

    def to_dict(self) -> dict:
        return {
            "detected_count": self.detected_count,
            "total_count": self.total_count,
            "detection_rate": to_percent(self.detection_rate),
            "average_percentile": to_percent(self.average_percentile),
            "categories_detected": self.categories_detected,
            "exposure_sources": self.exposure_source_count,
            "baseline_detection_rate": to_percent(self.baseline_detection_rate),
            "baseline_difference": to_percent(self.baseline_difference),
            "distribution": self.distribution.to_dict(),
        }


def detection_summary(
    records: Sequence[MeasurementRecord],
    baseline_detection_rate: float,
) -> DetectionSummary:
    """
    Summarize one snapshot.

    ``baseline_detection_rate`` is a configured reference value, not something
    derived from the records.
    """
    detected = detected_records(records)
    categories = Counter(r.category_key for r in detected if r.category_key)
    return DetectionSummary(
        detected_count=len(detected),
        total_count=len(records),
        average_percentile=average_detected_percentile(records),
        categories_detected=len(categories),
        exposure_source_count=len(exposure_sources(records)),
        baseline_detection_rate=baseline_detection_rate,
        distribution=exposure_distribution(records),
    )
